"""
Data Transfer Objects (DTOs).
Used for passing data between layers without exposing domain models.
"""
from dataclasses import dataclass, field
from typing import Optional, List
from decimal import Decimal
from datetime import date, datetime


@dataclass
class RoomDTO:
    """Data Transfer Object for Room"""
    id: Optional[int] = None
    room_number: str = ""
    room_type: str = "single"
    capacity: int = 1
    monthly_rent: Decimal = Decimal('0')
    security_deposit: Decimal = Decimal('0')
    description: str = ""
    amenities: List[str] = field(default_factory=list)
    floor: Optional[int] = None
    area: Optional[Decimal] = None
    status: str = "available"


@dataclass
class AssignmentDTO:
    """One tenant to place in a room"""
    tenant_id: int = None
    rent_amount: Optional[Decimal] = None
    security_deposit_amount: Optional[Decimal] = None


@dataclass
class SecurityDepositUpdateDTO:
    """Partial update for a tenancy's deposit record; None means unchanged"""
    amount: Optional[Decimal] = None
    status: Optional[str] = None
    date_paid: Optional[datetime] = None
    date_refunded: Optional[datetime] = None
    refund_amount: Optional[Decimal] = None
    notes: Optional[str] = None


@dataclass
class PaymentDTO:
    """Data Transfer Object for Payment"""
    id: Optional[int] = None
    tenant_id: int = None
    room_id: int = None
    amount: Decimal = Decimal('0')
    payment_type: str = "rent"
    payment_method: str = "cash"
    due_date: datetime = None
    status: str = "pending"
    payment_date: Optional[datetime] = None
    period_start: Optional[date] = None
    period_end: Optional[date] = None
    transaction_reference: str = ""
    description: str = ""
    notes: str = ""
    late_fee_amount: Optional[Decimal] = None
