"""
Validation utilities and validators.
Centralized validation logic following single responsibility principle.
"""
from decimal import Decimal
from core.constants import DefaultLimits, PaymentType, DepositStatus
from core.exceptions import ValidationError as AppValidationError


class AmountValidator:
    """Validates money amounts"""

    MAX_AMOUNT = Decimal('9999999.99')

    @staticmethod
    def validate_non_negative(amount, field_name: str = "amount"):
        """Validate that an amount is present and not negative"""
        if amount is None:
            raise AppValidationError(
                message=f"{field_name} is required",
                code="AMOUNT_REQUIRED",
                details={"field": field_name}
            )
        amount = Decimal(str(amount))
        if amount < 0:
            raise AppValidationError(
                message=f"{field_name} cannot be negative",
                code="NEGATIVE_AMOUNT",
                details={"field": field_name, "value": str(amount)}
            )
        if amount > AmountValidator.MAX_AMOUNT:
            raise AppValidationError(
                message=f"{field_name} exceeds maximum allowed",
                code="AMOUNT_TOO_LARGE",
                details={"field": field_name, "value": str(amount)}
            )
        return amount


class RoomValidator:
    """Validates room data"""

    @staticmethod
    def validate_capacity(capacity):
        if capacity is None or not (DefaultLimits.MIN_ROOM_CAPACITY <= int(capacity) <= DefaultLimits.MAX_ROOM_CAPACITY):
            raise AppValidationError(
                message=f"Capacity must be between {DefaultLimits.MIN_ROOM_CAPACITY} and {DefaultLimits.MAX_ROOM_CAPACITY}",
                code="INVALID_CAPACITY",
                details={"capacity": capacity}
            )

    @staticmethod
    def validate_capacity_not_below_occupancy(capacity: int, active_count: int):
        """A room cannot shrink below the number of tenants living in it"""
        if capacity < active_count:
            raise AppValidationError(
                message=f"Capacity cannot be lower than current occupancy ({active_count})",
                code="CAPACITY_BELOW_OCCUPANCY",
                details={"capacity": capacity, "current_occupancy": active_count}
            )

    @staticmethod
    def validate_deposit_precision(amount: Decimal):
        """Security deposit allows at most 2 decimal places"""
        if Decimal(str(amount)).as_tuple().exponent < -2:
            raise AppValidationError(
                message="Security deposit cannot have more than 2 decimal places",
                code="INVALID_DEPOSIT_PRECISION"
            )


class PaymentValidator:
    """Validates payment data"""

    @staticmethod
    def validate_period_covered(payment_type: str, period_start, period_end):
        """Rent payments need a covered period whose start precedes its end"""
        if payment_type != PaymentType.RENT:
            return
        if not period_start or not period_end:
            raise AppValidationError(
                message="Period covered is required for rent payments",
                code="PERIOD_REQUIRED"
            )
        if period_start >= period_end:
            raise AppValidationError(
                message="Period start date must be before end date",
                code="INVALID_PERIOD",
                details={"start": str(period_start), "end": str(period_end)}
            )


class DepositValidator:
    """Validates security deposit updates"""

    @staticmethod
    def validate_status(status: str):
        if status not in DepositStatus.VALUES:
            raise AppValidationError(
                message=f"Invalid security deposit status: {status}",
                code="INVALID_DEPOSIT_STATUS",
                details={"allowed": DepositStatus.VALUES}
            )

    @staticmethod
    def validate_deduction(reason: str, amount):
        if not reason or not str(reason).strip():
            raise AppValidationError(
                message="Deduction reason is required",
                code="DEDUCTION_REASON_REQUIRED"
            )
        return AmountValidator.validate_non_negative(amount, "Deduction amount")
