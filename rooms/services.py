"""
Room service - Business logic layer for the Room domain.
Room creation, updates, manual status changes, maintenance and statistics.
Tenant placement lives in occupancy.services.
"""
from decimal import Decimal
from typing import List, Optional
from django.db import transaction, IntegrityError
from core.services import BaseService
from core.constants import RoomStatus, RoomType
from core.dto import RoomDTO
from core.exceptions import NotFoundError, ValidationError, InvalidStateTransitionError
from core.validators import AmountValidator, RoomValidator
from .models import Room
from .repositories import RoomRepository
from .status import RoomEvent, STATUS_EVENTS, transition

UPDATABLE_FIELDS = (
    'room_number', 'room_type', 'capacity', 'monthly_rent', 'security_deposit', 'description',
    'amenities', 'floor', 'area', 'last_service_date', 'next_service_date', 'maintenance_notes',
)

ROOM_TYPES = [value for value, _ in RoomType.CHOICES]
ROOM_STATUSES = [value for value, _ in RoomStatus.CHOICES]


def _round(value, places=2):
    if value is None:
        return Decimal('0')
    return round(Decimal(value), places)


class RoomService(BaseService):
    """Service for room lifecycle and room statistics"""

    def __init__(self):
        super().__init__()
        self.room_repo = RoomRepository()

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get_room(self, room_id: int) -> Room:
        room = self.room_repo.get_by_id(room_id)
        if not room:
            raise NotFoundError(resource_type="Room", resource_id=room_id)
        return room

    def get_room_by_number(self, room_number: str) -> Room:
        room = self.room_repo.get_by_number(room_number)
        if not room:
            raise NotFoundError(resource_type="Room", resource_id=room_number)
        return room

    def list_rooms(self, **filters) -> List[Room]:
        return list(self.room_repo.search(**filters))

    def get_available_rooms(self, **filters) -> List[Room]:
        return list(self.room_repo.find_available(**filters))

    def get_rooms_by_status(self, status: str) -> List[Room]:
        if status not in ROOM_STATUSES:
            raise ValidationError(message="Invalid room status", code="INVALID_ROOM_STATUS",
                                  details={"status": status, "allowed": ROOM_STATUSES})
        return list(self.room_repo.search(status=status))

    def get_rooms_due_for_maintenance(self, days_ahead: int = 30) -> List[Room]:
        return list(self.room_repo.find_due_for_maintenance(days_ahead))

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def create_room(self, room_data: RoomDTO) -> Room:
        """
        Create a room.

        Raises:
            ValidationError: invalid capacity/amounts/type, or duplicate room number
        """
        self._validate_room_data(room_data)
        if room_data.status == RoomStatus.OCCUPIED:
            raise ValidationError(message="A new room cannot start as occupied", code="INVALID_ROOM_STATUS")

        if not self.room_repo.is_room_number_available(room_data.room_number):
            raise ValidationError(message="Room number already exists", code="DUPLICATE_ROOM_NUMBER",
                                  details={"room_number": room_data.room_number})

        try:
            with transaction.atomic():
                room = self.room_repo.create(
                    room_number=room_data.room_number,
                    room_type=room_data.room_type,
                    capacity=room_data.capacity,
                    monthly_rent=room_data.monthly_rent,
                    security_deposit=room_data.security_deposit,
                    description=room_data.description,
                    amenities=room_data.amenities or [],
                    floor=room_data.floor,
                    area=room_data.area,
                    status=room_data.status,
                )
        except IntegrityError:
            # Lost a race against another create with the same number
            raise ValidationError(message="Room number already exists", code="DUPLICATE_ROOM_NUMBER",
                                  details={"room_number": room_data.room_number})

        self.log_info(f"Room created: {room.room_number}", room_id=room.id)
        return room

    def update_room(self, room_id: int, updates: dict) -> Room:
        """
        Update descriptive and pricing fields.

        Capacity may not drop below the current head count. The room number
        is the key tenants point at, so it can only change while the room is
        empty.
        """
        unknown = set(updates) - set(UPDATABLE_FIELDS)
        if unknown:
            raise ValidationError(message=f"Fields cannot be updated: {', '.join(sorted(unknown))}",
                                  code="INVALID_UPDATE_FIELDS")

        with transaction.atomic():
            room = self.room_repo.get_for_update(room_id)
            if not room:
                raise NotFoundError(resource_type="Room", resource_id=room_id)

            active_count = room.current_occupancy

            if 'capacity' in updates:
                RoomValidator.validate_capacity(updates['capacity'])
                RoomValidator.validate_capacity_not_below_occupancy(int(updates['capacity']), active_count)
            if 'monthly_rent' in updates:
                updates['monthly_rent'] = AmountValidator.validate_non_negative(updates['monthly_rent'], "Monthly rent")
            if 'security_deposit' in updates:
                updates['security_deposit'] = AmountValidator.validate_non_negative(
                    updates['security_deposit'], "Security deposit")
                RoomValidator.validate_deposit_precision(updates['security_deposit'])
            if 'room_type' in updates and updates['room_type'] not in ROOM_TYPES:
                raise ValidationError(message="Invalid room type", code="INVALID_ROOM_TYPE")

            new_number = updates.get('room_number')
            if new_number and new_number != room.room_number:
                if active_count > 0:
                    raise ValidationError(message="Room number can only be changed while the room is empty",
                                          code="ROOM_NOT_EMPTY", details={"current_occupancy": active_count})
                if not self.room_repo.is_room_number_available(new_number, exclude_id=room.id):
                    raise ValidationError(message="Room number already exists", code="DUPLICATE_ROOM_NUMBER",
                                          details={"room_number": new_number})

            for key, value in updates.items():
                setattr(room, key, value)
            room.status = transition(room.status, RoomEvent.OCCUPANCY_CHANGED, active_count, room.capacity)
            room.save()

        self.log_info(f"Room updated: {room.room_number}", room_id=room.id, fields=list(updates))
        return room

    def set_room_status(self, room_id: int, status: str) -> Room:
        """
        Staff-driven status change (maintenance, reserved, unavailable, or back to available).
        'occupied' is never set by hand; it follows from assignments.
        """
        if status == RoomStatus.OCCUPIED or status not in ROOM_STATUSES:
            raise ValidationError(message=f"Room status cannot be set to {status}", code="INVALID_ROOM_STATUS")

        with transaction.atomic():
            room = self.room_repo.get_for_update(room_id)
            if not room:
                raise NotFoundError(resource_type="Room", resource_id=room_id)

            if status == RoomStatus.AVAILABLE:
                event = RoomEvent.COMPLETE_MAINTENANCE if room.status == RoomStatus.MAINTENANCE else RoomEvent.RELEASE
            else:
                event = STATUS_EVENTS[status]

            previous = room.status
            room.status = transition(room.status, event, room.current_occupancy, room.capacity)
            room.save(update_fields=['status', 'updated_at'])

        self.log_info(f"Room status changed: {previous} -> {room.status}", room_id=room.id, event=event)
        return room

    def update_room_maintenance(self, room_id: int, last_service_date=None, next_service_date=None,
                                notes: Optional[str] = None, status: Optional[str] = None) -> Room:
        """
        Record maintenance details. status='maintenance' takes the room out of
        service; status='completed' hands it back to occupancy rules.
        """
        with transaction.atomic():
            room = self.room_repo.get_for_update(room_id)
            if not room:
                raise NotFoundError(resource_type="Room", resource_id=room_id)

            if last_service_date is not None:
                room.last_service_date = last_service_date
            if next_service_date is not None:
                room.next_service_date = next_service_date
            if notes is not None:
                room.maintenance_notes = notes

            if status == 'maintenance':
                room.status = transition(room.status, RoomEvent.START_MAINTENANCE,
                                         room.current_occupancy, room.capacity)
            elif status == 'completed' and room.status == RoomStatus.MAINTENANCE:
                room.status = transition(room.status, RoomEvent.COMPLETE_MAINTENANCE,
                                         room.current_occupancy, room.capacity)
            elif status not in (None, 'completed'):
                raise ValidationError(message=f"Invalid maintenance status: {status}",
                                      code="INVALID_MAINTENANCE_STATUS")
            room.save()

        self.log_info(f"Room maintenance updated: {room.room_number}", room_id=room.id, status=room.status)
        return room

    def delete_room(self, room_id: int) -> Room:
        """Soft delete. Only rooms with nobody living in them can be removed."""
        with transaction.atomic():
            room = self.room_repo.get_for_update(room_id, is_active=True)
            if not room:
                raise NotFoundError(resource_type="Room", resource_id=room_id)
            if room.current_occupancy > 0:
                raise InvalidStateTransitionError(
                    message="Cannot delete room with current tenants. Please unassign tenants first.",
                    current_status=room.status,
                    event='delete',
                )
            room.is_active = False
            room.save(update_fields=['is_active', 'updated_at'])

        self.log_info(f"Room deleted: {room.room_number}", room_id=room.id)
        return room

    def sync_status(self, room: Room) -> Room:
        """Re-derive status after tenancies changed. Caller holds the room row lock."""
        new_status = transition(room.status, RoomEvent.OCCUPANCY_CHANGED, room.current_occupancy, room.capacity)
        if new_status != room.status:
            self.log_info(f"Room {room.room_number} status {room.status} -> {new_status}", room_id=room.id)
            room.status = new_status
            room.save(update_fields=['status', 'updated_at'])
        return room

    # ------------------------------------------------------------------
    # Statistics
    # ------------------------------------------------------------------

    def get_room_statistics(self) -> dict:
        stats = self.room_repo.get_statistics()
        total_capacity = stats['total_capacity'] or 0
        current_occupancy = stats['current_occupancy'] or 0
        average_rent = _round(stats['average_rent'])
        occupancy_rate = _round(Decimal(current_occupancy) / Decimal(total_capacity) * 100) if total_capacity else Decimal('0')

        return {
            'overview': {
                'total_rooms': stats['total_rooms'],
                'available_rooms': stats['available_rooms'],
                'occupied_rooms': stats['occupied_rooms'],
                'maintenance_rooms': stats['maintenance_rooms'],
                'reserved_rooms': stats['reserved_rooms'],
                'unavailable_rooms': stats['unavailable_rooms'],
            },
            'occupancy': {
                'total_capacity': total_capacity,
                'current_occupancy': current_occupancy,
                'occupancy_rate': occupancy_rate,
                'available_spots': total_capacity - current_occupancy,
            },
            'financial': {
                'average_rent': average_rent,
                'total_rent_value': stats['total_rent_value'] or Decimal('0'),
                'potential_revenue': _round(total_capacity * average_rent),
            },
        }

    def get_occupancy_report(self) -> list:
        report = []
        for row in self.room_repo.get_occupancy_report():
            capacity = row['total_capacity'] or 0
            report.append({
                'room_type': row['room_type'],
                'total_rooms': row['total_rooms'],
                'total_capacity': capacity,
                'current_occupancy': row['current_occupancy'],
                'available_rooms': row['available_rooms'],
                'occupancy_rate': _round(Decimal(row['current_occupancy']) / Decimal(capacity) * 100) if capacity else Decimal('0'),
                'average_rent': _round(row['average_rent']),
                'total_rent_value': row['total_rent_value'] or Decimal('0'),
            })
        return report

    def _validate_room_data(self, room_data: RoomDTO):
        if not room_data.room_number or not str(room_data.room_number).strip():
            raise ValidationError(message="Room number is required", code="ROOM_NUMBER_REQUIRED")
        if len(room_data.room_number) > 10:
            raise ValidationError(message="Room number cannot exceed 10 characters", code="ROOM_NUMBER_TOO_LONG")
        if room_data.room_type not in ROOM_TYPES:
            raise ValidationError(message="Invalid room type", code="INVALID_ROOM_TYPE",
                                  details={"room_type": room_data.room_type, "allowed": ROOM_TYPES})
        if room_data.status not in ROOM_STATUSES:
            raise ValidationError(message="Invalid room status", code="INVALID_ROOM_STATUS")
        RoomValidator.validate_capacity(room_data.capacity)
        room_data.monthly_rent = AmountValidator.validate_non_negative(room_data.monthly_rent, "Monthly rent")
        room_data.security_deposit = AmountValidator.validate_non_negative(room_data.security_deposit, "Security deposit")
        RoomValidator.validate_deposit_precision(room_data.security_deposit)
