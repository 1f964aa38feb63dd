"""Room lifecycle, manual statuses, maintenance and statistics."""
from datetime import date
from decimal import Decimal

import pytest

from core.constants import RoomStatus
from core.dto import RoomDTO
from core.exceptions import NotFoundError, ValidationError, InvalidStateTransitionError
from rooms.models import Room


pytestmark = pytest.mark.django_db


def test_create_room(make_room):
    room = make_room('A-1', capacity=2, room_type='double', amenities=['wifi', 'aircon'], floor=1)

    assert room.status == RoomStatus.AVAILABLE
    assert room.current_occupancy == 0
    assert room.available_spots == 2
    assert room.amenities == ['wifi', 'aircon']


def test_room_number_must_be_unique(make_room):
    make_room('101')

    with pytest.raises(ValidationError) as exc:
        make_room('101')
    assert exc.value.code == 'DUPLICATE_ROOM_NUMBER'


@pytest.mark.parametrize("overrides, code", [
    ({'room_number': ''}, 'ROOM_NUMBER_REQUIRED'),
    ({'capacity': 0}, 'INVALID_CAPACITY'),
    ({'capacity': 11}, 'INVALID_CAPACITY'),
    ({'monthly_rent': Decimal('-1')}, 'NEGATIVE_AMOUNT'),
    ({'security_deposit': Decimal('10.005')}, 'INVALID_DEPOSIT_PRECISION'),
    ({'room_type': 'castle'}, 'INVALID_ROOM_TYPE'),
    ({'status': RoomStatus.OCCUPIED}, 'INVALID_ROOM_STATUS'),
])
def test_create_room_validation(room_service, overrides, code):
    data = RoomDTO(room_number='900', capacity=1, monthly_rent=Decimal('1000'))
    for key, value in overrides.items():
        setattr(data, key, value)

    with pytest.raises(ValidationError) as exc:
        room_service.create_room(data)
    assert exc.value.code == code


def test_capacity_cannot_drop_below_occupancy(make_room, make_tenant, room_service, occupancy_service):
    room = make_room('201', capacity=3, room_type='triple')
    for _ in range(2):
        occupancy_service.assign_tenant(room.id, make_tenant().id)

    with pytest.raises(ValidationError) as exc:
        room_service.update_room(room.id, {'capacity': 1})
    assert exc.value.code == 'CAPACITY_BELOW_OCCUPANCY'

    room = room_service.update_room(room.id, {'capacity': 2})
    assert room.status == RoomStatus.OCCUPIED

    room = room_service.update_room(room.id, {'capacity': 4})
    assert room.status == RoomStatus.AVAILABLE


def test_room_number_changes_only_while_empty(assigned, make_room, room_service):
    room, _ = assigned
    empty = make_room('102')

    with pytest.raises(ValidationError) as exc:
        room_service.update_room(room.id, {'room_number': '101A'})
    assert exc.value.code == 'ROOM_NOT_EMPTY'

    with pytest.raises(ValidationError) as exc:
        room_service.update_room(empty.id, {'room_number': '101'})
    assert exc.value.code == 'DUPLICATE_ROOM_NUMBER'

    assert room_service.update_room(empty.id, {'room_number': '102B'}).room_number == '102B'


def test_update_rejects_unknown_fields(room, room_service):
    with pytest.raises(ValidationError):
        room_service.update_room(room.id, {'status': RoomStatus.OCCUPIED})


def test_update_missing_room(db, room_service):
    with pytest.raises(NotFoundError):
        room_service.update_room(9999, {'description': "Sea view"})


def test_set_room_status(room, room_service):
    assert room_service.set_room_status(room.id, RoomStatus.RESERVED).status == RoomStatus.RESERVED
    assert room_service.set_room_status(room.id, RoomStatus.AVAILABLE).status == RoomStatus.AVAILABLE
    assert room_service.set_room_status(room.id, RoomStatus.MAINTENANCE).status == RoomStatus.MAINTENANCE
    assert room_service.set_room_status(room.id, RoomStatus.AVAILABLE).status == RoomStatus.AVAILABLE

    with pytest.raises(ValidationError):
        room_service.set_room_status(room.id, RoomStatus.OCCUPIED)


def test_release_returns_occupied_room_to_occupied(assigned, room_service):
    room, _ = assigned
    room_service.set_room_status(room.id, RoomStatus.UNAVAILABLE)

    assert room_service.set_room_status(room.id, RoomStatus.AVAILABLE).status == RoomStatus.OCCUPIED


def test_full_room_cannot_be_reserved(assigned, room_service):
    room, _ = assigned

    with pytest.raises(InvalidStateTransitionError):
        room_service.set_room_status(room.id, RoomStatus.RESERVED)


def test_maintenance_cycle(room, room_service):
    room = room_service.update_room_maintenance(
        room.id, last_service_date=date(2024, 11, 1), next_service_date=date(2025, 5, 1),
        notes="Aircon cleaning", status='maintenance',
    )
    assert room.status == RoomStatus.MAINTENANCE
    assert room.maintenance_notes == "Aircon cleaning"

    room = room_service.update_room_maintenance(room.id, status='completed')
    assert room.status == RoomStatus.AVAILABLE
    assert room.next_service_date == date(2025, 5, 1)

    with pytest.raises(ValidationError):
        room_service.update_room_maintenance(room.id, status='broken')


def test_delete_room(assigned, make_room, room_service):
    room, _ = assigned
    empty = make_room('102')

    with pytest.raises(InvalidStateTransitionError):
        room_service.delete_room(room.id)

    room_service.delete_room(empty.id)
    assert not Room.objects.get(id=empty.id).is_active
    assert [r.room_number for r in room_service.list_rooms()] == ['101']
    with pytest.raises(NotFoundError):
        room_service.delete_room(empty.id)


def test_available_rooms_and_filters(make_room, make_tenant, occupancy_service, room_service):
    full = make_room('101')
    make_room('102', monthly_rent='3500.00')
    make_room('201', capacity=2, room_type='double', floor=2)
    occupancy_service.assign_tenant(full.id, make_tenant().id)

    assert [r.room_number for r in room_service.get_available_rooms()] == ['102', '201']
    assert [r.room_number for r in room_service.get_available_rooms(max_rent=Decimal('3000'))] == ['201']
    assert [r.room_number for r in room_service.list_rooms(floor=2)] == ['201']
    assert [r.room_number for r in room_service.get_rooms_by_status(RoomStatus.OCCUPIED)] == ['101']
    with pytest.raises(ValidationError):
        room_service.get_rooms_by_status('flooded')


def test_room_statistics(make_room, make_tenant, occupancy_service, room_service):
    single = make_room('101', monthly_rent='2000.00')
    make_room('201', capacity=2, room_type='double', monthly_rent='3000.00')
    occupancy_service.assign_tenant(single.id, make_tenant().id)

    stats = room_service.get_room_statistics()

    assert stats['overview']['total_rooms'] == 2
    assert stats['overview']['occupied_rooms'] == 1
    assert stats['overview']['available_rooms'] == 1
    assert stats['occupancy']['total_capacity'] == 3
    assert stats['occupancy']['current_occupancy'] == 1
    assert stats['occupancy']['available_spots'] == 2
    assert stats['occupancy']['occupancy_rate'] == Decimal('33.33')
    assert stats['financial']['average_rent'] == Decimal('2500.00')


def test_occupancy_report(make_room, make_tenant, occupancy_service, room_service):
    double = make_room('201', capacity=2, room_type='double')
    make_room('101')
    occupancy_service.assign_tenant(double.id, make_tenant().id)

    report = {row['room_type']: row for row in room_service.get_occupancy_report()}

    assert report['double']['current_occupancy'] == 1
    assert report['double']['occupancy_rate'] == Decimal('50.00')
    assert report['single']['current_occupancy'] == 0
