"""
Test fixtures for the boarding house engine.

Rooms, tenants and staff users are created through the same services the
API uses. Times are fixed, timezone-aware datetimes so date boundaries are
deterministic.
"""
from datetime import date, datetime, timezone as dt_timezone
from decimal import Decimal

import pytest
from rest_framework.test import APIClient

from core.constants import UserRole, PaymentType
from core.dto import RoomDTO, PaymentDTO
from occupancy.services import OccupancyService
from payments.services import BillingService
from rooms.services import RoomService
from tenants.models import Tenant
from users.models import User


def at(year, month, day, hour=0, minute=0, second=0):
    """UTC datetime shorthand"""
    return datetime(year, month, day, hour, minute, second, tzinfo=dt_timezone.utc)


MOVE_IN = at(2024, 11, 1, 9)


@pytest.fixture
def room_service():
    return RoomService()


@pytest.fixture
def occupancy_service():
    return OccupancyService()


@pytest.fixture
def billing_service():
    return BillingService()


@pytest.fixture
def staff_user(db):
    return User.objects.create_user(username='staff', password='pass12345', role=UserRole.STAFF)


@pytest.fixture
def admin_user(db):
    return User.objects.create_user(username='admin', password='pass12345', role=UserRole.ADMIN)


@pytest.fixture
def make_room(db, room_service):
    def _make_room(room_number='101', capacity=1, monthly_rent='2000.00', security_deposit='500.00',
                   room_type='single', **extra):
        return room_service.create_room(RoomDTO(
            room_number=room_number,
            room_type=room_type,
            capacity=capacity,
            monthly_rent=Decimal(monthly_rent),
            security_deposit=Decimal(security_deposit),
            **extra
        ))
    return _make_room


@pytest.fixture
def make_tenant(db):
    counter = {'n': 0}

    def _make_tenant(first_name='Tenant', last_name=None):
        counter['n'] += 1
        n = counter['n']
        user = User.objects.create_user(username=f'tenant{n}', password='pass12345', role=UserRole.TENANT)
        return Tenant.objects.create(
            user=user,
            first_name=first_name,
            last_name=last_name or f'Number{n}',
            email=f'tenant{n}@example.com',
            phone_number=f'+6391700000{n:02d}',
        )
    return _make_tenant


@pytest.fixture
def room(make_room):
    return make_room()


@pytest.fixture
def tenant(make_tenant):
    return make_tenant('Ana', 'Reyes')


@pytest.fixture
def assigned(room, tenant, occupancy_service):
    """Tenant living in room 101 since MOVE_IN"""
    occupancy_service.assign_tenant(room.id, tenant.id, now=MOVE_IN)
    room.refresh_from_db()
    tenant.refresh_from_db()
    return room, tenant


@pytest.fixture
def make_payment(billing_service, staff_user):
    def _make_payment(room, tenant, due_date, amount='2000.00', payment_type=PaymentType.RENT, **extra):
        extra.setdefault('period_start', date(due_date.year, due_date.month, 1))
        extra.setdefault('period_end', date(due_date.year, due_date.month, 28))
        return billing_service.create_payment(
            PaymentDTO(
                tenant_id=tenant.id,
                room_id=room.id,
                amount=Decimal(amount),
                payment_type=payment_type,
                due_date=due_date,
                **extra
            ),
            created_by=staff_user,
            now=MOVE_IN,
        )
    return _make_payment


@pytest.fixture
def api_client(staff_user):
    client = APIClient()
    client.force_authenticate(user=staff_user)
    return client
