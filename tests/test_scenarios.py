"""End-to-end walkthroughs of a room's life: move in, pay, fall behind, move out."""
from datetime import date
from decimal import Decimal

import pytest

from core.constants import RoomStatus, DepositStatus, PaymentStatus
from core.exceptions import CapacityExceededError
from payments.models import Payment
from tests.conftest import at


pytestmark = pytest.mark.django_db


@pytest.fixture
def room_101(make_room):
    return make_room('101', capacity=1)


def test_single_room_fills_up(room_101, make_tenant, occupancy_service):
    t1, t2 = make_tenant('T1'), make_tenant('T2')

    room = occupancy_service.assign_tenant(room_101.id, t1.id, rent_amount=Decimal('2000'),
                                           security_deposit_amount=Decimal('500'))

    assert room.status == RoomStatus.OCCUPIED
    [tenancy] = occupancy_service.get_room_tenants(room.id)
    assert tenancy.tenant == t1
    assert tenancy.deposit_status == DepositStatus.PENDING
    assert len(occupancy_service.get_rental_history(room.id)) == 1

    with pytest.raises(CapacityExceededError):
        occupancy_service.assign_tenant(room.id, t2.id)


def test_missed_rent_paid_late(room_101, make_tenant, occupancy_service, billing_service, make_payment):
    t1 = make_tenant('T1')
    occupancy_service.assign_tenant(room_101.id, t1.id, now=at(2024, 11, 1))
    payment = make_payment(room_101, t1, at(2024, 12, 1))

    billing_service.update_overdue_payments(now=at(2024, 12, 2))
    assert Payment.objects.get(id=payment.id).status == PaymentStatus.OVERDUE

    payment = billing_service.mark_payment_completed(payment.id, now=at(2024, 12, 5))

    assert payment.status == PaymentStatus.PAID
    assert payment.payment_date == at(2024, 12, 5)
    assert payment.is_late_payment
    assert payment.receipt_number
    assert Payment.objects.filter(receipt_number=payment.receipt_number).count() == 1


def test_move_out(room_101, make_tenant, occupancy_service):
    t1 = make_tenant('T1')
    occupancy_service.assign_tenant(room_101.id, t1.id, now=at(2024, 11, 1))

    room = occupancy_service.unassign_tenant(room_101.id, t1.id, now=at(2025, 1, 31))

    assert occupancy_service.get_room_tenants(room.id) == []
    assert room.status == RoomStatus.AVAILABLE
    t1.refresh_from_db()
    assert t1.room_number is None
    [entry] = occupancy_service.get_rental_history(room.id)
    assert entry['tenancy'].move_out_date == at(2025, 1, 31)
    assert not entry['tenancy'].is_active
    assert entry['duration_days'] == 91


def test_late_fee_once(room_101, make_tenant, occupancy_service, billing_service, make_payment):
    t1 = make_tenant('T1')
    occupancy_service.assign_tenant(room_101.id, t1.id)
    payment = make_payment(room_101, t1, at(2024, 12, 1))
    billing_service.update_overdue_payments(now=at(2024, 12, 6))

    billing_service.apply_late_fees(Decimal('50'), now=at(2024, 12, 8, 9))
    payment.refresh_from_db()
    assert payment.late_fee_amount == Decimal('50.00')
    assert "7 days overdue" in payment.late_fee_reason

    billing_service.apply_late_fees(Decimal('50'), now=at(2024, 12, 9, 9))
    payment.refresh_from_db()
    assert payment.late_fee_amount == Decimal('50.00')
    assert "7 days overdue" in payment.late_fee_reason


def test_deduction_shows_in_deposit_and_history(room_101, make_tenant, occupancy_service):
    t1 = make_tenant('T1')
    occupancy_service.assign_tenant(room_101.id, t1.id, security_deposit_amount=Decimal('500'))

    occupancy_service.add_security_deposit_deduction(room_101.id, t1.id, "Wall damage", Decimal('100'))

    [deposit] = occupancy_service.get_room_security_deposits(room_101.id)
    assert [(d['reason'], d['amount']) for d in deposit['deductions']] == [("Wall damage", Decimal('100.00'))]
    assert deposit['balance'] == Decimal('400.00')

    [entry] = occupancy_service.get_rental_history(room_101.id)
    assert [d.reason for d in entry['tenancy'].deductions.all()] == ["Wall damage"]
    assert entry['tenancy'].id == deposit['tenancy_id']


def test_rent_period_spans_the_month(room_101, make_tenant, occupancy_service, make_payment):
    t1 = make_tenant('T1')
    occupancy_service.assign_tenant(room_101.id, t1.id)

    payment = make_payment(room_101, t1, at(2024, 12, 1), period_start=date(2024, 12, 1),
                           period_end=date(2024, 12, 31))

    assert (payment.period_start, payment.period_end) == (date(2024, 12, 1), date(2024, 12, 31))
