"""Payment records, the overdue sweep, late fees, refunds and receipts."""
import re
from datetime import date, timedelta
from decimal import Decimal

import pytest
from django.db import DatabaseError

from core.constants import PaymentStatus, PaymentType
from core.dto import PaymentDTO
from core.exceptions import NotFoundError, ValidationError, InvalidStateTransitionError
from payments.models import Payment
from payments.services import start_of_day
from tests.conftest import at, MOVE_IN


pytestmark = pytest.mark.django_db

DUE = at(2024, 12, 1)


# ----------------------------------------------------------------------
# create_payment
# ----------------------------------------------------------------------

def test_create_pending_payment(assigned, make_payment, staff_user):
    room, tenant = assigned

    payment = make_payment(room, tenant, DUE)

    assert payment.status == PaymentStatus.PENDING
    assert payment.payment_date is None
    assert payment.receipt_number is None
    assert not payment.is_late_payment
    assert payment.created_by == staff_user


def test_create_paid_payment_gets_receipt(assigned, make_payment):
    room, tenant = assigned

    payment = make_payment(room, tenant, DUE, status=PaymentStatus.PAID,
                           payment_date=DUE - timedelta(days=2))

    assert payment.status == PaymentStatus.PAID
    assert payment.receipt_number.startswith('RCP-')
    assert not payment.is_late_payment


def test_rent_needs_period_covered(assigned, billing_service):
    room, tenant = assigned

    with pytest.raises(ValidationError) as exc:
        billing_service.create_payment(PaymentDTO(
            tenant_id=tenant.id, room_id=room.id, amount=Decimal('2000'), due_date=DUE,
        ))
    assert exc.value.code == 'PERIOD_REQUIRED'

    with pytest.raises(ValidationError) as exc:
        billing_service.create_payment(PaymentDTO(
            tenant_id=tenant.id, room_id=room.id, amount=Decimal('2000'), due_date=DUE,
            period_start=date(2024, 12, 31), period_end=date(2024, 12, 1),
        ))
    assert exc.value.code == 'INVALID_PERIOD'


def test_non_rent_payment_needs_no_period(assigned, billing_service):
    room, tenant = assigned

    payment = billing_service.create_payment(PaymentDTO(
        tenant_id=tenant.id, room_id=room.id, amount=Decimal('150'),
        payment_type=PaymentType.UTILITY, due_date=DUE,
    ))

    assert payment.period_start is None


def test_tenant_must_live_in_room(assigned, make_room, make_payment):
    _, tenant = assigned
    other = make_room('102')

    with pytest.raises(ValidationError) as exc:
        make_payment(other, tenant, DUE)
    assert exc.value.code == 'TENANT_NOT_IN_ROOM'


def test_inactive_tenant_rejected(room, tenant, make_payment):
    with pytest.raises(ValidationError) as exc:
        make_payment(room, tenant, DUE)
    assert exc.value.code == 'TENANT_NOT_ACTIVE'


def test_create_payment_rejects_bad_input(assigned, make_payment):
    room, tenant = assigned

    with pytest.raises(ValidationError):
        make_payment(room, tenant, DUE, amount='-5')
    with pytest.raises(ValidationError):
        make_payment(room, tenant, DUE, payment_method='barter')
    with pytest.raises(ValidationError):
        make_payment(room, tenant, DUE, status=PaymentStatus.OVERDUE)


def test_create_payment_unknown_tenant(room, billing_service):
    with pytest.raises(NotFoundError):
        billing_service.create_payment(PaymentDTO(
            tenant_id=9999, room_id=room.id, amount=Decimal('10'),
            payment_type=PaymentType.OTHER, due_date=DUE,
        ))


def test_late_back_entry_carries_supplied_fee(assigned, make_payment):
    room, tenant = assigned

    payment = make_payment(room, tenant, DUE, status=PaymentStatus.PAID,
                           payment_date=DUE + timedelta(days=2, hours=3), late_fee_amount=Decimal('75'))

    payment.refresh_from_db()
    assert payment.is_late_payment
    assert payment.late_fee_amount == Decimal('75.00')
    assert payment.late_fee_reason == "Late payment fee - 3 days overdue"
    assert payment.late_fee_applied_date == MOVE_IN
    assert payment.total_amount == Decimal('2075.00')


def test_on_time_back_entry_ignores_fee(assigned, make_payment):
    room, tenant = assigned

    payment = make_payment(room, tenant, DUE, status=PaymentStatus.PAID,
                           payment_date=DUE - timedelta(days=1), late_fee_amount=Decimal('75'))

    assert not payment.is_late_payment
    assert payment.late_fee_amount == 0
    assert payment.late_fee_reason == ''


def test_back_entry_fee_cannot_be_negative(assigned, make_payment):
    room, tenant = assigned

    with pytest.raises(ValidationError):
        make_payment(room, tenant, DUE, status=PaymentStatus.PAID,
                     payment_date=DUE + timedelta(days=5), late_fee_amount=Decimal('-1'))
    assert not Payment.objects.exists()


# ----------------------------------------------------------------------
# mark_payment_completed
# ----------------------------------------------------------------------

def test_payment_on_due_date_is_not_late(assigned, make_payment, billing_service):
    room, tenant = assigned
    payment = make_payment(room, tenant, DUE)

    payment = billing_service.mark_payment_completed(payment.id, now=DUE)

    assert payment.status == PaymentStatus.PAID
    assert payment.payment_date == DUE
    assert not payment.is_late_payment


def test_payment_one_second_after_due_is_late(assigned, make_payment, billing_service):
    room, tenant = assigned
    payment = make_payment(room, tenant, DUE)

    payment = billing_service.mark_payment_completed(payment.id, now=DUE + timedelta(seconds=1))

    assert payment.is_late_payment


def test_complete_records_who_and_receipt(assigned, make_payment, billing_service, admin_user):
    room, tenant = assigned
    payment = make_payment(room, tenant, DUE)

    payment = billing_service.mark_payment_completed(payment.id, completed_by=admin_user, now=DUE)

    stored = Payment.objects.get(id=payment.id)
    assert stored.recorded_by == admin_user
    assert stored.receipt_number == payment.receipt_number


def test_complete_twice_is_rejected(assigned, make_payment, billing_service):
    room, tenant = assigned
    payment = make_payment(room, tenant, DUE)
    billing_service.mark_payment_completed(payment.id, now=DUE)

    with pytest.raises(InvalidStateTransitionError, match="already marked as paid"):
        billing_service.mark_payment_completed(payment.id, now=DUE)


def test_complete_missing_payment(db, billing_service):
    with pytest.raises(NotFoundError):
        billing_service.mark_payment_completed(9999)


# ----------------------------------------------------------------------
# Overdue sweep
# ----------------------------------------------------------------------

def test_start_of_day():
    assert start_of_day(at(2024, 12, 2, 17, 45)) == at(2024, 12, 2)


def test_sweep_flips_only_payments_due_before_today(assigned, make_payment, billing_service):
    room, tenant = assigned
    yesterday = make_payment(room, tenant, at(2024, 12, 1, 23, 59))
    today = make_payment(room, tenant, at(2024, 12, 2, 0, 0), payment_type=PaymentType.UTILITY)
    paid = make_payment(room, tenant, at(2024, 11, 1), payment_type=PaymentType.UTILITY,
                        status=PaymentStatus.PAID, payment_date=at(2024, 11, 1))

    result = billing_service.update_overdue_payments(now=at(2024, 12, 2, 10))

    assert result == {'matched': 1, 'updated': 1, 'failed': 0}
    assert Payment.objects.get(id=yesterday.id).status == PaymentStatus.OVERDUE
    assert Payment.objects.get(id=today.id).status == PaymentStatus.PENDING
    assert Payment.objects.get(id=paid.id).status == PaymentStatus.PAID


def test_sweep_is_idempotent(assigned, make_payment, billing_service):
    room, tenant = assigned
    make_payment(room, tenant, DUE)
    now = at(2024, 12, 5)

    first = billing_service.update_overdue_payments(now=now)
    second = billing_service.update_overdue_payments(now=now)

    assert first['updated'] == 1
    assert second == {'matched': 0, 'updated': 0, 'failed': 0}


def test_sweep_keeps_going_when_one_payment_fails(assigned, make_payment, billing_service, monkeypatch):
    room, tenant = assigned
    broken = make_payment(room, tenant, at(2024, 11, 20), payment_type=PaymentType.UTILITY)
    fine = make_payment(room, tenant, at(2024, 11, 25), payment_type=PaymentType.UTILITY)

    get_for_update = billing_service.payment_repo.get_for_update

    def flaky(payment_id, **filters):
        if payment_id == broken.id:
            raise DatabaseError("row lock timeout")
        return get_for_update(payment_id, **filters)

    monkeypatch.setattr(billing_service.payment_repo, 'get_for_update', flaky)

    result = billing_service.update_overdue_payments(now=at(2024, 12, 2))

    assert result == {'matched': 2, 'updated': 1, 'failed': 1}
    assert Payment.objects.get(id=broken.id).status == PaymentStatus.PENDING
    assert Payment.objects.get(id=fine.id).status == PaymentStatus.OVERDUE


def test_overdue_payment_can_still_be_paid(assigned, make_payment, billing_service):
    room, tenant = assigned
    payment = make_payment(room, tenant, DUE)
    billing_service.update_overdue_payments(now=at(2024, 12, 3))

    payment = billing_service.mark_payment_completed(payment.id, now=at(2024, 12, 3, 8))

    assert payment.status == PaymentStatus.PAID
    assert payment.is_late_payment


# ----------------------------------------------------------------------
# Late fees
# ----------------------------------------------------------------------

def test_late_fee_applied_once_with_day_count(assigned, make_payment, billing_service):
    room, tenant = assigned
    payment = make_payment(room, tenant, DUE)
    now = at(2024, 12, 4, 12)

    result = billing_service.apply_late_fees(Decimal('75'), now=now)

    payment.refresh_from_db()
    assert result['late_fees_applied'] == 1
    assert result['overdue_sweep']['updated'] == 1
    assert payment.status == PaymentStatus.OVERDUE
    assert payment.late_fee_amount == Decimal('75.00')
    assert payment.late_fee_reason == "Late payment fee - 3 days overdue"
    assert payment.late_fee_applied_date == now
    assert payment.total_amount == Decimal('2075.00')

    again = billing_service.apply_late_fees(Decimal('75'), now=now + timedelta(days=1))
    payment.refresh_from_db()
    assert again['late_fees_applied'] == 0
    assert payment.late_fee_amount == Decimal('75.00')


def test_late_fee_reason_counts_at_least_one_day(assigned, make_payment, billing_service):
    room, tenant = assigned
    payment = make_payment(room, tenant, at(2024, 12, 1, 23), payment_type=PaymentType.UTILITY)

    billing_service.apply_late_fees(Decimal('10'), now=at(2024, 12, 2, 0, 30))

    payment.refresh_from_db()
    assert payment.status == PaymentStatus.OVERDUE
    assert payment.late_fee_reason == "Late payment fee - 1 days overdue"


def test_late_fee_uses_configured_default(assigned, make_payment, billing_service, settings):
    settings.BILLING_DEFAULT_LATE_FEE = Decimal('20.00')
    room, tenant = assigned
    make_payment(room, tenant, DUE)

    result = billing_service.apply_late_fees(now=at(2024, 12, 10))

    assert result['late_fee_amount'] == Decimal('20.00')
    assert Payment.objects.get().late_fee_amount == Decimal('20.00')


def test_late_fee_must_be_positive(db, billing_service):
    with pytest.raises(ValidationError):
        billing_service.apply_late_fees(Decimal('0'))
    with pytest.raises(ValidationError):
        billing_service.apply_late_fees(Decimal('-10'))


def test_late_fee_skips_pending_and_paid(assigned, make_payment, billing_service):
    room, tenant = assigned
    future = make_payment(room, tenant, at(2025, 1, 1))
    paid = make_payment(room, tenant, at(2024, 11, 1), payment_type=PaymentType.UTILITY,
                        status=PaymentStatus.PAID, payment_date=at(2024, 11, 5))

    result = billing_service.apply_late_fees(Decimal('50'), now=at(2024, 12, 10))

    assert result['late_fees_applied'] == 0
    assert Payment.objects.get(id=future.id).late_fee_amount == 0
    assert Payment.objects.get(id=paid.id).late_fee_amount == 0


# ----------------------------------------------------------------------
# Refunds
# ----------------------------------------------------------------------

def test_refund_paid_payment(assigned, make_payment, billing_service, admin_user):
    room, tenant = assigned
    payment = make_payment(room, tenant, DUE)
    billing_service.mark_payment_completed(payment.id, now=DUE)
    now = at(2024, 12, 10)

    payment = billing_service.process_refund(payment.id, Decimal('500'), "Overcharged",
                                             processed_by=admin_user, now=now)

    assert payment.status == PaymentStatus.REFUNDED
    assert payment.refund_amount == Decimal('500')
    assert payment.refund_reason == "Overcharged"
    assert payment.refunded_at == now
    assert payment.refunded_by == admin_user


def test_refund_rules(assigned, make_payment, billing_service):
    room, tenant = assigned
    payment = make_payment(room, tenant, DUE)

    with pytest.raises(InvalidStateTransitionError, match="Only paid payments"):
        billing_service.process_refund(payment.id, Decimal('100'))

    billing_service.mark_payment_completed(payment.id, now=DUE)
    with pytest.raises(InvalidStateTransitionError, match="cannot exceed"):
        billing_service.process_refund(payment.id, Decimal('2000.01'))

    billing_service.process_refund(payment.id, Decimal('2000'))
    with pytest.raises(InvalidStateTransitionError):
        billing_service.process_refund(payment.id, Decimal('1'))
    with pytest.raises(InvalidStateTransitionError, match="cannot be marked as paid"):
        billing_service.mark_payment_completed(payment.id)


# ----------------------------------------------------------------------
# Receipt numbers
# ----------------------------------------------------------------------

def test_receipt_number_format(billing_service):
    number = billing_service.generate_receipt_number(now=at(2024, 12, 1))

    assert re.match(r'^RCP-\d+-[0-9A-F]{8}$', number)
    assert number.startswith(f"RCP-{int(at(2024, 12, 1).timestamp() * 1000)}-")


def test_receipt_numbers_are_unique(assigned, make_payment, billing_service):
    room, tenant = assigned
    payments = [make_payment(room, tenant, DUE, payment_type=PaymentType.UTILITY) for _ in range(5)]

    receipts = {billing_service.mark_payment_completed(p.id, now=DUE).receipt_number for p in payments}

    assert len(receipts) == 5


def test_receipt_collision_is_retried(assigned, make_payment, billing_service, monkeypatch):
    room, tenant = assigned
    first = make_payment(room, tenant, DUE, payment_type=PaymentType.UTILITY)
    second = make_payment(room, tenant, DUE, payment_type=PaymentType.UTILITY)
    taken = billing_service.mark_payment_completed(first.id, now=DUE).receipt_number

    numbers = iter([taken, taken, 'RCP-1-ABCDEF01'])
    monkeypatch.setattr(billing_service, 'generate_receipt_number', lambda now=None: next(numbers))

    payment = billing_service.mark_payment_completed(second.id, now=DUE)

    assert payment.receipt_number == 'RCP-1-ABCDEF01'
    assert Payment.objects.get(id=second.id).status == PaymentStatus.PAID


def test_receipt_collisions_exhausted(assigned, make_payment, billing_service, monkeypatch):
    room, tenant = assigned
    first = make_payment(room, tenant, DUE, payment_type=PaymentType.UTILITY)
    second = make_payment(room, tenant, DUE, payment_type=PaymentType.UTILITY)
    taken = billing_service.mark_payment_completed(first.id, now=DUE).receipt_number
    monkeypatch.setattr(billing_service, 'generate_receipt_number', lambda now=None: taken)

    with pytest.raises(ValidationError) as exc:
        billing_service.mark_payment_completed(second.id, now=DUE)

    assert exc.value.code == 'RECEIPT_NUMBER_EXHAUSTED'
    assert Payment.objects.get(id=second.id).status == PaymentStatus.PENDING


# ----------------------------------------------------------------------
# update_payment / delete_payment
# ----------------------------------------------------------------------

def test_update_payment_cannot_change_status(assigned, make_payment, billing_service):
    room, tenant = assigned
    payment = make_payment(room, tenant, DUE)

    with pytest.raises(ValidationError) as exc:
        billing_service.update_payment(payment.id, {'status': PaymentStatus.PAID})
    assert exc.value.code == 'STATUS_NOT_EDITABLE'

    with pytest.raises(ValidationError):
        billing_service.update_payment(payment.id, {'receipt_number': 'RCP-0-00000000'})


def test_update_payment_recomputes_lateness(assigned, make_payment, billing_service):
    room, tenant = assigned
    payment = make_payment(room, tenant, DUE)
    payment = billing_service.mark_payment_completed(payment.id, now=DUE + timedelta(days=2))
    assert payment.is_late_payment

    payment = billing_service.update_payment(payment.id, {'due_date': DUE + timedelta(days=5),
                                                          'notes': "Due date moved"})

    assert not payment.is_late_payment
    assert Payment.objects.get(id=payment.id).notes == "Due date moved"


def test_delete_payment(assigned, make_payment, billing_service):
    room, tenant = assigned
    payment = make_payment(room, tenant, DUE)

    billing_service.delete_payment(payment.id)

    assert not Payment.objects.filter(id=payment.id).exists()
    with pytest.raises(NotFoundError):
        billing_service.get_payment(payment.id)


# ----------------------------------------------------------------------
# Queries and statistics
# ----------------------------------------------------------------------

def test_payment_queries(assigned, make_payment, billing_service):
    room, tenant = assigned
    on_time = make_payment(room, tenant, at(2024, 11, 1), payment_type=PaymentType.UTILITY)
    late = make_payment(room, tenant, at(2024, 11, 15), payment_type=PaymentType.UTILITY)
    open_ = make_payment(room, tenant, at(2025, 1, 1))
    billing_service.mark_payment_completed(on_time.id, now=at(2024, 11, 1))
    billing_service.mark_payment_completed(late.id, now=at(2024, 11, 20))

    assert [p.id for p in billing_service.get_late_payments()] == [late.id]
    assert [p.id for p in billing_service.get_pending_payments()] == [open_.id]
    assert len(billing_service.get_tenant_payments(tenant.id)) == 3
    assert len(billing_service.get_room_payments(room.id)) == 3
    assert [p.id for p in billing_service.list_payments(start_date=at(2024, 11, 10), end_date=at(2024, 12, 1))] == [late.id]


def test_payment_search_and_payment_date_range(assigned, make_payment, billing_service):
    room, tenant = assigned
    water = make_payment(room, tenant, at(2024, 11, 1), payment_type=PaymentType.UTILITY,
                         description='Water bill')
    power = make_payment(room, tenant, at(2024, 11, 15), payment_type=PaymentType.UTILITY,
                         notes='Power, October reading')
    billing_service.mark_payment_completed(water.id, now=at(2024, 11, 2))
    power = billing_service.mark_payment_completed(power.id, now=at(2024, 11, 20))

    assert [p.id for p in billing_service.list_payments(search='WATER')] == [water.id]
    assert [p.id for p in billing_service.list_payments(search='october')] == [power.id]
    assert [p.id for p in billing_service.list_payments(search=power.receipt_number)] == [power.id]
    assert [p.id for p in billing_service.list_payments(paid_from=at(2024, 11, 10))] == [power.id]
    assert [p.id for p in billing_service.list_payments(paid_to=at(2024, 11, 10))] == [water.id]
    assert billing_service.get_payment_statistics(search='water')['total_payments'] == 1


def test_payment_statistics(assigned, make_payment, billing_service):
    room, tenant = assigned
    paid = make_payment(room, tenant, at(2024, 11, 1), amount='1000.00', payment_type=PaymentType.UTILITY)
    make_payment(room, tenant, at(2024, 11, 15), amount='3000.00', payment_type=PaymentType.UTILITY)
    billing_service.mark_payment_completed(paid.id, now=at(2024, 11, 3))
    billing_service.apply_late_fees(Decimal('50'), now=at(2024, 11, 20))

    stats = billing_service.get_payment_statistics()

    assert stats['total_payments'] == 2
    assert stats['paid_payments'] == 1
    assert stats['overdue_payments'] == 1
    assert stats['total_amount'] == Decimal('4000.00')
    assert stats['paid_amount'] == Decimal('1000.00')
    assert stats['outstanding_amount'] == Decimal('3000.00')
    assert stats['total_late_fees'] == Decimal('50.00')
    assert stats['total_with_late_fees'] == Decimal('4050.00')
    assert stats['paid_rate'] == Decimal('50.00')
    assert stats['late_rate'] == Decimal('50.00')


def test_statistics_on_empty_ledger(db, billing_service):
    stats = billing_service.get_payment_statistics()

    assert stats['total_payments'] == 0
    assert stats['total_amount'] == Decimal('0')
    assert stats['paid_rate'] == Decimal('0')
