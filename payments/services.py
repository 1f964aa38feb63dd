"""
Billing service - Business logic layer for payments.

Payment status moves only through payments.state. The overdue sweep and late
fee application run from the scheduler and management commands as well as
from the API, so both take an optional `now`.
"""
import math
import secrets
from datetime import datetime, time
from decimal import Decimal
from typing import List, Optional
from django.conf import settings
from django.db import transaction, IntegrityError
from django.utils import timezone
from core.services import BaseService
from core.constants import PaymentType, PaymentMethod, PaymentStatus, TenantStatus, DefaultLimits
from core.dto import PaymentDTO
from core.exceptions import NotFoundError, ValidationError, InvalidStateTransitionError
from core.validators import AmountValidator, PaymentValidator
from occupancy.repositories import TenancyRepository
from rooms.repositories import RoomRepository
from tenants.repositories import TenantRepository
from .models import Payment
from .repositories import PaymentRepository

PAYMENT_TYPES = [value for value, _ in PaymentType.CHOICES]
PAYMENT_METHODS = [value for value, _ in PaymentMethod.CHOICES]

# Fields update_payment may touch. Status, receipt and refund data have their own operations.
EDITABLE_FIELDS = (
    'amount', 'payment_type', 'payment_method', 'due_date', 'payment_date', 'period_start',
    'period_end', 'transaction_reference', 'description', 'notes',
)


def start_of_day(now: datetime) -> datetime:
    """Midnight of `now`'s date in the active time zone"""
    local = timezone.localtime(now) if timezone.is_aware(now) else now
    midnight = datetime.combine(local.date(), time.min)
    if timezone.is_aware(now):
        return timezone.make_aware(midnight, local.tzinfo)
    return midnight


def _rate(part: int, whole: int) -> Decimal:
    if not whole:
        return Decimal('0')
    return round(Decimal(part) / Decimal(whole) * 100, 2)


class BillingService(BaseService):
    """Service for payment records, the overdue sweep, late fees and refunds"""

    def __init__(self):
        super().__init__()
        self.payment_repo = PaymentRepository()
        self.tenant_repo = TenantRepository()
        self.room_repo = RoomRepository()
        self.tenancy_repo = TenancyRepository()

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get_payment(self, payment_id: int) -> Payment:
        payment = self.payment_repo.get_by_id(payment_id)
        if not payment:
            raise NotFoundError(resource_type="Payment", resource_id=payment_id)
        return payment

    def list_payments(self, **filters) -> List[Payment]:
        return list(self.payment_repo.search(**filters))

    def get_tenant_payments(self, tenant_id: int) -> List[Payment]:
        if not self.tenant_repo.exists(id=tenant_id):
            raise NotFoundError(resource_type="Tenant", resource_id=tenant_id)
        return list(self.payment_repo.get_by_tenant(tenant_id))

    def get_room_payments(self, room_id: int) -> List[Payment]:
        if not self.room_repo.exists(id=room_id):
            raise NotFoundError(resource_type="Room", resource_id=room_id)
        return list(self.payment_repo.get_by_room(room_id))

    def get_late_payments(self) -> List[Payment]:
        return list(self.payment_repo.get_late())

    def get_overdue_payments(self) -> List[Payment]:
        return list(self.payment_repo.get_by_status(PaymentStatus.OVERDUE))

    def get_pending_payments(self) -> List[Payment]:
        return list(self.payment_repo.get_by_status(PaymentStatus.PENDING))

    # ------------------------------------------------------------------
    # Create / update / delete
    # ------------------------------------------------------------------

    def create_payment(self, payment_data: PaymentDTO, created_by=None, now=None) -> Payment:
        """
        Record a payment for a tenant living in a room.

        Payments can start out pending or paid. A paid record gets a payment
        date (now, unless given) and a receipt number.
        A late record created with late_fee_amount carries that fee.

        Raises:
            NotFoundError: tenant or room does not exist
            ValidationError: bad amount/type/method/period, inactive tenant,
                or tenant not living in the room
        """
        now = self.now(now)
        amount = AmountValidator.validate_non_negative(payment_data.amount, "Amount")
        late_fee = Decimal('0')
        if payment_data.late_fee_amount is not None:
            late_fee = AmountValidator.validate_non_negative(payment_data.late_fee_amount, "Late fee amount")
        self._validate_choices(payment_data.payment_type, payment_data.payment_method)
        if payment_data.status not in (PaymentStatus.PENDING, PaymentStatus.PAID):
            raise ValidationError(message="New payments must be pending or paid", code="INVALID_PAYMENT_STATUS",
                                  details={"status": payment_data.status})
        if not payment_data.due_date:
            raise ValidationError(message="Due date is required", code="DUE_DATE_REQUIRED")
        PaymentValidator.validate_period_covered(payment_data.payment_type, payment_data.period_start,
                                                 payment_data.period_end)

        tenant = self.tenant_repo.get_by_id(payment_data.tenant_id)
        if not tenant:
            raise NotFoundError(resource_type="Tenant", resource_id=payment_data.tenant_id)
        if tenant.tenant_status != TenantStatus.ACTIVE:
            raise ValidationError(message="Cannot create payment record for inactive tenant",
                                  code="TENANT_NOT_ACTIVE", details={"tenant_id": tenant.id})

        room = self.room_repo.get_by_id(payment_data.room_id)
        if not room:
            raise NotFoundError(resource_type="Room", resource_id=payment_data.room_id)
        if not self.tenancy_repo.exists(room_id=room.id, tenant_id=tenant.id, is_active=True):
            raise ValidationError(message="Tenant is not assigned to this room", code="TENANT_NOT_IN_ROOM",
                                  details={"tenant_id": tenant.id, "room_id": room.id})

        payment = Payment(
            tenant=tenant,
            room=room,
            amount=amount,
            payment_type=payment_data.payment_type,
            payment_method=payment_data.payment_method,
            due_date=payment_data.due_date,
            period_start=payment_data.period_start,
            period_end=payment_data.period_end,
            transaction_reference=payment_data.transaction_reference or '',
            description=payment_data.description or '',
            notes=payment_data.notes or '',
            created_by=created_by,
        )

        if payment_data.status == PaymentStatus.PAID:
            payment.mark_as_paid(payment_data.payment_date or now, recorded_by=created_by)
        else:
            payment.payment_date = payment_data.payment_date
            payment.is_late_payment = payment.compute_is_late()

        # Back-entered late payments carry their fee, counted in started days
        if late_fee and payment.is_late_payment:
            late_seconds = (payment.payment_date - payment.due_date).total_seconds()
            self._attach_late_fee(payment, late_fee, math.ceil(late_seconds / 86400), now)

        if payment.status == PaymentStatus.PAID:
            self._save_with_receipt(payment)
        else:
            payment.save()

        self.log_info(f"Payment created: {payment.get_payment_type_display()} {payment.amount}",
                      payment_id=payment.id, tenant_id=tenant.id, room_id=room.id, status=payment.status)
        return payment

    def update_payment(self, payment_id: int, updates: dict, updated_by=None) -> Payment:
        """Edit non-status fields. Status changes go through their own operations."""
        if 'status' in updates:
            raise ValidationError(message="Payment status cannot be changed with an update",
                                  code="STATUS_NOT_EDITABLE")
        unknown = set(updates) - set(EDITABLE_FIELDS)
        if unknown:
            raise ValidationError(message=f"Fields cannot be updated: {', '.join(sorted(unknown))}",
                                  code="INVALID_UPDATE_FIELDS")

        with transaction.atomic():
            payment = self.payment_repo.get_for_update(payment_id)
            if not payment:
                raise NotFoundError(resource_type="Payment", resource_id=payment_id)

            if 'amount' in updates:
                updates['amount'] = AmountValidator.validate_non_negative(updates['amount'], "Amount")
            if 'payment_type' in updates or 'payment_method' in updates:
                self._validate_choices(updates.get('payment_type', payment.payment_type),
                                       updates.get('payment_method', payment.payment_method))
            if updates.get('due_date', payment.due_date) is None:
                raise ValidationError(message="Due date is required", code="DUE_DATE_REQUIRED")
            if payment.status == PaymentStatus.PAID and 'payment_date' in updates and not updates['payment_date']:
                raise ValidationError(message="A paid payment needs a payment date", code="PAYMENT_DATE_REQUIRED")

            for key, value in updates.items():
                setattr(payment, key, value)
            PaymentValidator.validate_period_covered(payment.payment_type, payment.period_start, payment.period_end)

            if 'payment_date' in updates or 'due_date' in updates:
                payment.is_late_payment = payment.compute_is_late()
            payment.save()

        self.log_info("Payment updated", payment_id=payment.id, fields=list(updates),
                      updated_by=getattr(updated_by, 'id', None))
        return payment

    def delete_payment(self, payment_id: int) -> None:
        payment = self.get_payment(payment_id)
        self.payment_repo.delete(payment)
        self.log_info("Payment deleted", payment_id=payment_id)

    # ------------------------------------------------------------------
    # Status changes
    # ------------------------------------------------------------------

    def mark_payment_completed(self, payment_id: int, completed_by=None, now=None) -> Payment:
        """
        Mark a pending or overdue payment as paid now.

        Raises:
            NotFoundError: payment does not exist
            InvalidStateTransitionError: payment is already paid or refunded
        """
        now = self.now(now)
        with transaction.atomic():
            payment = self.payment_repo.get_for_update(payment_id)
            if not payment:
                raise NotFoundError(resource_type="Payment", resource_id=payment_id)
            payment.mark_as_paid(now, recorded_by=completed_by)
            self._save_with_receipt(payment)

        self.log_info(f"Payment completed: {payment.receipt_number}", payment_id=payment.id,
                      is_late=payment.is_late_payment)
        return payment

    def update_overdue_payments(self, now=None) -> dict:
        """
        Flip pending payments due before today to overdue.

        Each payment is locked and re-checked on its own, so a payment paid
        in the meantime is left alone. A failure on one payment is logged and
        counted; the rest of the batch still runs.
        """
        cutoff = start_of_day(self.now(now))
        candidate_ids = self.payment_repo.past_due_pending_ids(cutoff)
        updated = failed = 0

        for payment_id in candidate_ids:
            try:
                with transaction.atomic():
                    payment = self.payment_repo.get_for_update(payment_id)
                    if not payment or payment.status != PaymentStatus.PENDING or payment.due_date >= cutoff:
                        continue
                    payment.mark_as_overdue()
                    payment.save(update_fields=['status', 'updated_at'])
                    updated += 1
            except Exception as e:
                failed += 1
                self.log_error("Failed to mark payment overdue", error=e, payment_id=payment_id)

        result = {'matched': len(candidate_ids), 'updated': updated, 'failed': failed}
        self.log_info("Overdue sweep finished", cutoff=cutoff.isoformat(), **result)
        return result

    def apply_late_fees(self, late_fee_amount=None, now=None) -> dict:
        """
        Attach a flat late fee to every overdue payment that has none yet.
        Runs the overdue sweep first. Running it again never adds a second fee.
        """
        now = self.now(now)
        if late_fee_amount is None:
            late_fee_amount = settings.BILLING_DEFAULT_LATE_FEE
        fee = AmountValidator.validate_non_negative(late_fee_amount, "Late fee amount")
        if fee == 0:
            raise ValidationError(message="Late fee amount must be greater than zero", code="INVALID_LATE_FEE")

        sweep = self.update_overdue_payments(now=now)
        applied = 0

        for payment_id in self.payment_repo.overdue_without_fee_ids():
            with transaction.atomic():
                payment = self.payment_repo.get_for_update(payment_id)
                if not payment or payment.status != PaymentStatus.OVERDUE or payment.late_fee_amount:
                    continue
                days_overdue = max(1, (now - payment.due_date).days)
                self._attach_late_fee(payment, fee, days_overdue, now)
                payment.save(update_fields=['late_fee_amount', 'late_fee_reason', 'late_fee_applied_date',
                                            'updated_at'])
                applied += 1

        self.log_info("Late fees applied", amount=str(fee), applied=applied)
        return {'overdue_sweep': sweep, 'late_fees_applied': applied, 'late_fee_amount': fee}

    def process_refund(self, payment_id: int, refund_amount, reason: str = '', processed_by=None,
                       now=None) -> Payment:
        """
        Refund a paid payment, fully or partially.

        Raises:
            InvalidStateTransitionError: payment is not paid, or the refund is
                larger than the payment
        """
        now = self.now(now)
        amount = AmountValidator.validate_non_negative(refund_amount, "Refund amount")

        with transaction.atomic():
            payment = self.payment_repo.get_for_update(payment_id)
            if not payment:
                raise NotFoundError(resource_type="Payment", resource_id=payment_id)
            if amount > payment.amount:
                raise InvalidStateTransitionError(
                    message="Refund amount cannot exceed payment amount",
                    current_status=payment.status,
                    event='refund',
                    details={"refund_amount": str(amount), "payment_amount": str(payment.amount)},
                )
            payment.mark_as_refunded(amount, reason or '', now, refunded_by=processed_by)
            payment.save()

        self.log_info(f"Payment refunded: {amount}", payment_id=payment.id, reason=reason)
        return payment

    # ------------------------------------------------------------------
    # Receipts
    # ------------------------------------------------------------------

    def generate_receipt_number(self, now=None) -> str:
        """RCP-<epoch millis>-<random hex>"""
        millis = int(self.now(now).timestamp() * 1000)
        return f"RCP-{millis}-{secrets.token_hex(4).upper()}"

    def _save_with_receipt(self, payment: Payment):
        """
        Save a payment that just became paid. The unique index on
        receipt_number is the source of truth; a collision regenerates.
        """
        if payment.receipt_number:
            payment.save()
            return
        for attempt in range(1, DefaultLimits.RECEIPT_NUMBER_ATTEMPTS + 1):
            payment.receipt_number = self.generate_receipt_number()
            try:
                with transaction.atomic():
                    payment.save()
                return
            except IntegrityError as e:
                self.log_warning("Receipt number collision", attempt=attempt,
                                 receipt_number=payment.receipt_number, error=str(e))
        raise ValidationError(message="Could not generate a unique receipt number", code="RECEIPT_NUMBER_EXHAUSTED")

    # ------------------------------------------------------------------
    # Statistics
    # ------------------------------------------------------------------

    def get_payment_statistics(self, **filters) -> dict:
        stats = self.payment_repo.get_statistics(**filters)
        total = stats['total_payments']
        total_amount = stats['total_amount'] or Decimal('0')
        total_late_fees = stats['total_late_fees'] or Decimal('0')

        stats.update({
            'total_amount': total_amount,
            'total_late_fees': total_late_fees,
            'paid_amount': stats['paid_amount'] or Decimal('0'),
            'outstanding_amount': stats['outstanding_amount'] or Decimal('0'),
            'average_amount': round(stats['average_amount'], 2) if stats['average_amount'] is not None else Decimal('0'),
            'max_amount': stats['max_amount'] or Decimal('0'),
            'min_amount': stats['min_amount'] or Decimal('0'),
            'paid_rate': _rate(stats['paid_payments'], total),
            'overdue_rate': _rate(stats['overdue_payments'], total),
            'late_rate': _rate(stats['late_payments_count'], total),
            'total_with_late_fees': total_amount + total_late_fees,
        })
        return stats

    def get_payment_summary(self, **filters) -> dict:
        return {
            'statistics': self.get_payment_statistics(**filters),
            'recent_payments': list(self.payment_repo.get_recent_paid(5)),
            'late_payments': list(self.payment_repo.get_late()[:5]),
        }

    def _validate_choices(self, payment_type: str, payment_method: str):
        if payment_type not in PAYMENT_TYPES:
            raise ValidationError(message="Invalid payment type", code="INVALID_PAYMENT_TYPE",
                                  details={"payment_type": payment_type, "allowed": PAYMENT_TYPES})
        if payment_method not in PAYMENT_METHODS:
            raise ValidationError(message="Invalid payment method", code="INVALID_PAYMENT_METHOD",
                                  details={"payment_method": payment_method, "allowed": PAYMENT_METHODS})

    @staticmethod
    def _attach_late_fee(payment: Payment, fee: Decimal, days_overdue: int, now: datetime):
        payment.late_fee_amount = fee
        payment.late_fee_reason = f"Late payment fee - {days_overdue} days overdue"
        payment.late_fee_applied_date = now
