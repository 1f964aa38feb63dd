from django.db import models
from django.conf import settings
from django.core.validators import MinValueValidator
from core.constants import PaymentType, PaymentMethod, PaymentStatus
from rooms.models import Room
from tenants.models import Tenant
from .state import PaymentEvent, transition


class Payment(models.Model):
    """
    Payment ledger - one charge owed by a tenant for a room.

    Status only moves through payments.state.transition(). A paid payment
    always has a payment_date and a receipt_number.
    """
    tenant = models.ForeignKey(Tenant, on_delete=models.PROTECT, related_name='payments')
    room = models.ForeignKey(Room, on_delete=models.PROTECT, related_name='payments')

    amount = models.DecimalField(max_digits=10, decimal_places=2, validators=[MinValueValidator(0)])
    payment_type = models.CharField(max_length=20, choices=PaymentType.CHOICES, default=PaymentType.RENT)
    payment_method = models.CharField(max_length=20, choices=PaymentMethod.CHOICES, default=PaymentMethod.CASH)
    status = models.CharField(max_length=20, choices=PaymentStatus.CHOICES, default=PaymentStatus.PENDING)

    due_date = models.DateTimeField()
    payment_date = models.DateTimeField(null=True, blank=True)
    period_start = models.DateField(null=True, blank=True)
    period_end = models.DateField(null=True, blank=True)

    receipt_number = models.CharField(max_length=40, unique=True, null=True, blank=True)
    transaction_reference = models.CharField(max_length=100, blank=True)
    description = models.CharField(max_length=200, blank=True)
    notes = models.TextField(max_length=500, blank=True)

    # Late fee
    late_fee_amount = models.DecimalField(max_digits=10, decimal_places=2, default=0,
                                          validators=[MinValueValidator(0)])
    late_fee_reason = models.CharField(max_length=200, blank=True)
    late_fee_applied_date = models.DateTimeField(null=True, blank=True)
    is_late_payment = models.BooleanField(default=False)

    # Refund
    refund_amount = models.DecimalField(max_digits=10, decimal_places=2, null=True, blank=True,
                                        validators=[MinValueValidator(0)])
    refund_reason = models.CharField(max_length=200, blank=True)
    refunded_at = models.DateTimeField(null=True, blank=True)
    refunded_by = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True,
                                    related_name='refunded_payments')

    recorded_by = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True,
                                    related_name='recorded_payments')
    created_by = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True,
                                   related_name='created_payments')

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-due_date', '-id']
        verbose_name = "Payment"
        verbose_name_plural = "Payments"
        indexes = [
            models.Index(fields=['tenant', 'due_date'], name='payments_pa_tenant__0c5e61_idx'),
            models.Index(fields=['room', 'due_date'], name='payments_pa_room_id_9a4d27_idx'),
            models.Index(fields=['status', 'due_date'], name='payments_pa_status_e81b3f_idx'),
            models.Index(fields=['payment_date'], name='payments_pa_payment_47c2da_idx'),
        ]

    def __str__(self):
        return f"{self.tenant.full_name} - {self.get_payment_type_display()} {self.amount} ({self.get_status_display()})"

    @property
    def total_amount(self):
        return self.amount + (self.late_fee_amount or 0)

    @property
    def is_overdue(self):
        return self.status == PaymentStatus.OVERDUE

    def compute_is_late(self) -> bool:
        """Paid strictly after the due date. Paying on the due date is on time."""
        return bool(self.payment_date and self.due_date and self.payment_date > self.due_date)

    def mark_as_paid(self, payment_date, recorded_by=None):
        """Apply the paid transition in memory; the caller saves and assigns a receipt"""
        self.status = transition(self.status, PaymentEvent.PAY)
        self.payment_date = payment_date
        if recorded_by is not None:
            self.recorded_by = recorded_by
        self.is_late_payment = self.compute_is_late()

    def mark_as_overdue(self):
        self.status = transition(self.status, PaymentEvent.MARK_OVERDUE)

    def mark_as_refunded(self, amount, reason, refunded_at, refunded_by=None):
        self.status = transition(self.status, PaymentEvent.REFUND)
        self.refund_amount = amount
        self.refund_reason = reason
        self.refunded_at = refunded_at
        self.refunded_by = refunded_by
