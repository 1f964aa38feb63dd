from django.db import models
from django.db.models import Q, Sum
from django.core.validators import MinValueValidator
from django.utils import timezone
from core.constants import DepositStatus
from rooms.models import Room
from tenants.models import Tenant


class Tenancy(models.Model):
    """
    MOST IMPORTANT TABLE - Links a tenant to a room.

    Rows are never deleted. An active row is a current assignment; a closed
    row (is_active=False, move_out_date set) is rental history. The security
    deposit record lives on the same row, so the live view and the history
    view of a deposit are always the same data.
    """
    room = models.ForeignKey(Room, on_delete=models.PROTECT, related_name='tenancies')
    tenant = models.ForeignKey(Tenant, on_delete=models.PROTECT, related_name='tenancies')

    rent_amount = models.DecimalField(max_digits=10, decimal_places=2, validators=[MinValueValidator(0)])

    # Security deposit
    deposit_amount = models.DecimalField(max_digits=10, decimal_places=2, default=0,
                                         validators=[MinValueValidator(0)])
    deposit_status = models.CharField(max_length=20, choices=DepositStatus.CHOICES, default=DepositStatus.PENDING)
    deposit_date_paid = models.DateTimeField(null=True, blank=True)
    deposit_date_refunded = models.DateTimeField(null=True, blank=True)
    deposit_refund_amount = models.DecimalField(max_digits=10, decimal_places=2, default=0,
                                                validators=[MinValueValidator(0)])
    deposit_notes = models.TextField(max_length=500, blank=True)

    move_in_date = models.DateTimeField(default=timezone.now)
    move_out_date = models.DateTimeField(null=True, blank=True)
    is_active = models.BooleanField(default=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-move_in_date', '-id']
        verbose_name = "Tenancy"
        verbose_name_plural = "Tenancies"
        constraints = [
            models.UniqueConstraint(
                fields=['tenant'],
                condition=Q(is_active=True),
                name='unique_active_tenancy_per_tenant',
            ),
        ]
        indexes = [
            models.Index(fields=['room', 'is_active'], name='occupancy_t_room_id_3a91c2_idx'),
            models.Index(fields=['tenant', 'is_active'], name='occupancy_t_tenant__b5d7e0_idx'),
            models.Index(fields=['is_active', 'move_in_date'], name='occupancy_t_is_acti_6f2c18_idx'),
        ]

    def __str__(self):
        return f"{self.tenant.full_name} - Room {self.room.room_number}"

    @property
    def total_deductions(self):
        return self.deductions.aggregate(total=Sum('amount'))['total'] or 0

    @property
    def deposit_balance(self):
        """Deposit minus deductions. Deductions are not capped, so this can go negative."""
        return self.deposit_amount - self.total_deductions

    @property
    def duration_days(self):
        end = self.move_out_date or timezone.now()
        return (end - self.move_in_date).days


class DepositDeduction(models.Model):
    """Itemized deduction against a tenancy's security deposit"""
    tenancy = models.ForeignKey(Tenancy, on_delete=models.PROTECT, related_name='deductions')
    reason = models.CharField(max_length=200)
    amount = models.DecimalField(max_digits=10, decimal_places=2, validators=[MinValueValidator(0)])
    date = models.DateTimeField(default=timezone.now)

    class Meta:
        ordering = ['date', 'id']
        verbose_name = "Deposit Deduction"
        verbose_name_plural = "Deposit Deductions"

    def __str__(self):
        return f"{self.reason}: {self.amount}"
