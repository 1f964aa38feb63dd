from decimal import Decimal
from django.db import models
from django.core.validators import MinValueValidator, MaxValueValidator
from core.constants import RoomType, RoomStatus, DefaultLimits


class Room(models.Model):
    """
    Room - the unit of occupancy.

    Tenancies (current and historical) hang off the room through
    occupancy.Tenancy. Status follows occupancy automatically except for the
    manual statuses (maintenance, reserved, unavailable); see rooms.status.
    """
    room_number = models.CharField(max_length=10, unique=True, help_text="e.g., '101', 'B-2'")
    room_type = models.CharField(max_length=10, choices=RoomType.CHOICES)
    capacity = models.PositiveSmallIntegerField(
        validators=[MinValueValidator(DefaultLimits.MIN_ROOM_CAPACITY),
                    MaxValueValidator(DefaultLimits.MAX_ROOM_CAPACITY)]
    )

    monthly_rent = models.DecimalField(max_digits=10, decimal_places=2, validators=[MinValueValidator(0)])
    security_deposit = models.DecimalField(max_digits=10, decimal_places=2, default=0,
                                           validators=[MinValueValidator(0)],
                                           help_text="Default deposit for new tenancies")

    description = models.TextField(max_length=500, blank=True)
    amenities = models.JSONField(default=list, blank=True)
    floor = models.PositiveSmallIntegerField(null=True, blank=True)
    area = models.DecimalField(max_digits=7, decimal_places=2, null=True, blank=True,
                               validators=[MinValueValidator(1)], help_text="Square meters")

    status = models.CharField(max_length=20, choices=RoomStatus.CHOICES, default=RoomStatus.AVAILABLE)

    # Maintenance
    last_service_date = models.DateField(null=True, blank=True)
    next_service_date = models.DateField(null=True, blank=True)
    maintenance_notes = models.TextField(max_length=1000, blank=True)

    is_active = models.BooleanField(default=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['room_number']
        verbose_name = "Room"
        verbose_name_plural = "Rooms"
        indexes = [
            models.Index(fields=['status'], name='rooms_room_status_1c9a2e_idx'),
            models.Index(fields=['room_type'], name='rooms_room_room_ty_7b3d41_idx'),
            models.Index(fields=['is_active', 'status'], name='rooms_room_is_acti_e2f5a8_idx'),
            models.Index(fields=['monthly_rent'], name='rooms_room_monthly_04b6c3_idx'),
        ]

    def __str__(self):
        return f"Room {self.room_number} ({self.get_room_type_display()})"

    @property
    def active_tenancies(self):
        """Active tenancies in move-in order"""
        return self.tenancies.filter(is_active=True).order_by('move_in_date', 'id')

    @property
    def current_occupancy(self):
        return self.tenancies.filter(is_active=True).count()

    @property
    def available_spots(self):
        return max(0, self.capacity - self.current_occupancy)

    @property
    def current_tenant(self):
        """Primary tenant (earliest active tenancy), kept for single-tenant readers"""
        tenancy = self.active_tenancies.select_related('tenant').first()
        return tenancy.tenant if tenancy else None

    @property
    def is_available(self):
        return self.status == RoomStatus.AVAILABLE and self.current_occupancy < self.capacity

    @property
    def occupancy_rate(self):
        if not self.capacity:
            return Decimal('0')
        return round(Decimal(self.current_occupancy) / Decimal(self.capacity) * 100, 2)
