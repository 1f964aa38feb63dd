from django.db import models
from django.conf import settings
from django.core.validators import MinValueValidator, RegexValidator
from core.constants import TenantStatus, IdType


phone_validator = RegexValidator(
    regex=r'^\+?[1-9]\d{0,15}$',
    message="Please enter a valid phone number"
)


class Tenant(models.Model):
    """
    Tenant profile.

    room_number, monthly_rent and security_deposit are a denormalized snapshot
    of the tenant's active tenancy. Only OccupancyService writes them, in the
    same transaction as the tenancy row.
    """
    user = models.OneToOneField(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='tenant_profile')

    # Personal Information
    first_name = models.CharField(max_length=50)
    last_name = models.CharField(max_length=50)
    email = models.EmailField(blank=True)
    phone_number = models.CharField(max_length=17, validators=[phone_validator])
    date_of_birth = models.DateField(null=True, blank=True)
    occupation = models.CharField(max_length=100, blank=True)

    # Address
    street = models.CharField(max_length=100, blank=True)
    city = models.CharField(max_length=50, blank=True)
    province = models.CharField(max_length=50, blank=True)
    zip_code = models.CharField(max_length=10, blank=True)

    # Identification
    id_type = models.CharField(max_length=20, choices=IdType.CHOICES, default=IdType.NATIONAL_ID)
    id_number = models.CharField(max_length=50, blank=True)

    # Emergency Contact
    emergency_contact_name = models.CharField(max_length=100, blank=True)
    emergency_contact_relationship = models.CharField(max_length=50, blank=True)
    emergency_contact_phone = models.CharField(max_length=17, blank=True, validators=[phone_validator])

    # Rental snapshot
    room_number = models.CharField(max_length=10, null=True, blank=True)
    lease_start_date = models.DateField(null=True, blank=True)
    lease_end_date = models.DateField(null=True, blank=True)
    monthly_rent = models.DecimalField(max_digits=10, decimal_places=2, null=True, blank=True,
                                       validators=[MinValueValidator(0)])
    security_deposit = models.DecimalField(max_digits=10, decimal_places=2, null=True, blank=True,
                                           validators=[MinValueValidator(0)])

    tenant_status = models.CharField(max_length=20, choices=TenantStatus.CHOICES, default=TenantStatus.PENDING)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['last_name', 'first_name']
        verbose_name = "Tenant"
        verbose_name_plural = "Tenants"
        indexes = [
            models.Index(fields=['tenant_status'], name='tenants_ten_tenant__8d0b1f_idx'),
            models.Index(fields=['room_number'], name='tenants_ten_room_nu_5f2e3a_idx'),
            models.Index(fields=['last_name', 'first_name'], name='tenants_ten_last_na_c41e7b_idx'),
        ]

    def __str__(self):
        return f"{self.full_name} ({self.phone_number})"

    @property
    def full_name(self):
        return f"{self.first_name} {self.last_name}"

    @property
    def current_tenancy(self):
        """Get current active tenancy"""
        return self.tenancies.filter(is_active=True).select_related('room').first()

    def clean(self):
        from django.core.exceptions import ValidationError
        if self.lease_start_date and self.lease_end_date and self.lease_end_date <= self.lease_start_date:
            raise ValidationError("Lease end date must be after lease start date.")
