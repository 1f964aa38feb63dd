"""
Tenant repository - Data access layer for the Tenant Store.
"""
from core.repositories import BaseRepository
from core.constants import TenantStatus
from .models import Tenant


class TenantRepository(BaseRepository[Tenant]):
    """Repository for Tenant model"""

    def __init__(self):
        super().__init__(Tenant)

    def set_room_snapshot(self, tenant: Tenant, room_number, monthly_rent=None, security_deposit=None,
                          status: str = TenantStatus.ACTIVE, lease_start_date=None) -> Tenant:
        """Write the denormalized room pointer. Caller holds the tenant row lock."""
        tenant.room_number = room_number
        tenant.tenant_status = status
        fields = ['room_number', 'tenant_status', 'updated_at']
        if monthly_rent is not None:
            tenant.monthly_rent = monthly_rent
            fields.append('monthly_rent')
        if security_deposit is not None:
            tenant.security_deposit = security_deposit
            fields.append('security_deposit')
        if lease_start_date is not None and not tenant.lease_start_date:
            tenant.lease_start_date = lease_start_date
            fields.append('lease_start_date')
        tenant.save(update_fields=fields)
        return tenant

    def clear_room_snapshot(self, tenant: Tenant) -> Tenant:
        tenant.room_number = None
        tenant.tenant_status = TenantStatus.INACTIVE
        tenant.save(update_fields=['room_number', 'tenant_status', 'updated_at'])
        return tenant
