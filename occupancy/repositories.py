"""
Tenancy repository - Data access layer for tenancies and deposit deductions.
"""
from typing import Optional
from django.db.models import QuerySet, Prefetch
from core.repositories import BaseRepository
from .models import Tenancy, DepositDeduction


class TenancyRepository(BaseRepository[Tenancy]):
    """Repository for Tenancy model"""

    def __init__(self):
        super().__init__(Tenancy)

    def _with_relations(self, queryset: QuerySet[Tenancy]) -> QuerySet[Tenancy]:
        return queryset.select_related('tenant', 'room').prefetch_related(
            Prefetch('deductions', queryset=DepositDeduction.objects.order_by('date', 'id'))
        )

    def active_for_room(self, room_id: int) -> QuerySet[Tenancy]:
        return self._with_relations(self.get_all(room_id=room_id, is_active=True)).order_by('move_in_date', 'id')

    def all_for_room(self, room_id: int) -> QuerySet[Tenancy]:
        """Full rental history, newest first"""
        return self._with_relations(self.get_all(room_id=room_id)).order_by('-move_in_date', '-id')

    def count_active(self, room_id: int) -> int:
        return self.count(room_id=room_id, is_active=True)

    def get_active_for_tenant(self, tenant_id: int) -> Optional[Tenancy]:
        return self.get_all(tenant_id=tenant_id, is_active=True).select_related('room').first()

    def get_active_for_update(self, room_id: int, tenant_id: int) -> Optional[Tenancy]:
        return self.model.objects.select_for_update().filter(
            room_id=room_id, tenant_id=tenant_id, is_active=True
        ).first()

    def get_latest_for_update(self, room_id: int, tenant_id: int) -> Optional[Tenancy]:
        """Newest tenancy of a tenant in a room, active or closed"""
        return self.model.objects.select_for_update().filter(
            room_id=room_id, tenant_id=tenant_id
        ).order_by('-move_in_date', '-id').first()

    def get_active_pairs(self) -> QuerySet:
        """(tenant_id, room_number) for every active tenancy"""
        return self.get_all(is_active=True).values_list('tenant_id', 'room__room_number')

    def add_deduction(self, tenancy: Tenancy, reason: str, amount, date) -> DepositDeduction:
        return DepositDeduction.objects.create(tenancy=tenancy, reason=reason, amount=amount, date=date)
