"""
Occupancy service - Business logic for placing tenants in rooms.

Every mutation runs in one transaction and locks the room row first, then the
tenant row(s), so concurrent requests against the same room or the same
tenant serialize on the database. The partial unique constraint
unique_active_tenancy_per_tenant backs up the tenant-side check.
"""
from decimal import Decimal
from typing import List
from django.db import transaction, IntegrityError
from core.services import BaseService
from core.constants import DepositStatus, RoomStatus, TenantStatus
from core.dto import AssignmentDTO, SecurityDepositUpdateDTO
from core.exceptions import (
    NotFoundError, CapacityExceededError, DuplicateAssignmentError, InvalidStateTransitionError,
)
from core.validators import AmountValidator, DepositValidator, RoomValidator
from rooms.models import Room
from rooms.repositories import RoomRepository
from rooms.services import RoomService
from tenants.models import Tenant
from tenants.repositories import TenantRepository
from .models import Tenancy, DepositDeduction
from .repositories import TenancyRepository


class OccupancyService(BaseService):
    """Assignment, unassignment, deposits and rental history"""

    def __init__(self):
        super().__init__()
        self.room_repo = RoomRepository()
        self.tenant_repo = TenantRepository()
        self.tenancy_repo = TenancyRepository()
        self.room_service = RoomService()

    # ------------------------------------------------------------------
    # Locking helpers (call inside transaction.atomic)
    # ------------------------------------------------------------------

    def _lock_room(self, room_id: int) -> Room:
        room = self.room_repo.get_for_update(room_id, is_active=True)
        if not room:
            raise NotFoundError(resource_type="Room", resource_id=room_id)
        return room

    def _lock_tenant(self, tenant_id: int) -> Tenant:
        tenant = self.tenant_repo.get_for_update(tenant_id)
        if not tenant:
            raise NotFoundError(resource_type="Tenant", resource_id=tenant_id)
        return tenant

    def _get_room(self, room_id: int) -> Room:
        room = self.room_repo.get_by_id(room_id)
        if not room:
            raise NotFoundError(resource_type="Room", resource_id=room_id)
        return room

    def _check_assignable(self, room: Room, additional: int):
        if room.status in RoomStatus.NOT_ASSIGNABLE:
            raise CapacityExceededError(
                message=f"Room {room.room_number} is {room.status} and cannot take tenants",
                details={"room_id": room.id, "status": room.status},
            )
        active_count = self.tenancy_repo.count_active(room.id)
        if active_count + additional > room.capacity:
            available = max(0, room.capacity - active_count)
            raise CapacityExceededError(
                message=f"Room can only accommodate {available} more tenant(s)",
                details={"room_id": room.id, "capacity": room.capacity, "current_occupancy": active_count},
            )

    def _check_not_assigned(self, tenant: Tenant, room: Room):
        current = self.tenancy_repo.get_active_for_tenant(tenant.id)
        if current is None:
            return
        if current.room_id == room.id:
            message = f"Tenant {tenant.full_name} is already assigned to this room"
        else:
            message = f"Tenant {tenant.full_name} is already assigned to another room"
        raise DuplicateAssignmentError(
            message=message,
            details={"tenant_id": tenant.id, "room_id": current.room_id},
        )

    def _open_tenancy(self, room: Room, tenant: Tenant, rent_amount, deposit_amount, now) -> Tenancy:
        rent = room.monthly_rent if rent_amount is None else AmountValidator.validate_non_negative(
            rent_amount, "Rent amount")
        deposit = room.security_deposit if deposit_amount is None else AmountValidator.validate_non_negative(
            deposit_amount, "Security deposit")
        RoomValidator.validate_deposit_precision(deposit)

        tenancy = self.tenancy_repo.create(
            room=room,
            tenant=tenant,
            rent_amount=rent,
            deposit_amount=deposit,
            deposit_status=DepositStatus.PAID if deposit == 0 else DepositStatus.PENDING,
            move_in_date=now,
        )
        self.tenant_repo.set_room_snapshot(
            tenant,
            room_number=room.room_number,
            monthly_rent=rent,
            security_deposit=deposit,
            lease_start_date=now.date(),
        )
        return tenancy

    # ------------------------------------------------------------------
    # Assignment
    # ------------------------------------------------------------------

    def assign_tenant(self, room_id: int, tenant_id: int, rent_amount=None,
                      security_deposit_amount=None, now=None) -> Room:
        """
        Assign a tenant to a room.

        Rent defaults to the room's monthly rent and the deposit to the
        room's default deposit.

        Raises:
            NotFoundError: room or tenant does not exist
            CapacityExceededError: room is full, in maintenance or unavailable
            DuplicateAssignmentError: tenant already holds an active tenancy
        """
        now = self.now(now)
        try:
            with transaction.atomic():
                room = self._lock_room(room_id)
                tenant = self._lock_tenant(tenant_id)

                self._check_not_assigned(tenant, room)
                self._check_assignable(room, 1)

                self._open_tenancy(room, tenant, rent_amount, security_deposit_amount, now)
                self.room_service.sync_status(room)
        except IntegrityError as e:
            raise DuplicateAssignmentError(
                message="Tenant is already assigned to another room",
                details={"tenant_id": tenant_id},
            ) from e

        self.log_info(f"Tenant assigned to room {room.room_number}", room_id=room.id, tenant_id=tenant.id)
        return room

    def assign_multiple_tenants(self, room_id: int, assignments: List[AssignmentDTO], now=None) -> Room:
        """
        Assign several tenants at once. Either all of them are placed or none.
        """
        now = self.now(now)
        tenant_ids = [a.tenant_id for a in assignments]
        if len(set(tenant_ids)) != len(tenant_ids):
            raise DuplicateAssignmentError(message="The same tenant appears more than once",
                                           details={"tenant_ids": tenant_ids})

        try:
            with transaction.atomic():
                room = self._lock_room(room_id)
                self._check_assignable(room, len(assignments))

                # Tenant locks in id order so overlapping batches cannot deadlock
                tenants = {tid: self._lock_tenant(tid) for tid in sorted(tenant_ids)}
                for assignment in assignments:
                    tenant = tenants[assignment.tenant_id]
                    self._check_not_assigned(tenant, room)
                    self._open_tenancy(room, tenant, assignment.rent_amount,
                                       assignment.security_deposit_amount, now)

                self.room_service.sync_status(room)
        except IntegrityError as e:
            raise DuplicateAssignmentError(
                message="One of the tenants is already assigned to another room",
                details={"tenant_ids": tenant_ids},
            ) from e

        self.log_info(f"{len(assignments)} tenant(s) assigned to room {room.room_number}",
                      room_id=room.id, tenant_ids=tenant_ids)
        return room

    def unassign_tenant(self, room_id: int, tenant_id: int, now=None) -> Room:
        """
        Close the tenant's active tenancy in this room. The row stays as
        rental history.
        """
        now = self.now(now)
        with transaction.atomic():
            room = self._lock_room(room_id)
            tenant = self._lock_tenant(tenant_id)

            tenancy = self.tenancy_repo.get_active_for_update(room.id, tenant.id)
            if not tenancy:
                raise InvalidStateTransitionError(
                    message="Tenant is not currently assigned to this room",
                    event='unassign',
                    details={"room_id": room.id, "tenant_id": tenant.id},
                )

            tenancy.is_active = False
            tenancy.move_out_date = now
            tenancy.save(update_fields=['is_active', 'move_out_date', 'updated_at'])

            self.tenant_repo.clear_room_snapshot(tenant)
            self.room_service.sync_status(room)

        self.log_info(f"Tenant unassigned from room {room.room_number}", room_id=room.id, tenant_id=tenant.id)
        return room

    # ------------------------------------------------------------------
    # Security deposits
    # ------------------------------------------------------------------

    def update_security_deposit(self, room_id: int, tenant_id: int,
                                updates: SecurityDepositUpdateDTO) -> Tenancy:
        """Merge deposit changes into the tenant's active tenancy"""
        with transaction.atomic():
            room = self._lock_room(room_id)
            tenant = self._lock_tenant(tenant_id)
            tenancy = self.tenancy_repo.get_active_for_update(room.id, tenant.id)
            if not tenancy:
                raise InvalidStateTransitionError(
                    message="Tenant is not currently assigned to this room",
                    event='update_deposit',
                    details={"room_id": room.id, "tenant_id": tenant.id},
                )

            fields = []
            if updates.amount is not None:
                tenancy.deposit_amount = AmountValidator.validate_non_negative(updates.amount, "Security deposit")
                RoomValidator.validate_deposit_precision(tenancy.deposit_amount)
                fields.append('deposit_amount')
            if updates.status is not None:
                DepositValidator.validate_status(updates.status)
                tenancy.deposit_status = updates.status
                fields.append('deposit_status')
            if updates.date_paid is not None:
                tenancy.deposit_date_paid = updates.date_paid
                fields.append('deposit_date_paid')
            if updates.date_refunded is not None:
                tenancy.deposit_date_refunded = updates.date_refunded
                fields.append('deposit_date_refunded')
            if updates.refund_amount is not None:
                tenancy.deposit_refund_amount = AmountValidator.validate_non_negative(
                    updates.refund_amount, "Refund amount")
                fields.append('deposit_refund_amount')
            if updates.notes is not None:
                tenancy.deposit_notes = updates.notes
                fields.append('deposit_notes')

            if fields:
                tenancy.save(update_fields=fields + ['updated_at'])
                if 'deposit_amount' in fields:
                    self.tenant_repo.set_room_snapshot(tenant, room_number=room.room_number,
                                                       security_deposit=tenancy.deposit_amount)

        self.log_info("Security deposit updated", room_id=room.id, tenant_id=tenant.id, fields=fields)
        return tenancy

    def add_security_deposit_deduction(self, room_id: int, tenant_id: int, reason: str, amount,
                                       now=None) -> DepositDeduction:
        """
        Record a deduction against the newest tenancy of this tenant in the
        room, whether it is still active or already closed. Deductions are
        not capped at the deposit amount; the balance may go negative.
        """
        now = self.now(now)
        amount = DepositValidator.validate_deduction(reason, amount)

        with transaction.atomic():
            room = self._lock_room(room_id)
            tenant = self._lock_tenant(tenant_id)
            tenancy = self.tenancy_repo.get_latest_for_update(room.id, tenant.id)
            if not tenancy:
                raise InvalidStateTransitionError(
                    message="Tenant is not assigned to this room",
                    event='add_deduction',
                    details={"room_id": room.id, "tenant_id": tenant.id},
                )
            deduction = self.tenancy_repo.add_deduction(tenancy, reason.strip(), amount, now)

        self.log_info(f"Deposit deduction added: {reason}", room_id=room.id, tenant_id=tenant.id,
                      amount=str(amount))
        return deduction

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get_room_tenants(self, room_id: int, include_inactive: bool = False) -> List[Tenancy]:
        """Current tenancies in move-in order, followed by closed ones if requested"""
        room = self._get_room(room_id)
        tenancies = list(self.tenancy_repo.active_for_room(room.id))
        if include_inactive:
            tenancies += [t for t in self.tenancy_repo.all_for_room(room.id) if not t.is_active]
        return tenancies

    def get_room_security_deposits(self, room_id: int) -> List[dict]:
        room = self._get_room(room_id)
        deposits = []
        for tenancy in self.tenancy_repo.active_for_room(room.id):
            deductions = list(tenancy.deductions.all())
            total_deductions = sum((d.amount for d in deductions), Decimal('0'))
            deposits.append({
                'tenancy_id': tenancy.id,
                'tenant_id': tenancy.tenant_id,
                'tenant_name': tenancy.tenant.full_name,
                'amount': tenancy.deposit_amount,
                'status': tenancy.deposit_status,
                'date_paid': tenancy.deposit_date_paid,
                'notes': tenancy.deposit_notes,
                'deductions': [{'reason': d.reason, 'amount': d.amount, 'date': d.date} for d in deductions],
                'total_deductions': total_deductions,
                'balance': tenancy.deposit_amount - total_deductions,
            })
        return deposits

    def get_rental_history(self, room_id: int, now=None) -> List[dict]:
        """All tenancies of the room, newest first, with their length in days"""
        room = self._get_room(room_id)
        now = self.now(now)
        history = []
        for tenancy in self.tenancy_repo.all_for_room(room.id):
            end = tenancy.move_out_date or now
            history.append({
                'tenancy': tenancy,
                'duration_days': (end - tenancy.move_in_date).days,
            })
        return history

    # ------------------------------------------------------------------
    # Reconciliation
    # ------------------------------------------------------------------

    def reconcile_tenant_pointers(self, dry_run: bool = False) -> dict:
        """
        Rebuild every tenant's room_number from the active tenancies.

        Returns the list of tenants whose pointer was (or, with dry_run,
        would be) changed.
        """
        fixes = []

        with transaction.atomic():
            # Tenants first: assignment locks the tenant row before it writes a tenancy
            candidates = list(self.tenant_repo.get_queryset().select_for_update().order_by('id'))
            expected = dict(self.tenancy_repo.get_active_pairs())
            for tenant in candidates:
                want = expected.get(tenant.id)
                if tenant.room_number == want:
                    continue
                # Unassigned tenants only need attention when they still claim a room
                if want is None and not tenant.room_number:
                    continue
                fixes.append({'tenant_id': tenant.id, 'tenant': tenant.full_name,
                              'old_room_number': tenant.room_number, 'new_room_number': want})
                if dry_run:
                    continue
                if want is None:
                    self.tenant_repo.clear_room_snapshot(tenant)
                else:
                    self.tenant_repo.set_room_snapshot(tenant, room_number=want, status=TenantStatus.ACTIVE)

        if fixes:
            self.log_warning(f"Tenant room pointers out of sync: {len(fixes)}", dry_run=dry_run)
        return {'checked': len(candidates), 'fixed': fixes, 'dry_run': dry_run}
