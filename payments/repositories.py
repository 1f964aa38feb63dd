"""
Payment repository - Data access layer for the Payment Store.
"""
from typing import List
from django.db.models import QuerySet, Count, Sum, Avg, Max, Min, Q
from core.repositories import BaseRepository
from core.constants import PaymentStatus
from .models import Payment

FILTER_FIELDS = {
    'status': 'status',
    'payment_type': 'payment_type',
    'payment_method': 'payment_method',
    'tenant_id': 'tenant_id',
    'room_id': 'room_id',
    'is_late_payment': 'is_late_payment',
    'start_date': 'due_date__gte',
    'end_date': 'due_date__lte',
    'paid_from': 'payment_date__gte',
    'paid_to': 'payment_date__lte',
}

SEARCH_FIELDS = ('receipt_number', 'transaction_reference', 'description', 'notes')


class PaymentRepository(BaseRepository[Payment]):
    """Repository for Payment model"""

    def __init__(self):
        super().__init__(Payment)

    def _with_relations(self, queryset: QuerySet[Payment]) -> QuerySet[Payment]:
        return queryset.select_related('tenant', 'room', 'recorded_by', 'created_by')

    def search(self, search: str = None, **filters) -> QuerySet[Payment]:
        """Filter by FILTER_FIELDS; `search` matches receipt, reference, description or notes"""
        lookups = {FILTER_FIELDS[key]: value for key, value in filters.items()
                   if key in FILTER_FIELDS and value is not None}
        queryset = self.get_all(**lookups)
        if search:
            term = Q()
            for field in SEARCH_FIELDS:
                term |= Q(**{f'{field}__icontains': search})
            queryset = queryset.filter(term)
        return self._with_relations(queryset).order_by('-due_date', '-id')

    def get_by_tenant(self, tenant_id: int) -> QuerySet[Payment]:
        return self.search(tenant_id=tenant_id)

    def get_by_room(self, room_id: int) -> QuerySet[Payment]:
        return self.search(room_id=room_id)

    def get_late(self) -> QuerySet[Payment]:
        return self._with_relations(self.get_all(is_late_payment=True)).order_by('-payment_date')

    def get_by_status(self, status: str) -> QuerySet[Payment]:
        return self._with_relations(self.get_all(status=status)).order_by('due_date')

    def get_recent_paid(self, limit: int = 5) -> QuerySet[Payment]:
        return self._with_relations(self.get_all(status=PaymentStatus.PAID)).order_by('-payment_date')[:limit]

    def past_due_pending_ids(self, cutoff) -> List[int]:
        """Pending payments due strictly before cutoff"""
        return list(self.get_all(status=PaymentStatus.PENDING, due_date__lt=cutoff)
                    .order_by('due_date', 'id').values_list('id', flat=True))

    def overdue_without_fee_ids(self) -> List[int]:
        return list(self.get_all(status=PaymentStatus.OVERDUE, late_fee_amount=0)
                    .order_by('due_date', 'id').values_list('id', flat=True))

    def get_statistics(self, **filters) -> dict:
        queryset = self.search(**filters).order_by()
        return queryset.aggregate(
            total_payments=Count('id'),
            total_amount=Sum('amount'),
            total_late_fees=Sum('late_fee_amount'),
            paid_payments=Count('id', filter=Q(status=PaymentStatus.PAID)),
            pending_payments=Count('id', filter=Q(status=PaymentStatus.PENDING)),
            overdue_payments=Count('id', filter=Q(status=PaymentStatus.OVERDUE)),
            refunded_payments=Count('id', filter=Q(status=PaymentStatus.REFUNDED)),
            late_payments_count=Count('id', filter=Q(is_late_payment=True)),
            paid_amount=Sum('amount', filter=Q(status=PaymentStatus.PAID)),
            outstanding_amount=Sum('amount', filter=Q(status__in=PaymentStatus.OPEN)),
            average_amount=Avg('amount'),
            max_amount=Max('amount'),
            min_amount=Min('amount'),
        )
