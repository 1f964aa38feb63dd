"""
Room repository - Data access layer for the Room Store.
"""
from datetime import timedelta
from typing import Optional
from django.db.models import QuerySet, Q, Count, Sum, Avg, F
from django.utils import timezone
from core.repositories import BaseRepository
from core.constants import RoomStatus
from .models import Room


class RoomRepository(BaseRepository[Room]):
    """Repository for Room model"""

    def __init__(self):
        super().__init__(Room)

    def get_active(self) -> QuerySet[Room]:
        return self.get_all(is_active=True)

    def get_by_number(self, room_number: str) -> Optional[Room]:
        return self.get_all(room_number=room_number, is_active=True).first()

    def is_room_number_available(self, room_number: str, exclude_id: int = None) -> bool:
        queryset = self.get_all(room_number=room_number)
        if exclude_id:
            queryset = queryset.exclude(id=exclude_id)
        return not queryset.exists()

    def with_occupancy(self, queryset: QuerySet[Room] = None) -> QuerySet[Room]:
        """Annotate each room with its active tenancy count"""
        queryset = queryset if queryset is not None else self.get_active()
        return queryset.annotate(
            active_count=Count('tenancies', filter=Q(tenancies__is_active=True))
        )

    def search(self, status=None, room_type=None, floor=None, min_capacity=None, max_capacity=None,
               min_rent=None, max_rent=None, is_available=None) -> QuerySet[Room]:
        queryset = self.with_occupancy()
        if status:
            queryset = queryset.filter(status=status)
        if room_type:
            queryset = queryset.filter(room_type=room_type)
        if floor is not None:
            queryset = queryset.filter(floor=floor)
        if min_capacity:
            queryset = queryset.filter(capacity__gte=min_capacity)
        if max_capacity:
            queryset = queryset.filter(capacity__lte=max_capacity)
        if min_rent is not None:
            queryset = queryset.filter(monthly_rent__gte=min_rent)
        if max_rent is not None:
            queryset = queryset.filter(monthly_rent__lte=max_rent)
        if is_available is True:
            queryset = queryset.filter(status=RoomStatus.AVAILABLE, active_count__lt=F('capacity'))
        elif is_available is False:
            queryset = queryset.filter(~Q(status=RoomStatus.AVAILABLE) | Q(active_count__gte=F('capacity')))
        return queryset.order_by('room_number')

    def find_available(self, room_type=None, min_capacity=None, max_rent=None, floor=None) -> QuerySet[Room]:
        return self.search(room_type=room_type, min_capacity=min_capacity, max_rent=max_rent,
                           floor=floor, is_available=True)

    def find_due_for_maintenance(self, days_ahead: int = 30) -> QuerySet[Room]:
        cutoff = timezone.localdate() + timedelta(days=days_ahead)
        return self.get_active().filter(next_service_date__lte=cutoff).order_by('next_service_date')

    def get_statistics(self) -> dict:
        from occupancy.models import Tenancy

        rooms = self.get_active()
        stats = rooms.aggregate(
            total_rooms=Count('id'),
            available_rooms=Count('id', filter=Q(status=RoomStatus.AVAILABLE)),
            occupied_rooms=Count('id', filter=Q(status=RoomStatus.OCCUPIED)),
            maintenance_rooms=Count('id', filter=Q(status=RoomStatus.MAINTENANCE)),
            reserved_rooms=Count('id', filter=Q(status=RoomStatus.RESERVED)),
            unavailable_rooms=Count('id', filter=Q(status=RoomStatus.UNAVAILABLE)),
            total_capacity=Sum('capacity'),
            average_rent=Avg('monthly_rent'),
            total_rent_value=Sum('monthly_rent'),
        )
        stats['current_occupancy'] = Tenancy.objects.filter(is_active=True, room__is_active=True).count()
        return stats

    def get_occupancy_report(self) -> list:
        """Per room type capacity, head count and rent figures"""
        from occupancy.models import Tenancy

        by_type = list(
            self.get_active().values('room_type').annotate(
                total_rooms=Count('id'),
                total_capacity=Sum('capacity'),
                available_rooms=Count('id', filter=Q(status=RoomStatus.AVAILABLE)),
                average_rent=Avg('monthly_rent'),
                total_rent_value=Sum('monthly_rent'),
            ).order_by('room_type')
        )
        occupancy = dict(
            Tenancy.objects.filter(is_active=True, room__is_active=True)
            .values('room__room_type')
            .annotate(n=Count('id'))
            .values_list('room__room_type', 'n')
        )
        for row in by_type:
            row['current_occupancy'] = occupancy.get(row['room_type'], 0)
        return by_type
