from dataclasses import fields
from rest_framework import viewsets, status
from rest_framework.decorators import action
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from core.dto import RoomDTO, AssignmentDTO, SecurityDepositUpdateDTO
from occupancy.services import OccupancyService
from occupancy.serializers import (
    TenancySerializer, RentalHistorySerializer, DepositDeductionSerializer,
    AssignTenantSerializer, AssignMultipleSerializer, UnassignTenantSerializer,
    SecurityDepositUpdateSerializer, DeductionCreateSerializer,
)
from api.permissions import IsManagement
from .models import Room
from .serializers import (
    RoomSerializer, RoomListSerializer, RoomStatusSerializer,
    RoomMaintenanceSerializer, RoomSearchSerializer,
)
from .services import RoomService

ROOM_DTO_FIELDS = {f.name for f in fields(RoomDTO)} - {"id", "status"}


class RoomViewSet(viewsets.ModelViewSet):
    """
    ViewSet for Room management.
    Writes go through RoomService / OccupancyService, which own the row locks
    and the capacity and status rules.
    """
    permission_classes = [IsAuthenticated, IsManagement]
    search_fields = ['room_number', 'description']
    ordering = ['room_number']

    def get_serializer_class(self):
        if self.action == 'list':
            return RoomListSerializer
        return RoomSerializer

    def get_queryset(self):
        return Room.objects.filter(is_active=True)

    def list(self, request, *args, **kwargs):
        params = RoomSearchSerializer(data=request.query_params)
        params.is_valid(raise_exception=True)
        rooms = RoomService().list_rooms(**params.validated_data)
        page = self.paginate_queryset(rooms)
        if page is not None:
            return self.get_paginated_response(RoomListSerializer(page, many=True).data)
        return Response(RoomListSerializer(rooms, many=True).data)

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        room_data = {k: v for k, v in serializer.validated_data.items() if k in ROOM_DTO_FIELDS}
        room = RoomService().create_room(RoomDTO(**room_data))
        return Response(RoomSerializer(room).data, status=status.HTTP_201_CREATED)

    def update(self, request, *args, **kwargs):
        partial = kwargs.pop('partial', False)
        room = RoomService().get_room(kwargs.get('pk'))
        serializer = self.get_serializer(room, data=request.data, partial=partial)
        serializer.is_valid(raise_exception=True)
        room = RoomService().update_room(room.id, dict(serializer.validated_data))
        return Response(RoomSerializer(room).data)

    def destroy(self, request, *args, **kwargs):
        RoomService().delete_room(kwargs.get('pk'))
        return Response(status=status.HTTP_204_NO_CONTENT)

    # ------------------------------------------------------------------
    # Room lifecycle
    # ------------------------------------------------------------------

    @action(detail=False, methods=['get'])
    def available(self, request):
        rooms = RoomService().get_available_rooms(
            room_type=request.query_params.get('room_type'),
            max_rent=request.query_params.get('max_rent'),
        )
        return Response(RoomListSerializer(rooms, many=True).data)

    @action(detail=False, methods=['get'])
    def statistics(self, request):
        return Response(RoomService().get_room_statistics())

    @action(detail=False, methods=['get'], url_path='occupancy-report')
    def occupancy_report(self, request):
        return Response(RoomService().get_occupancy_report())

    @action(detail=False, methods=['get'], url_path='maintenance-due')
    def maintenance_due(self, request):
        days = int(request.query_params.get('days', 30))
        rooms = RoomService().get_rooms_due_for_maintenance(days)
        return Response(RoomListSerializer(rooms, many=True).data)

    @action(detail=True, methods=['post'], url_path='status')
    def set_status(self, request, pk=None):
        serializer = RoomStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        room = RoomService().set_room_status(pk, serializer.validated_data['status'])
        return Response(RoomSerializer(room).data)

    @action(detail=True, methods=['post'])
    def maintenance(self, request, pk=None):
        serializer = RoomMaintenanceSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        room = RoomService().update_room_maintenance(pk, **serializer.validated_data)
        return Response(RoomSerializer(room).data)

    # ------------------------------------------------------------------
    # Occupancy
    # ------------------------------------------------------------------

    @action(detail=True, methods=['post'])
    def assign(self, request, pk=None):
        """Assign one tenant to this room"""
        serializer = AssignTenantSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        room = OccupancyService().assign_tenant(
            pk, data['tenant_id'],
            rent_amount=data.get('rent_amount'),
            security_deposit_amount=data.get('security_deposit_amount'),
        )
        return Response(RoomSerializer(room).data)

    @action(detail=True, methods=['post'], url_path='assign-multiple')
    def assign_multiple(self, request, pk=None):
        """Assign several tenants; all or nothing"""
        serializer = AssignMultipleSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        assignments = [AssignmentDTO(**item) for item in serializer.validated_data['tenants']]
        room = OccupancyService().assign_multiple_tenants(pk, assignments)
        return Response(RoomSerializer(room).data)

    @action(detail=True, methods=['post'])
    def unassign(self, request, pk=None):
        serializer = UnassignTenantSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        room = OccupancyService().unassign_tenant(pk, serializer.validated_data['tenant_id'])
        return Response(RoomSerializer(room).data)

    @action(detail=True, methods=['get'])
    def tenants(self, request, pk=None):
        include_inactive = request.query_params.get('include_inactive', 'false').lower() == 'true'
        tenancies = OccupancyService().get_room_tenants(pk, include_inactive=include_inactive)
        return Response(TenancySerializer(tenancies, many=True).data)

    @action(detail=True, methods=['get'])
    def history(self, request, pk=None):
        history = OccupancyService().get_rental_history(pk)
        return Response(RentalHistorySerializer(history, many=True).data)

    @action(detail=True, methods=['get', 'patch'], url_path='security-deposits')
    def security_deposits(self, request, pk=None):
        if request.method == 'GET':
            return Response(OccupancyService().get_room_security_deposits(pk))

        serializer = SecurityDepositUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = dict(serializer.validated_data)
        tenant_id = data.pop('tenant_id')
        tenancy = OccupancyService().update_security_deposit(pk, tenant_id, SecurityDepositUpdateDTO(**data))
        return Response(TenancySerializer(tenancy).data)

    @action(detail=True, methods=['post'])
    def deductions(self, request, pk=None):
        serializer = DeductionCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        deduction = OccupancyService().add_security_deposit_deduction(
            pk, data['tenant_id'], data['reason'], data['amount']
        )
        return Response(DepositDeductionSerializer(deduction).data, status=status.HTTP_201_CREATED)
