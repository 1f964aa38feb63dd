from rest_framework import viewsets, status
from rest_framework.decorators import action
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from django.db import transaction
from .models import Tenant
from .serializers import TenantSerializer, TenantListSerializer
from core.exceptions import NotFoundError, InvalidStateTransitionError
from api.permissions import IsManagement


class TenantViewSet(viewsets.ModelViewSet):
    """
    ViewSet for Tenant profiles.
    Room assignment goes through the room endpoints, not through here.
    """
    permission_classes = [IsAuthenticated, IsManagement]
    search_fields = ['first_name', 'last_name', 'phone_number', 'email', 'id_number']
    ordering_fields = ['last_name', 'created_at']
    ordering = ['last_name']

    def get_serializer_class(self):
        if self.action == 'list':
            return TenantListSerializer
        return TenantSerializer

    def get_queryset(self):
        queryset = Tenant.objects.all().select_related('user')
        status_filter = self.request.query_params.get('status', None)
        if status_filter:
            queryset = queryset.filter(tenant_status=status_filter)
        return queryset

    @transaction.atomic
    def update(self, request, *args, **kwargs):
        """Update tenant profile with row-level locking"""
        tenant = Tenant.objects.select_for_update().filter(id=kwargs.get('pk')).first()
        if not tenant:
            return Response({'detail': 'Tenant not found'}, status=status.HTTP_404_NOT_FOUND)

        serializer = self.get_serializer(tenant, data=request.data, partial=kwargs.get('partial', False))
        serializer.is_valid(raise_exception=True)
        serializer.save()
        return Response(serializer.data)

    @transaction.atomic
    def destroy(self, request, *args, **kwargs):
        """Hard delete, only for tenants with no tenancy or payment history"""
        tenant = Tenant.objects.select_for_update().filter(id=kwargs.get('pk')).first()
        if not tenant:
            raise NotFoundError(resource_type="Tenant", resource_id=kwargs.get('pk'))
        if tenant.tenancies.exists() or tenant.payments.exists():
            raise InvalidStateTransitionError(
                message="Tenant has rental or payment history and cannot be deleted",
                event='delete',
                details={"tenant_id": tenant.id},
            )
        tenant.delete()
        return Response(status=status.HTTP_204_NO_CONTENT)

    @action(detail=True, methods=['get'])
    def tenancy(self, request, pk=None):
        """Get current active tenancy for this tenant"""
        from occupancy.serializers import TenancySerializer

        tenant = self.get_object()
        tenancy = tenant.current_tenancy
        if tenancy:
            return Response(TenancySerializer(tenancy).data)
        return Response({'detail': 'No active tenancy'}, status=status.HTTP_404_NOT_FOUND)

    @action(detail=True, methods=['get'])
    def payments(self, request, pk=None):
        """Payment records for this tenant"""
        from payments.services import BillingService
        from payments.serializers import PaymentListSerializer

        payments = BillingService().get_tenant_payments(int(pk))
        return Response(PaymentListSerializer(payments, many=True).data)
