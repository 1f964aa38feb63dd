from rest_framework import viewsets, status
from rest_framework.decorators import action
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from core.constants import PaymentStatus
from core.dto import PaymentDTO
from core.exceptions import InvalidStateTransitionError
from api.permissions import IsManagement, IsAdminRole
from .models import Payment
from .serializers import (
    PaymentSerializer, PaymentListSerializer, PaymentCreateSerializer, PaymentUpdateSerializer,
    RefundSerializer, LateFeeSerializer, PaymentFilterSerializer,
)
from .services import BillingService


class PaymentViewSet(viewsets.GenericViewSet):
    """
    ViewSet for payment records.
    Status changes have their own actions (complete, refund); plain updates
    never touch status.
    """
    permission_classes = [IsAuthenticated, IsManagement]
    queryset = Payment.objects.all()

    def get_permissions(self):
        if self.action == 'destroy':
            return [IsAuthenticated(), IsAdminRole()]
        return super().get_permissions()

    def get_serializer_class(self):
        if self.action == 'list':
            return PaymentListSerializer
        return PaymentSerializer

    def _filters(self, request):
        params = PaymentFilterSerializer(data=request.query_params)
        params.is_valid(raise_exception=True)
        return params.validated_data

    def list(self, request):
        payments = BillingService().list_payments(**self._filters(request))
        page = self.paginate_queryset(payments)
        if page is not None:
            return self.get_paginated_response(PaymentListSerializer(page, many=True).data)
        return Response(PaymentListSerializer(payments, many=True).data)

    def retrieve(self, request, pk=None):
        return Response(PaymentSerializer(BillingService().get_payment(pk)).data)

    def create(self, request):
        serializer = PaymentCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        payment = BillingService().create_payment(PaymentDTO(**serializer.validated_data), created_by=request.user)
        return Response(PaymentSerializer(payment).data, status=status.HTTP_201_CREATED)

    def partial_update(self, request, pk=None):
        if 'status' in request.data:
            return Response(
                {'detail': 'Use the complete or refund actions to change payment status', 'code': 'STATUS_NOT_EDITABLE'},
                status=status.HTTP_400_BAD_REQUEST
            )
        serializer = PaymentUpdateSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        payment = BillingService().update_payment(pk, dict(serializer.validated_data), updated_by=request.user)
        return Response(PaymentSerializer(payment).data)

    def destroy(self, request, pk=None):
        BillingService().delete_payment(pk)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @action(detail=True, methods=['post'])
    def complete(self, request, pk=None):
        """Mark a pending or overdue payment as paid now"""
        payment = BillingService().mark_payment_completed(pk, completed_by=request.user)
        return Response(PaymentSerializer(payment).data)

    @action(detail=True, methods=['post'])
    def refund(self, request, pk=None):
        serializer = RefundSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        payment = BillingService().process_refund(
            pk, serializer.validated_data['amount'], serializer.validated_data['reason'],
            processed_by=request.user,
        )
        return Response(PaymentSerializer(payment).data)

    @action(detail=True, methods=['get'])
    def receipt(self, request, pk=None):
        """Paid payment data for receipt rendering"""
        payment = BillingService().get_payment(pk)
        if payment.status not in (PaymentStatus.PAID, PaymentStatus.REFUNDED):
            raise InvalidStateTransitionError(message="Receipts exist only for paid payments",
                                              current_status=payment.status, event='receipt')
        return Response(PaymentSerializer(payment).data)

    @action(detail=False, methods=['get'])
    def overdue(self, request):
        return Response(PaymentListSerializer(BillingService().get_overdue_payments(), many=True).data)

    @action(detail=False, methods=['get'])
    def pending(self, request):
        return Response(PaymentListSerializer(BillingService().get_pending_payments(), many=True).data)

    @action(detail=False, methods=['get'])
    def late(self, request):
        return Response(PaymentListSerializer(BillingService().get_late_payments(), many=True).data)

    @action(detail=False, methods=['get'])
    def statistics(self, request):
        return Response(BillingService().get_payment_statistics(**self._filters(request)))

    @action(detail=False, methods=['get'])
    def summary(self, request):
        summary = BillingService().get_payment_summary(**self._filters(request))
        return Response({
            'statistics': summary['statistics'],
            'recent_payments': PaymentListSerializer(summary['recent_payments'], many=True).data,
            'late_payments': PaymentListSerializer(summary['late_payments'], many=True).data,
        })

    @action(detail=False, methods=['post'], url_path='update-overdue')
    def update_overdue(self, request):
        return Response(BillingService().update_overdue_payments())

    @action(detail=False, methods=['post'], url_path='apply-late-fees')
    def apply_late_fees(self, request):
        serializer = LateFeeSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        result = BillingService().apply_late_fees(serializer.validated_data.get('late_fee_amount'))
        return Response(result)
