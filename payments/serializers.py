from rest_framework import serializers
from core.constants import PaymentType, PaymentMethod, PaymentStatus
from .models import Payment


class PaymentSerializer(serializers.ModelSerializer):
    """Serializer for Payment"""
    tenant_name = serializers.CharField(source='tenant.full_name', read_only=True)
    room_number = serializers.CharField(source='room.room_number', read_only=True)
    total_amount = serializers.DecimalField(max_digits=12, decimal_places=2, read_only=True)

    class Meta:
        model = Payment
        fields = [
            'id', 'tenant', 'tenant_name', 'room', 'room_number', 'amount', 'total_amount',
            'payment_type', 'payment_method', 'status', 'due_date', 'payment_date',
            'period_start', 'period_end', 'receipt_number', 'transaction_reference',
            'description', 'notes', 'late_fee_amount', 'late_fee_reason', 'late_fee_applied_date',
            'is_late_payment', 'refund_amount', 'refund_reason', 'refunded_at', 'refunded_by',
            'recorded_by', 'created_by', 'created_at', 'updated_at'
        ]
        read_only_fields = fields


class PaymentListSerializer(serializers.ModelSerializer):
    """Lightweight serializer for list view"""
    tenant_name = serializers.CharField(source='tenant.full_name', read_only=True)
    room_number = serializers.CharField(source='room.room_number', read_only=True)

    class Meta:
        model = Payment
        fields = [
            'id', 'tenant_name', 'room_number', 'amount', 'late_fee_amount', 'payment_type',
            'status', 'due_date', 'payment_date', 'receipt_number', 'is_late_payment'
        ]


class PaymentCreateSerializer(serializers.Serializer):
    tenant_id = serializers.IntegerField()
    room_id = serializers.IntegerField()
    amount = serializers.DecimalField(max_digits=10, decimal_places=2)
    payment_type = serializers.ChoiceField(choices=PaymentType.CHOICES, default=PaymentType.RENT)
    payment_method = serializers.ChoiceField(choices=PaymentMethod.CHOICES, default=PaymentMethod.CASH)
    due_date = serializers.DateTimeField()
    status = serializers.ChoiceField(choices=[(PaymentStatus.PENDING, 'Pending'), (PaymentStatus.PAID, 'Paid')],
                                     default=PaymentStatus.PENDING)
    payment_date = serializers.DateTimeField(required=False, allow_null=True)
    period_start = serializers.DateField(required=False, allow_null=True)
    period_end = serializers.DateField(required=False, allow_null=True)
    transaction_reference = serializers.CharField(max_length=100, required=False, allow_blank=True)
    description = serializers.CharField(max_length=200, required=False, allow_blank=True)
    notes = serializers.CharField(max_length=500, required=False, allow_blank=True)
    late_fee_amount = serializers.DecimalField(max_digits=10, decimal_places=2, required=False, allow_null=True)


class PaymentUpdateSerializer(serializers.Serializer):
    amount = serializers.DecimalField(max_digits=10, decimal_places=2, required=False)
    payment_type = serializers.ChoiceField(choices=PaymentType.CHOICES, required=False)
    payment_method = serializers.ChoiceField(choices=PaymentMethod.CHOICES, required=False)
    due_date = serializers.DateTimeField(required=False)
    payment_date = serializers.DateTimeField(required=False, allow_null=True)
    period_start = serializers.DateField(required=False, allow_null=True)
    period_end = serializers.DateField(required=False, allow_null=True)
    transaction_reference = serializers.CharField(max_length=100, required=False, allow_blank=True)
    description = serializers.CharField(max_length=200, required=False, allow_blank=True)
    notes = serializers.CharField(max_length=500, required=False, allow_blank=True)


class RefundSerializer(serializers.Serializer):
    amount = serializers.DecimalField(max_digits=10, decimal_places=2)
    reason = serializers.CharField(max_length=200, required=False, allow_blank=True, default='')


class LateFeeSerializer(serializers.Serializer):
    late_fee_amount = serializers.DecimalField(max_digits=10, decimal_places=2, required=False)


class PaymentFilterSerializer(serializers.Serializer):
    """Query parameters accepted by list and statistics"""
    status = serializers.ChoiceField(choices=PaymentStatus.CHOICES, required=False)
    payment_type = serializers.ChoiceField(choices=PaymentType.CHOICES, required=False)
    payment_method = serializers.ChoiceField(choices=PaymentMethod.CHOICES, required=False)
    tenant_id = serializers.IntegerField(required=False)
    room_id = serializers.IntegerField(required=False)
    start_date = serializers.DateTimeField(required=False)
    end_date = serializers.DateTimeField(required=False)
    paid_from = serializers.DateTimeField(required=False)
    paid_to = serializers.DateTimeField(required=False)
    search = serializers.CharField(max_length=100, required=False, allow_blank=True)
    is_late_payment = serializers.BooleanField(required=False, allow_null=True, default=None)
