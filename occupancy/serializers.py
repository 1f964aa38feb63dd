from rest_framework import serializers
from core.constants import DepositStatus
from .models import Tenancy, DepositDeduction


class DepositDeductionSerializer(serializers.ModelSerializer):
    class Meta:
        model = DepositDeduction
        fields = ['id', 'reason', 'amount', 'date']


class TenancySerializer(serializers.ModelSerializer):
    """Serializer for Tenancy (active or historical)"""
    tenant_name = serializers.CharField(source='tenant.full_name', read_only=True)
    tenant_email = serializers.EmailField(source='tenant.email', read_only=True)
    tenant_phone = serializers.CharField(source='tenant.phone_number', read_only=True)
    room_number = serializers.CharField(source='room.room_number', read_only=True)
    deductions = DepositDeductionSerializer(many=True, read_only=True)
    total_deductions = serializers.DecimalField(max_digits=12, decimal_places=2, read_only=True)
    deposit_balance = serializers.DecimalField(max_digits=12, decimal_places=2, read_only=True)

    class Meta:
        model = Tenancy
        fields = [
            'id', 'room', 'room_number', 'tenant', 'tenant_name', 'tenant_email', 'tenant_phone',
            'rent_amount', 'deposit_amount', 'deposit_status', 'deposit_date_paid',
            'deposit_date_refunded', 'deposit_refund_amount', 'deposit_notes',
            'deductions', 'total_deductions', 'deposit_balance',
            'move_in_date', 'move_out_date', 'is_active',
        ]
        read_only_fields = fields


class RentalHistorySerializer(serializers.Serializer):
    """One entry of a room's rental history"""
    tenancy = TenancySerializer()
    duration_days = serializers.IntegerField()


class AssignTenantSerializer(serializers.Serializer):
    tenant_id = serializers.IntegerField()
    rent_amount = serializers.DecimalField(max_digits=10, decimal_places=2, required=False, allow_null=True)
    security_deposit_amount = serializers.DecimalField(max_digits=10, decimal_places=2, required=False,
                                                       allow_null=True)


class AssignMultipleSerializer(serializers.Serializer):
    tenants = AssignTenantSerializer(many=True, allow_empty=False)


class UnassignTenantSerializer(serializers.Serializer):
    tenant_id = serializers.IntegerField()


class SecurityDepositUpdateSerializer(serializers.Serializer):
    tenant_id = serializers.IntegerField()
    amount = serializers.DecimalField(max_digits=10, decimal_places=2, required=False)
    status = serializers.ChoiceField(choices=DepositStatus.CHOICES, required=False)
    date_paid = serializers.DateTimeField(required=False)
    date_refunded = serializers.DateTimeField(required=False)
    refund_amount = serializers.DecimalField(max_digits=10, decimal_places=2, required=False)
    notes = serializers.CharField(max_length=500, required=False, allow_blank=True)


class DeductionCreateSerializer(serializers.Serializer):
    tenant_id = serializers.IntegerField()
    reason = serializers.CharField(max_length=200)
    amount = serializers.DecimalField(max_digits=10, decimal_places=2)
