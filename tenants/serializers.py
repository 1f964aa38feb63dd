from rest_framework import serializers
from .models import Tenant


class TenantSerializer(serializers.ModelSerializer):
    """Serializer for Tenant"""
    full_name = serializers.ReadOnlyField()

    class Meta:
        model = Tenant
        fields = [
            'id', 'user', 'first_name', 'last_name', 'full_name', 'email', 'phone_number',
            'date_of_birth', 'occupation', 'street', 'city', 'province', 'zip_code',
            'id_type', 'id_number', 'emergency_contact_name', 'emergency_contact_relationship',
            'emergency_contact_phone', 'room_number', 'lease_start_date', 'lease_end_date',
            'monthly_rent', 'security_deposit', 'tenant_status', 'created_at', 'updated_at'
        ]
        # The room snapshot is maintained by room assignment, never edited directly
        read_only_fields = ['id', 'room_number', 'monthly_rent', 'security_deposit',
                            'tenant_status', 'created_at', 'updated_at']


class TenantListSerializer(serializers.ModelSerializer):
    """Lightweight serializer for list view"""
    full_name = serializers.ReadOnlyField()

    class Meta:
        model = Tenant
        fields = ['id', 'full_name', 'phone_number', 'email', 'room_number', 'tenant_status']
