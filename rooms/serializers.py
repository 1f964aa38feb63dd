from rest_framework import serializers
from core.constants import RoomType, RoomStatus
from .models import Room


class RoomSerializer(serializers.ModelSerializer):
    """Serializer for Room"""
    current_occupancy = serializers.ReadOnlyField()
    available_spots = serializers.ReadOnlyField()
    occupancy_rate = serializers.ReadOnlyField()
    is_available = serializers.ReadOnlyField()
    current_tenant = serializers.SerializerMethodField()

    class Meta:
        model = Room
        fields = [
            'id', 'room_number', 'room_type', 'capacity', 'monthly_rent', 'security_deposit',
            'description', 'amenities', 'floor', 'area', 'status',
            'last_service_date', 'next_service_date', 'maintenance_notes',
            'current_occupancy', 'available_spots', 'occupancy_rate', 'is_available', 'current_tenant',
            'is_active', 'created_at', 'updated_at'
        ]
        # Status and activity change through the room actions, never a plain PATCH
        read_only_fields = ['id', 'status', 'is_active', 'created_at', 'updated_at']

    def get_current_tenant(self, obj):
        tenant = obj.current_tenant
        if not tenant:
            return None
        return {'id': tenant.id, 'name': tenant.full_name}


class RoomListSerializer(serializers.ModelSerializer):
    """Lightweight serializer for list view"""
    current_occupancy = serializers.ReadOnlyField()

    class Meta:
        model = Room
        fields = ['id', 'room_number', 'room_type', 'capacity', 'current_occupancy',
                  'monthly_rent', 'status', 'floor']


class RoomStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=RoomStatus.CHOICES)


class RoomMaintenanceSerializer(serializers.Serializer):
    last_service_date = serializers.DateField(required=False)
    next_service_date = serializers.DateField(required=False)
    notes = serializers.CharField(max_length=1000, required=False, allow_blank=True)
    status = serializers.ChoiceField(choices=[('maintenance', 'Maintenance'), ('completed', 'Completed')],
                                     required=False)


class RoomSearchSerializer(serializers.Serializer):
    """Query parameters accepted by the room list"""
    status = serializers.ChoiceField(choices=RoomStatus.CHOICES, required=False)
    room_type = serializers.ChoiceField(choices=RoomType.CHOICES, required=False)
    floor = serializers.IntegerField(required=False, min_value=0)
    min_capacity = serializers.IntegerField(required=False, min_value=1)
    max_capacity = serializers.IntegerField(required=False, min_value=1)
    min_rent = serializers.DecimalField(max_digits=10, decimal_places=2, required=False)
    max_rent = serializers.DecimalField(max_digits=10, decimal_places=2, required=False)
    is_available = serializers.BooleanField(required=False, allow_null=True, default=None)
