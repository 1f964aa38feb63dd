from django.contrib import admin
from .models import Room


@admin.register(Room)
class RoomAdmin(admin.ModelAdmin):
    list_display = ['room_number', 'room_type', 'capacity', 'current_occupancy', 'monthly_rent', 'status', 'is_active']
    list_filter = ['room_type', 'status', 'is_active', 'floor']
    search_fields = ['room_number', 'description']
    # Status follows occupancy; manual changes go through RoomService
    readonly_fields = ['status', 'current_occupancy']

    fieldsets = (
        ('Basic Information', {
            'fields': ('room_number', 'room_type', 'capacity', 'floor', 'area', 'description', 'amenities')
        }),
        ('Rent Information', {
            'fields': ('monthly_rent', 'security_deposit')
        }),
        ('Status', {
            'fields': ('status', 'current_occupancy', 'is_active')
        }),
        ('Maintenance', {
            'fields': ('last_service_date', 'next_service_date', 'maintenance_notes'),
            'classes': ('collapse',)
        }),
    )
