from django.contrib import admin
from .models import Tenant


@admin.register(Tenant)
class TenantAdmin(admin.ModelAdmin):
    list_display = ['full_name', 'phone_number', 'email', 'room_number', 'tenant_status', 'created_at']
    list_filter = ['tenant_status', 'created_at']
    search_fields = ['first_name', 'last_name', 'phone_number', 'email', 'id_number']
    # Rental snapshot is owned by the occupancy service
    readonly_fields = ['room_number', 'monthly_rent', 'security_deposit']

    fieldsets = (
        ('Basic Information', {
            'fields': ('user', 'first_name', 'last_name', 'phone_number', 'email', 'date_of_birth', 'occupation')
        }),
        ('Identity', {
            'fields': ('id_type', 'id_number')
        }),
        ('Address', {
            'fields': ('street', 'city', 'province', 'zip_code'),
            'classes': ('collapse',)
        }),
        ('Emergency Contact', {
            'fields': ('emergency_contact_name', 'emergency_contact_relationship', 'emergency_contact_phone'),
            'classes': ('collapse',)
        }),
        ('Rental Information', {
            'fields': ('tenant_status', 'room_number', 'monthly_rent', 'security_deposit',
                       'lease_start_date', 'lease_end_date')
        }),
    )
