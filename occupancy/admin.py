from django.contrib import admin
from .models import Tenancy, DepositDeduction


class DepositDeductionInline(admin.TabularInline):
    model = DepositDeduction
    extra = 0
    readonly_fields = ['reason', 'amount', 'date']
    can_delete = False


@admin.register(Tenancy)
class TenancyAdmin(admin.ModelAdmin):
    list_display = ['tenant', 'room', 'rent_amount', 'deposit_amount', 'deposit_status',
                    'move_in_date', 'move_out_date', 'is_active']
    list_filter = ['is_active', 'deposit_status', 'move_in_date']
    search_fields = ['tenant__first_name', 'tenant__last_name', 'room__room_number']
    inlines = [DepositDeductionInline]
    # Assignment state is owned by OccupancyService
    readonly_fields = ['room', 'tenant', 'move_in_date', 'move_out_date', 'is_active']

    fieldsets = (
        ('Tenancy', {
            'fields': ('room', 'tenant', 'rent_amount', 'move_in_date', 'move_out_date', 'is_active')
        }),
        ('Security Deposit', {
            'fields': ('deposit_amount', 'deposit_status', 'deposit_date_paid', 'deposit_date_refunded',
                       'deposit_refund_amount', 'deposit_notes')
        }),
    )

    def get_queryset(self, request):
        qs = super().get_queryset(request)
        return qs.select_related('tenant', 'room')

    def has_delete_permission(self, request, obj=None):
        return False
