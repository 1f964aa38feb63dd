from django.contrib import admin
from .models import Payment


@admin.register(Payment)
class PaymentAdmin(admin.ModelAdmin):
    list_display = ['tenant', 'room', 'payment_type', 'amount', 'late_fee_amount', 'status',
                    'due_date', 'payment_date', 'receipt_number']
    list_filter = ['status', 'payment_type', 'payment_method', 'is_late_payment', 'due_date']
    search_fields = ['tenant__first_name', 'tenant__last_name', 'room__room_number',
                     'receipt_number', 'transaction_reference']
    date_hierarchy = 'due_date'
    # Status and receipt data are owned by BillingService
    readonly_fields = ['status', 'receipt_number', 'is_late_payment', 'late_fee_applied_date',
                       'refund_amount', 'refund_reason', 'refunded_at', 'refunded_by',
                       'recorded_by', 'created_by', 'created_at', 'updated_at']

    fieldsets = (
        ('Payment', {
            'fields': ('tenant', 'room', 'amount', 'payment_type', 'payment_method', 'status')
        }),
        ('Dates', {
            'fields': ('due_date', 'payment_date', 'period_start', 'period_end', 'is_late_payment')
        }),
        ('Receipt', {
            'fields': ('receipt_number', 'transaction_reference', 'description', 'notes')
        }),
        ('Late Fee', {
            'fields': ('late_fee_amount', 'late_fee_reason', 'late_fee_applied_date'),
            'classes': ('collapse',)
        }),
        ('Refund', {
            'fields': ('refund_amount', 'refund_reason', 'refunded_at', 'refunded_by'),
            'classes': ('collapse',)
        }),
        ('Audit', {
            'fields': ('recorded_by', 'created_by', 'created_at', 'updated_at'),
            'classes': ('collapse',)
        }),
    )

    def get_queryset(self, request):
        qs = super().get_queryset(request)
        return qs.select_related('tenant', 'room')
