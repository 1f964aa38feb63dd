from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin
from .models import User


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    """
    User management.

    ADMIN and STAFF users operate the engine (assign rooms, record payments).
    TENANT users are linked one-to-one to a tenant profile.
    """
    list_display = ['username', 'email', 'role', 'is_active', 'is_staff', 'date_joined']
    list_filter = ['role', 'is_active', 'is_staff']
    search_fields = ['username', 'email', 'phone']

    fieldsets = BaseUserAdmin.fieldsets + (
        ('Role', {
            'fields': ('role', 'phone'),
        }),
    )

    add_fieldsets = BaseUserAdmin.add_fieldsets + (
        ('Role', {
            'fields': ('role', 'phone'),
        }),
    )
