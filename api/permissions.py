"""
Role-based permissions for the API
"""
from rest_framework import permissions
from core.constants import UserRole


class IsManagement(permissions.BasePermission):
    """
    Permission to allow Admin and Staff roles
    """

    def has_permission(self, request, view):
        """Check if user is authenticated and has correct role"""
        if not (request.user and request.user.is_authenticated):
            return False
        return request.user.role in UserRole.MANAGEMENT


class IsAdminRole(permissions.BasePermission):
    """
    Permission for destructive operations (hard deletes)
    """

    def has_permission(self, request, view):
        if not (request.user and request.user.is_authenticated):
            return False
        return request.user.role == UserRole.ADMIN
