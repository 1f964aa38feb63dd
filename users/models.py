from django.contrib.auth.models import AbstractUser
from django.db import models
from core.constants import UserRole


class User(AbstractUser):
    """Custom User model - Admin/Staff manage the house, Tenant accounts back tenant profiles"""
    role = models.CharField(max_length=20, choices=UserRole.CHOICES, default=UserRole.STAFF)
    phone = models.CharField(max_length=15, blank=True)

    class Meta:
        verbose_name = "User"
        verbose_name_plural = "Users"

    def __str__(self):
        return f"{self.username} ({self.get_role_display()})"

    @property
    def is_management(self):
        return self.role in UserRole.MANAGEMENT
