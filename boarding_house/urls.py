"""
URL configuration for boarding_house project.
"""
from django.contrib import admin
from django.urls import path, include

# Import admin customization (just to apply it, not to use)
from boarding_house import admin as admin_customization  # noqa: F401

# Import health check URLs
from common.health import get_health_urls

urlpatterns = [
    path('admin/', admin.site.urls),
    path('api/', include('api.urls')),  # API routes
]

# Add health check endpoints (for load balancers, monitoring)
urlpatterns += get_health_urls()
