"""
API URLs for the boarding house engine
"""
from django.urls import path, include
from rest_framework.routers import DefaultRouter
from rest_framework_simplejwt.views import TokenObtainPairView, TokenRefreshView

from rooms.views import RoomViewSet
from tenants.views import TenantViewSet
from payments.views import PaymentViewSet

# Create router
router = DefaultRouter()
router.register(r'rooms', RoomViewSet, basename='room')
router.register(r'tenants', TenantViewSet, basename='tenant')
router.register(r'payments', PaymentViewSet, basename='payment')

urlpatterns = [
    # JWT Authentication
    path('auth/login/', TokenObtainPairView.as_view(), name='token_obtain_pair'),
    path('auth/refresh/', TokenRefreshView.as_view(), name='token_refresh'),

    # API routes
    path('', include(router.urls)),
]
