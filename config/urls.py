"""
URL configuration for MotorHub.
"""
from django.contrib import admin
from django.urls import path, include
from drf_spectacular.views import SpectacularAPIView, SpectacularSwaggerView

urlpatterns = [
    path('admin/', admin.site.urls),

    # API Documentation
    path('schema/', SpectacularAPIView.as_view(), name='schema'),
    path('schema/swagger/', SpectacularSwaggerView.as_view(url_name='schema'), name='swagger-ui'),

    # API v1
    path('v1/', include('apps.core.urls')),  # Health check
    path('v1/', include('apps.role_requests.urls')),  # Submission, review, reconciliation
    path('v1/', include('apps.entitlements.urls')),  # Accounts, tiers, listing quota
]
