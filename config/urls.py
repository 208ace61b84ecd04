"""
URL configuration for the marketplace backend.

Resource APIs live under /api/; the root paths are plain liveness checks.
"""
from django.contrib import admin
from django.urls import path, include
from drf_spectacular.views import SpectacularAPIView, SpectacularSwaggerView

from config.views import home, db_test, health_check, stripe_check

urlpatterns = [
    # Health checks
    path('', home, name='home'),
    path('db-test', db_test, name='db-test'),
    path('api/health/', health_check, name='health-check'),
    path('api/stripe/check/', stripe_check, name='stripe-check'),

    # Admin
    path('admin/', admin.site.urls),

    # API Documentation
    path('api/schema/', SpectacularAPIView.as_view(), name='api-schema'),
    path('api/docs/', SpectacularSwaggerView.as_view(url_name='api-schema'), name='api-docs'),

    # Authentication
    path('api/auth/', include('apps.accounts.urls')),

    # API endpoints
    path('api/notifications/', include('apps.notifications.urls')),
    path('api/rented-fields/', include('apps.rentals.urls')),
    path('api/orders/', include('apps.orders.urls')),
    path('api/', include('apps.coins.urls')),
    path('api/', include('apps.redemptions.urls')),
    path('api/', include('apps.complaints.urls')),
    path('api/', include('apps.farms.urls')),
]


# Custom error handlers
handler404 = 'config.views.error_404'
handler500 = 'config.views.error_500'
