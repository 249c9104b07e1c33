"""URL configuration for the QuietSummit backend.

The `urlpatterns` list routes URLs to views. It includes both Django admin
and application‑level routers provided by Django Rest Framework and each app.
"""
from django.contrib import admin  # type: ignore
from django.urls import path, include  # type: ignore
from drf_spectacular.views import SpectacularAPIView, SpectacularSwaggerView  # type: ignore

from .health import healthz

# API versioning. v1 is our initial version; future versions can be added here.

urlpatterns = [
    path('admin/', admin.site.urls),
    path('healthz/', healthz, name='healthz'),
    path('api/schema/', SpectacularAPIView.as_view(), name='schema'),
    path('api/docs/', SpectacularSwaggerView.as_view(url_name='schema'), name='swagger-ui'),
    # Application URLs
    path('api/v1/auth/', include(('apps.users.auth_urls', 'auth'), namespace='auth')),
    path('api/v1/profile/', include('apps.users.profile_urls')),
    path('api/v1/hosts/', include('apps.users.host_urls')),
    path('api/v1/properties/', include('apps.properties.urls')),
    path('api/v1/calendar/', include('apps.properties.calendar_urls')),
    path('api/v1/journeys/', include('apps.journeys.urls')),
    path('api/v1/bookings/', include('apps.bookings.urls')),
    path('api/v1/coupons/', include('apps.coupons.urls')),
    path('api/v1/notifications/', include('apps.notifications.urls')),
    path('api/v1/reviews/', include('apps.reviews.urls')),
    path('api/v1/wishlists/', include('apps.wishlists.urls')),
    path('api/v1/payouts/', include('apps.payouts.urls')),
    path('api/v1/contact/', include('apps.contact.urls')),
    path('api/v1/analytics/', include('apps.analytics.urls')),
    # Platform admin API
    path('api/v1/admin/', include('apps.users.api.urls')),
]
