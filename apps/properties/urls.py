"""Homestay and amenity routes, mounted under /api/v1/properties/."""

from __future__ import annotations

from rest_framework.routers import DefaultRouter  # type: ignore

from .views import AmenityViewSet, PropertyViewSet

router = DefaultRouter()
# "amenities/" must be matched before the listing detail route
router.register(r"amenities", AmenityViewSet, basename="amenity")
router.register(r"", PropertyViewSet, basename="property")

urlpatterns = router.urls
