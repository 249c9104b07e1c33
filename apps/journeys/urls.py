from __future__ import annotations

from django.urls import include, path  # type: ignore
from rest_framework.routers import DefaultRouter  # type: ignore

from .views import JourneyViewSet

router = DefaultRouter()
router.register(r"", JourneyViewSet, basename="journey")

urlpatterns = [
    path("", include(router.urls)),
]
