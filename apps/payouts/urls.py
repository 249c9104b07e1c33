"""URL routing for payouts."""

from django.urls import include, path  # type: ignore
from rest_framework.routers import DefaultRouter  # type: ignore

from .views import PayoutViewSet

router = DefaultRouter()
router.register(r"", PayoutViewSet, basename="payout")

urlpatterns = [path("", include(router.urls))]
