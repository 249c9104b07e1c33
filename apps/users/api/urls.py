"""URL routing for the platform admin API."""

from django.urls import include, path  # type: ignore
from rest_framework.routers import DefaultRouter  # type: ignore

from .views import (
    AdminBookingViewSet,
    AdminContactViewSet,
    AdminPayoutViewSet,
    AdminPropertyViewSet,
    AdminReviewViewSet,
    AdminUserViewSet,
)

router = DefaultRouter()
router.register(r"users", AdminUserViewSet, basename="admin-user")
router.register(r"properties", AdminPropertyViewSet, basename="admin-property")
router.register(r"bookings", AdminBookingViewSet, basename="admin-booking")
router.register(r"reviews", AdminReviewViewSet, basename="admin-review")
router.register(r"payouts", AdminPayoutViewSet, basename="admin-payout")
router.register(r"contact", AdminContactViewSet, basename="admin-contact")

urlpatterns = [
    path("", include(router.urls)),
]
