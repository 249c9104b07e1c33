"""URL routing for wishlists."""

from django.urls import include, path  # type: ignore
from rest_framework.routers import DefaultRouter  # type: ignore

from .views import WishlistViewSet

router = DefaultRouter()
router.register(r"", WishlistViewSet, basename="wishlist")

urlpatterns = [path("", include(router.urls))]
