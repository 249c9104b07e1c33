"""Property API views."""

from __future__ import annotations

import logging

from django.db.models import Max, Min, Q  # type: ignore
from django.shortcuts import get_object_or_404  # type: ignore
from django_filters.rest_framework import DjangoFilterBackend  # type: ignore
from rest_framework import permissions, serializers, status, viewsets  # type: ignore
from rest_framework.decorators import action  # type: ignore
from rest_framework.filters import OrderingFilter, SearchFilter  # type: ignore
from rest_framework.response import Response  # type: ignore

from apps.users.api.permissions import IsPlatformAdmin, is_platform_admin
from . import services
from .filters import PropertyFilterSet
from .models import Amenity, Property
from .permissions import IsPropertyOwnerOrAdmin
from .serializers import (
    AmenitySerializer,
    PropertyListSerializer,
    PropertySerializer,
    PropertyWriteSerializer,
    SearchDatesQuerySerializer,
    StayQuoteSerializer,
)

logger = logging.getLogger(__name__)

SORT_OPTIONS = {
    "price_low": ["base_price"],
    "price_high": ["-base_price"],
    "rating": ["-average_rating", "-review_count"],
    "reviews": ["-review_count"],
    "newest": ["-created_at"],
    "popular": ["-favorite_count"],
}

FEATURED_MIN_RATING = 4.5


def _float_param(params, name: str, default: float | None = None) -> float | None:  # type: ignore
    raw = params.get(name)
    if raw in (None, ""):
        return default
    try:
        return float(raw)
    except (TypeError, ValueError):
        raise serializers.ValidationError({name: "A valid number is required."})


def _limit_param(params, default: int, maximum: int = 50) -> int:  # type: ignore
    try:
        value = int(params.get("limit", default))
    except (TypeError, ValueError):
        return default
    return max(1, min(value, maximum))


class PropertyViewSet(viewsets.ModelViewSet):
    """Homestay listings: public catalogue plus host management."""

    queryset = Property.objects.select_related("host").prefetch_related("amenities", "photos")
    permission_classes = [IsPropertyOwnerOrAdmin]
    filter_backends = [DjangoFilterBackend, SearchFilter, OrderingFilter]
    filterset_class = PropertyFilterSet
    search_fields = ["title", "description", "city"]
    ordering_fields = [
        "base_price",
        "created_at",
        "average_rating",
        "review_count",
        "favorite_count",
    ]

    public_actions = {"list", "search", "featured", "nearby", "by_host"}

    def get_queryset(self):  # type: ignore
        qs = super().get_queryset()
        public = Q(status=Property.Status.APPROVED, is_active=True)
        if self.action in self.public_actions:
            return qs.filter(public)
        user = self.request.user
        if is_platform_admin(user):
            return qs
        if user.is_authenticated:
            return qs.filter(public | Q(host=user))
        return qs.filter(public)

    def get_serializer_class(self):  # type: ignore
        if self.action in {"create", "update", "partial_update"}:
            return PropertyWriteSerializer
        if self.action == "retrieve":
            return PropertySerializer
        return PropertyListSerializer

    def get_object(self):  # type: ignore
        lookup = str(self.kwargs["pk"])
        filter_kwargs = {"pk": int(lookup)} if lookup.isdigit() else {"slug": lookup}
        obj = get_object_or_404(self.get_queryset(), **filter_kwargs)
        self.check_object_permissions(self.request, obj)
        return obj

    def perform_create(self, serializer):  # type: ignore
        instance = serializer.save()
        logger.info(f"Property {instance.id} submitted for review by {self.request.user.email}")

    def perform_update(self, serializer):  # type: ignore
        instance = serializer.save()
        logger.info(f"Property {instance.id} updated, status {instance.status}")

    def perform_destroy(self, instance: Property) -> None:  # type: ignore
        instance.deactivate()
        logger.info(f"Property {instance.id} deactivated by {self.request.user.email}")

    def _paginated(self, queryset):  # type: ignore
        page = self.paginate_queryset(queryset)
        if page is not None:
            serializer = PropertyListSerializer(page, many=True, context=self.get_serializer_context())
            return self.get_paginated_response(serializer.data)
        serializer = PropertyListSerializer(queryset, many=True, context=self.get_serializer_context())
        return Response(serializer.data)

    @action(detail=True, methods=["post"], url_path="calculate-price", permission_classes=[permissions.AllowAny])
    def calculate_price(self, request, pk=None):  # type: ignore
        property_obj = self.get_object()
        serializer = StayQuoteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        check_in = serializer.validated_data["check_in"]
        check_out = serializer.validated_data["check_out"]
        guests = serializer.validated_data["guests"]

        try:
            services.validate_stay(property_obj, check_in, check_out, guests)
        except services.StayValidationError as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)

        breakdown = services.quote_stay(property_obj, check_in, check_out)
        payload = breakdown.as_dict()
        payload.update(
            {
                "property_id": property_obj.id,
                "check_in": check_in,
                "check_out": check_out,
                "guests": guests,
                "available": services.is_available(property_obj, check_in, check_out),
            }
        )
        return Response(payload)

    @action(detail=False, methods=["get"], url_path=r"host/(?P<host_id>\d+)")
    def by_host(self, request, host_id=None):  # type: ignore
        queryset = self.get_queryset().filter(host_id=host_id)
        return self._paginated(queryset)

    @action(detail=False, methods=["get"])
    def search(self, request):  # type: ignore
        params = request.query_params
        queryset = self.filter_queryset(self.get_queryset())

        dates = SearchDatesQuerySerializer(data=params)
        dates.is_valid(raise_exception=True)
        check_in = dates.validated_data.get("check_in")
        check_out = dates.validated_data.get("check_out")
        if check_in and check_out:
            queryset = queryset.exclude(id__in=services.unavailable_property_ids(check_in, check_out))

        lat = _float_param(params, "lat")
        lng = _float_param(params, "lng")
        if lat is not None and lng is not None:
            radius = _float_param(params, "radius", 10.0)
            min_lat, max_lat, min_lng, max_lng = services.bounding_box(lat, lng, radius)
            queryset = queryset.filter(
                latitude__gte=min_lat,
                latitude__lte=max_lat,
                longitude__gte=min_lng,
                longitude__lte=max_lng,
            )

        sort_by = params.get("sort_by")
        if sort_by in SORT_OPTIONS:
            queryset = queryset.order_by(*SORT_OPTIONS[sort_by])
        return self._paginated(queryset)

    @action(detail=False, methods=["get"])
    def featured(self, request):  # type: ignore
        limit = _limit_param(request.query_params, default=8)
        queryset = self.get_queryset()
        featured = queryset.filter(average_rating__gte=FEATURED_MIN_RATING).order_by(
            "-average_rating", "-review_count"
        )[:limit]
        if not featured:
            featured = queryset.order_by("-created_at")[:limit]
        serializer = PropertyListSerializer(featured, many=True, context=self.get_serializer_context())
        return Response(serializer.data)

    @action(detail=False, methods=["get"])
    def nearby(self, request):  # type: ignore
        params = request.query_params
        lat = _float_param(params, "lat")
        lng = _float_param(params, "lng")
        if lat is None or lng is None:
            return Response(
                {"detail": "lat and lng query parameters are required."},
                status=status.HTTP_400_BAD_REQUEST,
            )
        radius = _float_param(params, "radius", 10.0)
        min_lat, max_lat, min_lng, max_lng = services.bounding_box(lat, lng, radius)
        queryset = self.get_queryset().filter(
            latitude__gte=min_lat,
            latitude__lte=max_lat,
            longitude__gte=min_lng,
            longitude__lte=max_lng,
        )
        exclude = params.get("exclude")
        if exclude and exclude.isdigit():
            queryset = queryset.exclude(id=int(exclude))
        limit = _limit_param(params, default=10)
        serializer = PropertyListSerializer(
            queryset.order_by("-average_rating")[:limit],
            many=True,
            context=self.get_serializer_context(),
        )
        return Response(serializer.data)

    @action(
        detail=False,
        methods=["get"],
        url_path="location-suggestions",
        permission_classes=[permissions.AllowAny],
    )
    def location_suggestions(self, request):  # type: ignore
        query = (request.query_params.get("q") or "").strip()
        if len(query) < 2:
            return Response([])
        return Response(services.location_suggestions(query))

    @action(detail=False, methods=["get"], permission_classes=[permissions.AllowAny])
    def filters(self, request):  # type: ignore
        public = Property.objects.filter(status=Property.Status.APPROVED, is_active=True)
        bounds = public.aggregate(
            min_price=Min("base_price"),
            max_price=Max("base_price"),
            max_guests=Max("max_guests"),
        )
        amenities: dict[str, list] = {}
        for amenity in Amenity.objects.all():
            amenities.setdefault(amenity.category, []).append(AmenitySerializer(amenity).data)
        return Response(
            {
                "property_types": [
                    {"value": value, "label": label} for value, label in Property.PropertyType.choices
                ],
                "amenities": amenities,
                "price_range": {
                    "min": bounds["min_price"] or 0,
                    "max": bounds["max_price"] or 0,
                },
                "max_guests": bounds["max_guests"] or 1,
            }
        )


class AmenityViewSet(viewsets.ModelViewSet):
    """Amenity catalogue; readable by anyone, managed by administrators."""

    queryset = Amenity.objects.all()
    serializer_class = AmenitySerializer
    pagination_class = None

    def get_permissions(self):  # type: ignore
        if self.action in {"list", "retrieve"}:
            return [permissions.AllowAny()]
        return [IsPlatformAdmin()]
