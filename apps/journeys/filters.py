from __future__ import annotations

import django_filters  # type: ignore

from .models import Journey


class JourneyFilterSet(django_filters.FilterSet):
    region = django_filters.CharFilter(field_name="region", lookup_expr="icontains")
    difficulty = django_filters.ChoiceFilter(choices=Journey.Difficulty.choices)
    min_price = django_filters.NumberFilter(field_name="price", lookup_expr="gte")
    max_price = django_filters.NumberFilter(field_name="price", lookup_expr="lte")
    duration = django_filters.NumberFilter(field_name="duration_days")
    min_duration = django_filters.NumberFilter(field_name="duration_days", lookup_expr="gte")
    max_duration = django_filters.NumberFilter(field_name="duration_days", lookup_expr="lte")

    class Meta:
        model = Journey
        fields = ["region", "difficulty", "is_featured"]
