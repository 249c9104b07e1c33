"""Query-string filters for homestay listings and search."""

from __future__ import annotations

import django_filters  # type: ignore
from django.db.models import Count, Q  # type: ignore

from .models import Property


class NumberInFilter(django_filters.BaseInFilter, django_filters.NumberFilter):
    pass


class PropertyFilterSet(django_filters.FilterSet):
    city = django_filters.CharFilter(lookup_expr="icontains")
    state = django_filters.CharFilter(lookup_expr="icontains")
    country = django_filters.CharFilter(lookup_expr="iexact")
    property_type = django_filters.ChoiceFilter(choices=Property.PropertyType.choices)
    instant_book = django_filters.BooleanFilter()

    min_price = django_filters.NumberFilter(field_name="base_price", lookup_expr="gte")
    max_price = django_filters.NumberFilter(field_name="base_price", lookup_expr="lte")
    guests = django_filters.NumberFilter(field_name="max_guests", lookup_expr="gte")
    bedrooms = django_filters.NumberFilter(lookup_expr="gte")
    bathrooms = django_filters.NumberFilter(lookup_expr="gte")
    min_rating = django_filters.NumberFilter(field_name="average_rating", lookup_expr="gte")

    # "3,7,12": listings must offer every one of these amenities
    amenities = NumberInFilter(method="filter_amenities")

    class Meta:
        model = Property
        fields = ["city", "state", "country", "property_type", "instant_book"]

    def filter_amenities(self, queryset, name, value):  # type: ignore
        wanted = {int(item) for item in value}
        if not wanted:
            return queryset
        return (
            queryset.annotate(
                wanted_amenities=Count("amenities", filter=Q(amenities__in=wanted), distinct=True)
            )
            .filter(wanted_amenities=len(wanted))
            .distinct()
        )
