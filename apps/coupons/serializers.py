from __future__ import annotations

from rest_framework import serializers  # type: ignore

from apps.journeys.models import Journey
from .models import Coupon


class CouponSerializer(serializers.ModelSerializer):
    class Meta:
        model = Coupon
        fields = [
            "id",
            "code",
            "description",
            "discount_type",
            "discount_value",
            "min_purchase",
            "max_discount",
            "valid_from",
            "valid_until",
        ]


class CouponValidateSerializer(serializers.Serializer):
    code = serializers.CharField(max_length=50)
    subtotal = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=0)
    journey = serializers.PrimaryKeyRelatedField(
        queryset=Journey.objects.all(),
        required=False,
        allow_null=True,
    )
