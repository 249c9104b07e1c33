"""Public coupon endpoints."""

from __future__ import annotations

from rest_framework import generics, status  # type: ignore
from rest_framework.permissions import AllowAny  # type: ignore
from rest_framework.response import Response  # type: ignore
from rest_framework.views import APIView  # type: ignore

from .serializers import CouponSerializer, CouponValidateSerializer
from .services import CouponError, available_coupons, validate_coupon


class CouponListView(generics.ListAPIView):
    serializer_class = CouponSerializer
    permission_classes = [AllowAny]
    pagination_class = None

    def get_queryset(self):  # type: ignore
        return available_coupons().order_by("valid_until")


class CouponValidateView(APIView):
    permission_classes = [AllowAny]

    def post(self, request):  # type: ignore
        serializer = CouponValidateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        subtotal = serializer.validated_data["subtotal"]
        try:
            coupon, discount = validate_coupon(
                serializer.validated_data["code"],
                subtotal,
                serializer.validated_data.get("journey"),
            )
        except CouponError as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(
            {
                "code": coupon.code,
                "discount_type": coupon.discount_type,
                "discount": discount,
                "final_amount": max(subtotal - discount, 0),
            }
        )
