"""API views for host payouts."""

from __future__ import annotations

from rest_framework import mixins, permissions, status, viewsets  # type: ignore
from rest_framework.decorators import action  # type: ignore
from rest_framework.response import Response  # type: ignore

from apps.users.api.permissions import IsHostOrAdmin
from .models import Payout
from .serializers import PayoutRequestSerializer, PayoutSerializer
from .services import PayoutError, host_earnings, request_payout


class PayoutViewSet(mixins.ListModelMixin, mixins.RetrieveModelMixin, viewsets.GenericViewSet):
    """A host's payout history, withdrawal requests and earnings."""

    serializer_class = PayoutSerializer
    permission_classes = [permissions.IsAuthenticated, IsHostOrAdmin]

    def get_queryset(self):  # type: ignore
        qs = Payout.objects.filter(host=self.request.user).select_related("host")
        status_filter = self.request.query_params.get("status")
        if status_filter:
            qs = qs.filter(status=status_filter)
        return qs

    def get_serializer_class(self):  # type: ignore
        if self.action == "request_payout":
            return PayoutRequestSerializer
        return PayoutSerializer

    @action(detail=False, methods=["post"], url_path="request")
    def request_payout(self, request):  # type: ignore
        if not request.user.is_host():
            return Response(
                {"detail": "Only hosts can request payouts."},
                status=status.HTTP_403_FORBIDDEN,
            )
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            payout = request_payout(request.user, **serializer.validated_data)
        except PayoutError as e:
            return Response({"detail": str(e)}, status=status.HTTP_400_BAD_REQUEST)
        return Response(PayoutSerializer(payout).data, status=status.HTTP_201_CREATED)

    @action(detail=False, methods=["get"])
    def earnings(self, request):  # type: ignore
        return Response(host_earnings(request.user))
