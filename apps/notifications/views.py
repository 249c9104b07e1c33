"""API views for notifications."""

from __future__ import annotations

from django.utils import timezone  # type: ignore
from rest_framework import mixins, permissions, status, viewsets  # type: ignore
from rest_framework.decorators import action  # type: ignore
from rest_framework.response import Response  # type: ignore

from shared.api.pagination import StandardPagination
from .models import Notification
from .serializers import NotificationSerializer


class NotificationViewSet(
    mixins.ListModelMixin,
    mixins.DestroyModelMixin,
    viewsets.GenericViewSet,
):
    """Inbox of the authenticated user."""

    serializer_class = NotificationSerializer
    permission_classes = [permissions.IsAuthenticated]
    pagination_class = StandardPagination

    def get_queryset(self):  # type: ignore
        return Notification.objects.filter(user=self.request.user)

    def list(self, request, *args, **kwargs):  # type: ignore
        qs = self.get_queryset()
        unread_count = qs.filter(is_read=False).count()
        flt = request.query_params.get("filter", "all")
        if flt == "unread":
            qs = qs.filter(is_read=False)
        elif flt == "read":
            qs = qs.filter(is_read=True)

        paginator = self.paginator
        page = paginator.paginate_queryset(qs, request, view=self)
        serializer = self.get_serializer(page, many=True)
        return Response(
            {
                "success": True,
                "notifications": serializer.data,
                "pagination": paginator.get_pagination_meta(),
                "unread_count": unread_count,
            }
        )

    @action(detail=False, methods=["get"], url_path="unread-count")
    def unread_count(self, request):  # type: ignore
        return Response({"unread_count": self.get_queryset().filter(is_read=False).count()})

    @action(detail=True, methods=["post"], url_path="read")
    def mark_read(self, request, pk=None):  # type: ignore
        notification = self.get_object()
        notification.mark_read()
        return Response(self.get_serializer(notification).data)

    @action(detail=False, methods=["post"], url_path="mark-all-read")
    def mark_all_read(self, request):  # type: ignore
        updated = self.get_queryset().filter(is_read=False).update(is_read=True, read_at=timezone.now())
        return Response({"updated": updated})

    @action(detail=False, methods=["delete"], url_path="delete-read")
    def delete_read(self, request):  # type: ignore
        deleted, _ = self.get_queryset().filter(is_read=True).delete()
        return Response({"deleted": deleted}, status=status.HTTP_200_OK)
