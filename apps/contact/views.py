"""Public contact form endpoint."""

from __future__ import annotations

import logging

from rest_framework import generics, permissions  # type: ignore

from .models import ContactMessage
from .serializers import ContactMessageSerializer

logger = logging.getLogger(__name__)


class ContactMessageCreateView(generics.CreateAPIView):
    """Anyone may write to the team; listing lives in the admin API."""

    queryset = ContactMessage.objects.all()
    serializer_class = ContactMessageSerializer
    permission_classes = [permissions.AllowAny]
    authentication_classes: list = []

    def perform_create(self, serializer):  # type: ignore
        contact = serializer.save()
        logger.info(f"Contact message {contact.id} received from {contact.email}")
