"""
Custom Django model fields for sensitive data.

``EncryptedJSONField`` keeps the JSON column type but stores a Fernet
token instead of the document, so payout details are unreadable in dumps
and backups. Values cannot be filtered on.
"""

from __future__ import annotations

import json
import logging

from cryptography.fernet import InvalidToken  # type: ignore
from django.db import models  # type: ignore

from .encryption import decrypt_string, encrypt_string

logger = logging.getLogger(__name__)


class EncryptedJSONField(models.JSONField):
    description = "Encrypted JSON document"

    def get_prep_value(self, value):  # type: ignore
        if value is None:
            return value
        return super().get_prep_value(encrypt_string(json.dumps(value, cls=self.encoder)))

    def from_db_value(self, value, expression, connection):  # type: ignore
        token = super().from_db_value(value, expression, connection)
        if not isinstance(token, str):
            # Rows written before encryption was enabled
            return token
        try:
            return json.loads(decrypt_string(token), cls=self.decoder)
        except InvalidToken:
            logger.error(f"Cannot decrypt {self.model.__name__}.{self.name}; check ENCRYPTION_KEY")
            return {}
