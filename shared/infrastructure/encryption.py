"""
Encryption utilities

Symmetric encryption (Fernet, AES-128-CBC with HMAC) for sensitive values
such as host bank account and UPI details.
"""

from __future__ import annotations

import base64
import hashlib

from cryptography.fernet import Fernet  # type: ignore
from django.conf import settings  # type: ignore


def get_encryption_key() -> bytes:
    """
    Get the Fernet key from settings.

    Any string is accepted; it is hashed down to the 32 bytes Fernet needs.
    """
    key = getattr(settings, "ENCRYPTION_KEY", None)
    if not key:
        raise ValueError(
            "ENCRYPTION_KEY not configured in settings. "
            "Generate one with: python -c 'from cryptography.fernet import Fernet; print(Fernet.generate_key().decode())'"
        )
    if isinstance(key, str):
        key = base64.urlsafe_b64encode(hashlib.sha256(key.encode()).digest())
    return key


def encrypt_string(plaintext: str) -> str:
    if not plaintext:
        return ""
    return Fernet(get_encryption_key()).encrypt(plaintext.encode()).decode()


def decrypt_string(token: str) -> str:
    """Raises ``cryptography.fernet.InvalidToken`` when the key does not match."""
    if not token:
        return ""
    return Fernet(get_encryption_key()).decrypt(token.encode()).decode()
