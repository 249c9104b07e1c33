"""Model definition for wishlists.

A ``Wishlist`` is a named collection of homestays kept by a member.
Public wishlists can be shared through an unguessable token; the token is
minted the first time the wishlist is made public and kept afterwards so
that links already handed out keep working.
"""

from __future__ import annotations

import secrets

from django.db import models  # type: ignore

SHARE_TOKEN_PREFIX = "wl_"
DEFAULT_WISHLIST_NAME = "My Favorites"


def generate_share_token() -> str:
    return f"{SHARE_TOKEN_PREFIX}{secrets.token_urlsafe(16)}"


class Wishlist(models.Model):
    """A member's collection of saved homestays."""

    user = models.ForeignKey(
        "users.CustomUser", on_delete=models.CASCADE, related_name="wishlists"
    )
    name = models.CharField(max_length=100, default=DEFAULT_WISHLIST_NAME)
    description = models.TextField(max_length=500, blank=True)
    properties = models.ManyToManyField(
        "properties.Property", related_name="wishlists", blank=True
    )
    is_public = models.BooleanField(default=False)
    share_token = models.CharField(max_length=40, unique=True, null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-updated_at", "-id"]

    def __str__(self) -> str:
        return f"Wishlist '{self.name}' of user {self.user_id}"

    def save(self, *args, **kwargs):  # type: ignore
        if self.is_public and not self.share_token:
            self.share_token = generate_share_token()
        super().save(*args, **kwargs)
