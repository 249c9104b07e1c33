"""Adding and removing homestays while keeping ``favorite_count`` in step."""

from __future__ import annotations

import logging

from django.db import transaction  # type: ignore
from django.db.models import F  # type: ignore
from django.db.models.functions import Greatest  # type: ignore

from apps.properties.models import Property
from .models import Wishlist

logger = logging.getLogger(__name__)


@transaction.atomic
def add_property(wishlist: Wishlist, property_obj: Property) -> bool:
    """Add ``property_obj``; returns ``False`` when it was already saved."""
    if wishlist.properties.filter(pk=property_obj.pk).exists():
        return False
    wishlist.properties.add(property_obj)
    Property.objects.filter(pk=property_obj.pk).update(favorite_count=F("favorite_count") + 1)
    wishlist.save(update_fields=["updated_at"])
    logger.info(f"Property {property_obj.pk} added to wishlist {wishlist.pk}")
    return True


@transaction.atomic
def remove_property(wishlist: Wishlist, property_obj: Property) -> bool:
    """Remove ``property_obj``; returns ``False`` when it was not in the list."""
    if not wishlist.properties.filter(pk=property_obj.pk).exists():
        return False
    wishlist.properties.remove(property_obj)
    Property.objects.filter(pk=property_obj.pk).update(
        favorite_count=Greatest(F("favorite_count") - 1, 0)
    )
    wishlist.save(update_fields=["updated_at"])
    logger.info(f"Property {property_obj.pk} removed from wishlist {wishlist.pk}")
    return True


@transaction.atomic
def delete_wishlist(wishlist: Wishlist) -> None:
    """Delete ``wishlist`` and release the counts held by its homestays."""
    property_ids = list(wishlist.properties.values_list("pk", flat=True))
    Property.objects.filter(pk__in=property_ids).update(
        favorite_count=Greatest(F("favorite_count") - 1, 0)
    )
    wishlist.delete()
