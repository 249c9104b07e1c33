"""Rating aggregation and review moderation."""

from __future__ import annotations

import logging
from decimal import ROUND_HALF_UP, Decimal

from django.db import transaction  # type: ignore
from django.db.models import Avg, Count  # type: ignore

from apps.properties.models import Property
from .models import ASPECT_FIELDS, Review

logger = logging.getLogger(__name__)


def _one_decimal(value) -> Decimal:  # type: ignore
    if value is None:
        return Decimal("0.0")
    return Decimal(str(value)).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP)


def recalculate_property_rating(property_obj: Property) -> None:
    """Refresh ``average_rating`` and ``review_count`` from visible reviews."""
    stats = Review.objects.filter(
        property=property_obj,
        review_type=Review.ReviewType.PROPERTY,
        is_visible=True,
    ).aggregate(average=Avg("rating"), total=Count("id"))
    property_obj.average_rating = _one_decimal(stats["average"])
    property_obj.review_count = stats["total"]
    property_obj.save(update_fields=["average_rating", "review_count", "updated_at"])
    logger.info(
        f"Property {property_obj.id} rating recalculated: "
        f"{property_obj.average_rating} from {property_obj.review_count} reviews"
    )


def rating_summary(queryset) -> dict:  # type: ignore
    """Average, total, star distribution and aspect averages of ``queryset``."""
    aggregates = {"average": Avg("rating"), "total": Count("id")}
    aggregates.update({aspect: Avg(aspect) for aspect in ASPECT_FIELDS})
    stats = queryset.aggregate(**aggregates)

    distribution = {str(star): 0 for star in range(1, 6)}
    for row in queryset.values("rating").annotate(count=Count("id")):
        distribution[str(row["rating"])] = row["count"]

    return {
        "average_rating": _one_decimal(stats["average"]),
        "total_reviews": stats["total"],
        "rating_distribution": distribution,
        "aspects": {
            aspect: (_one_decimal(stats[aspect]) if stats[aspect] is not None else None)
            for aspect in ASPECT_FIELDS
        },
    }


@transaction.atomic
def hide_review(review: Review) -> Review:
    """Moderation removal: the review disappears and ratings are recomputed."""
    review.is_visible = False
    review.is_reported = False
    review.save(update_fields=["is_visible", "is_reported", "updated_at"])
    if review.property_id:
        recalculate_property_rating(review.property)
    logger.info(f"Review {review.id} hidden by moderation")
    return review
