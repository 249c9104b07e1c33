"""Location tree (state -> city -> district) used for search suggestions."""

from django.db import models
from django.utils.text import slugify
from django.utils.translation import gettext_lazy as _
from mptt.models import MPTTModel, TreeForeignKey


class Location(MPTTModel):
    """Hierarchical location: a state holds cities, a city holds districts."""

    class Kind(models.TextChoices):
        STATE = "state", _("State")
        CITY = "city", _("City")
        DISTRICT = "district", _("District")

    name = models.CharField(max_length=255)
    kind = models.CharField(max_length=20, choices=Kind.choices, default=Kind.CITY)
    parent = TreeForeignKey(
        'self',
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name='children',
        help_text=_("State for a city, city for a district, empty for a state"),
    )
    slug = models.SlugField(max_length=255, unique=True, blank=True)
    latitude = models.DecimalField(max_digits=9, decimal_places=6, null=True, blank=True)
    longitude = models.DecimalField(max_digits=9, decimal_places=6, null=True, blank=True)
    population = models.PositiveIntegerField(null=True, blank=True)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class MPTTMeta:
        order_insertion_by = ['name']

    class Meta:
        verbose_name = _("Location")
        verbose_name_plural = _("Locations")
        ordering = ['tree_id', 'lft']
        indexes = [
            models.Index(fields=['parent', 'name']),
            models.Index(fields=['kind', 'name']),
        ]

    def __str__(self):
        if self.parent:
            return f"{self.name}, {self.parent.name}"
        return self.name

    def save(self, *args, **kwargs):  # type: ignore
        if not self.slug:
            parts = [self.name]
            if self.parent_id:
                parts.append(self.parent.name)
            self.slug = slugify("-".join(parts))[:255]
        super().save(*args, **kwargs)

    @property
    def state_name(self) -> str:
        if self.kind == self.Kind.STATE:
            return self.name
        state = self.get_ancestors().filter(kind=self.Kind.STATE).first()
        return state.name if state else ""
