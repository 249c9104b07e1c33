"""Host calendar routes, mounted under /api/v1/calendar/."""

from django.urls import path  # type: ignore

from .calendar_views import (
    AvailabilityCheckView,
    AvailableDatesView,
    BlockDatesView,
    PropertyCalendarView,
    UnblockDatesView,
    UpdateDateView,
)

urlpatterns = [
    path("<int:property_id>/", PropertyCalendarView.as_view(), name="calendar"),
    path("<int:property_id>/block/", BlockDatesView.as_view(), name="calendar-block"),
    path(
        "<int:property_id>/unblock/<int:block_id>/",
        UnblockDatesView.as_view(),
        name="calendar-unblock",
    ),
    path("<int:property_id>/update-date/", UpdateDateView.as_view(), name="calendar-update-date"),
    path("<int:property_id>/availability/", AvailabilityCheckView.as_view(), name="calendar-availability"),
    path(
        "<int:property_id>/available-dates/",
        AvailableDatesView.as_view(),
        name="calendar-available-dates",
    ),
]
