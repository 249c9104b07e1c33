"""URL routing for the contact form."""

from django.urls import path  # type: ignore

from .views import ContactMessageCreateView

urlpatterns = [
    path("", ContactMessageCreateView.as_view(), name="contact-create"),
]
