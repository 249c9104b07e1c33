"""JSON renderer producing the `{success, data}` envelope the client expects."""

from __future__ import annotations

from typing import Any

from rest_framework.renderers import JSONRenderer  # type: ignore


def extract_message(data: Any) -> str:
    """Pick a single human readable message out of DRF error data."""
    if isinstance(data, dict):
        for key in ("message", "detail"):
            if key in data:
                return str(data[key])
        if "non_field_errors" in data:
            return extract_message(data["non_field_errors"])
        for field, errors in data.items():
            return f"{field}: {extract_message(errors)}"
        return ""
    if isinstance(data, (list, tuple)):
        return extract_message(data[0]) if data else ""
    return str(data)


class EnvelopeJSONRenderer(JSONRenderer):
    def render(self, data, accepted_media_type=None, renderer_context=None):  # type: ignore
        response = (renderer_context or {}).get("response")
        if response is None or data is None:
            return super().render(data, accepted_media_type, renderer_context)

        if response.status_code >= 400:
            payload = {
                "success": False,
                "message": extract_message(data),
                "errors": data,
            }
        elif isinstance(data, dict) and "success" in data:
            payload = data
        else:
            payload = {"success": True, "data": data}
        return super().render(payload, accepted_media_type, renderer_context)
