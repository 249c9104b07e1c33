"""Tests for the response envelope."""

from __future__ import annotations

import json

from django.test import SimpleTestCase
from rest_framework.response import Response

from shared.api.renderers import EnvelopeJSONRenderer, extract_message


class EnvelopeRendererTests(SimpleTestCase):
    def _render(self, data, status_code: int) -> dict:
        response = Response(data, status=status_code)
        raw = EnvelopeJSONRenderer().render(data, renderer_context={"response": response})
        return json.loads(raw)

    def test_success_payload_is_wrapped(self) -> None:
        body = self._render({"id": 1}, 200)
        self.assertEqual(body, {"success": True, "data": {"id": 1}})

    def test_existing_envelope_is_kept(self) -> None:
        body = self._render({"success": True, "notifications": []}, 200)
        self.assertEqual(body, {"success": True, "notifications": []})

    def test_errors_carry_message(self) -> None:
        body = self._render({"check_out": ["Check-out must be after check-in."]}, 400)
        self.assertFalse(body["success"])
        self.assertEqual(body["message"], "check_out: Check-out must be after check-in.")
        self.assertIn("check_out", body["errors"])

    def test_extract_message_prefers_detail(self) -> None:
        self.assertEqual(extract_message({"detail": "Not found."}), "Not found.")
        self.assertEqual(extract_message({"non_field_errors": ["Dates taken."]}), "Dates taken.")
