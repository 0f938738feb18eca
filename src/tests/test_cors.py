"""Tests for the cross-origin headers sent to the browser client."""

from __future__ import annotations

from django.test import override_settings
from rest_framework.test import APIClient

from tests.utils import FakeRedisTestCase


class CorsTests(FakeRedisTestCase):
    """Configured origins get credentialed access; others get nothing."""

    def test_allowed_origin_gets_credentialed_headers(self):
        response = APIClient().get("/feed", HTTP_ORIGIN="https://blog.test")

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response["Access-Control-Allow-Origin"], "https://blog.test")
        self.assertEqual(response["Access-Control-Allow-Credentials"], "true")

    def test_unknown_origin_is_not_echoed(self):
        response = APIClient().get("/feed", HTTP_ORIGIN="https://evil.example")

        self.assertEqual(response.status_code, 200)
        self.assertNotIn("Access-Control-Allow-Origin", response)
        self.assertNotIn("Access-Control-Allow-Credentials", response)

    def test_preflight_allows_authorization_header(self):
        """Preflight is answered before token authentication runs."""
        response = APIClient().options(
            "/feed",
            HTTP_ORIGIN="https://blog.test",
            HTTP_ACCESS_CONTROL_REQUEST_METHOD="POST",
            HTTP_ACCESS_CONTROL_REQUEST_HEADERS="authorization",
            HTTP_AUTHORIZATION="Bearer not-a-token",
        )

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response["Access-Control-Allow-Origin"], "https://blog.test")
        self.assertIn("authorization", response["Access-Control-Allow-Headers"])

    @override_settings(CORS_ALLOW_ALL_ORIGINS=True, CORS_ALLOWED_ORIGINS=[], CORS_ALLOW_CREDENTIALS=False)
    def test_wildcard_never_allows_credentials(self):
        response = APIClient().get("/feed", HTTP_ORIGIN="https://evil.example")

        self.assertEqual(response["Access-Control-Allow-Origin"], "*")
        self.assertNotIn("Access-Control-Allow-Credentials", response)
