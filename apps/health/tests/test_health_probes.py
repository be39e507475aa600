"""Tests for the liveness and readiness endpoints."""

from __future__ import annotations

from unittest import mock

from django.db import OperationalError
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase


class HealthProbeTests(APITestCase):
    def test_live_needs_no_authentication(self) -> None:
        response = self.client.get(reverse("health-live"))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["status"], "ok")
        self.assertIn("timestamp", response.data)

    def test_ready_reports_database_ok(self) -> None:
        response = self.client.get(reverse("health-ready"))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["status"], "ready")
        self.assertEqual(response.data["database"], "ok")

    def test_ready_returns_503_when_database_is_down(self) -> None:
        with mock.patch("apps.health.views._ping_database", side_effect=OperationalError("connection refused")):
            with self.assertLogs("apps.health.views", level="ERROR"):
                response = self.client.get(reverse("health-ready"))

        self.assertEqual(response.status_code, status.HTTP_503_SERVICE_UNAVAILABLE)
        self.assertEqual(response.data["database"], "down")

    def test_live_stays_up_when_database_is_down(self) -> None:
        with mock.patch("apps.health.views._ping_database", side_effect=OperationalError("connection refused")):
            response = self.client.get(reverse("health-live"))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
