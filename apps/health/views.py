"""Liveness and readiness probes for container orchestration."""

from __future__ import annotations

import logging

from django.db import DatabaseError, connection  # type: ignore
from django.utils import timezone  # type: ignore
from rest_framework import permissions, status  # type: ignore
from rest_framework.decorators import api_view, authentication_classes, permission_classes  # type: ignore
from rest_framework.response import Response  # type: ignore

logger = logging.getLogger(__name__)


def _ping_database() -> None:
    with connection.cursor() as cursor:
        cursor.execute("SELECT 1")


@api_view(["GET"])
@authentication_classes([])
@permission_classes([permissions.AllowAny])
def live(request):  # type: ignore
    """The process is up. Touches no external dependency."""
    return Response({"status": "ok", "timestamp": timezone.now().isoformat()})


@api_view(["GET"])
@authentication_classes([])
@permission_classes([permissions.AllowAny])
def ready(request):  # type: ignore
    """The process is up and the database answers a trivial query."""
    try:
        _ping_database()
    except DatabaseError as exc:
        logger.error(f"Readiness check failed: {exc}", exc_info=True)
        return Response(
            {"status": "unavailable", "database": "down", "timestamp": timezone.now().isoformat()},
            status=status.HTTP_503_SERVICE_UNAVAILABLE,
        )
    return Response({"status": "ready", "database": "ok", "timestamp": timezone.now().isoformat()})
