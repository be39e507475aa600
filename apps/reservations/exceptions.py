"""Typed rejections raised by the reservation engine.

Each kind has its own HTTP status and ``default_code`` so clients can tell
a conflict (retry with another slot) from a policy violation (change the
request) or a missing/forbidden target (do not retry).
"""

from __future__ import annotations

from rest_framework import status  # type: ignore
from rest_framework.exceptions import APIException  # type: ignore


class ReservationError(APIException):
    """Base class for reservation rejections."""

    reason: str | None = None
    field_errors: dict | None = None


class MalformedReservationRequest(ReservationError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Malformed reservation request."
    default_code = "malformed_input"

    def __init__(self, detail=None, field_errors: dict | None = None):
        super().__init__(detail)
        self.field_errors = field_errors


class PolicyViolation(ReservationError):
    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY
    default_detail = "The request violates the booking policy."
    default_code = "policy_violation"

    SLOT_DURATION = "slot_duration"
    OPERATING_WINDOW = "operating_window"
    NOT_FUTURE = "not_future"
    PARTY_CAPACITY = "party_capacity"
    ACTIVE_QUOTA = "active_quota"
    ITEM_INACTIVE = "item_inactive"
    INSUFFICIENT_STOCK = "insufficient_stock"

    def __init__(self, reason: str, detail=None):
        super().__init__(detail)
        self.reason = reason


class ReservationTargetNotFound(ReservationError):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Not found."
    default_code = "not_found"


class OwnershipMismatch(ReservationError):
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = "You can only act on your own reservations."
    default_code = "ownership_mismatch"


class ReservationConflict(ReservationError):
    status_code = status.HTTP_409_CONFLICT
    default_detail = "The table or the games were taken by another reservation."
    default_code = "conflict"


class CancellationNotAllowed(ReservationError):
    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY
    default_detail = "The reservation can no longer be cancelled."
    default_code = "cancellation_window"

    CUTOFF_PASSED = "cutoff_passed"
    ALREADY_CANCELLED = "already_cancelled"

    def __init__(self, reason: str, detail=None):
        super().__init__(detail)
        self.reason = reason
