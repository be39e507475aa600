"""Booking rules.

Pure checks on a reservation request, run before any database query.
The module-level predicates only compare values; ``RuleEvaluator`` binds
them to a ``BookingPolicy`` and turns the first failing check into a
``PolicyViolation``.
"""

from __future__ import annotations

from datetime import datetime, timedelta, tzinfo

from django.utils import timezone  # type: ignore

from .exceptions import PolicyViolation
from .policy import BookingPolicy


def duration_matches_slot(start_at: datetime, end_at: datetime, slot_minutes: int) -> bool:
    """True iff the interval is exactly one slot long."""
    return end_at - start_at == timedelta(minutes=slot_minutes)


def within_operating_window(
    start_at: datetime,
    end_at: datetime,
    open_hour: int,
    close_hour: int,
    tz: tzinfo | None = None,
) -> bool:
    """True iff the interval sits on one calendar day between opening and closing.

    Aware datetimes are compared on the venue's local clock (``tz``, or the
    current Django time zone). Ending exactly at the closing hour is allowed.
    """
    if timezone.is_aware(start_at):
        start_at = timezone.localtime(start_at, tz)
    if timezone.is_aware(end_at):
        end_at = timezone.localtime(end_at, tz)

    if start_at.date() != end_at.date():
        return False

    midnight = start_at.replace(hour=0, minute=0, second=0, microsecond=0)
    open_at = midnight + timedelta(hours=open_hour)
    close_at = midnight + timedelta(hours=close_hour)

    return start_at >= open_at and end_at <= close_at


def is_future_request(start_at: datetime, now: datetime) -> bool:
    """A reservation starting exactly now is already too late."""
    return start_at > now


def within_party_capacity(party_size: int, capacity: int) -> bool:
    return party_size <= capacity


def within_active_reservation_quota(active_future_count: int, max_allowed: int) -> bool:
    return active_future_count < max_allowed


class RuleEvaluator:
    """Applies the booking policy, failing fast on the first broken rule.

    ``check_schedule`` tests slot duration, operating window and start in
    the future, in that order, and needs no database. ``check_party`` and
    ``check_quota`` run once the table and the member are known.
    """

    def __init__(self, policy: BookingPolicy, tz: tzinfo | None = None):
        self.policy = policy
        self.tz = tz

    def check_schedule(self, start_at: datetime, end_at: datetime, now: datetime) -> None:
        policy = self.policy
        if not duration_matches_slot(start_at, end_at, policy.slot_minutes):
            raise PolicyViolation(
                PolicyViolation.SLOT_DURATION,
                f"A reservation must last exactly {policy.slot_minutes} minutes.",
            )
        if not within_operating_window(start_at, end_at, policy.open_hour, policy.close_hour, self.tz):
            raise PolicyViolation(
                PolicyViolation.OPERATING_WINDOW,
                f"Reservations are allowed between {policy.open_hour}:00 and {policy.close_hour}:00.",
            )
        if not is_future_request(start_at, now):
            raise PolicyViolation(
                PolicyViolation.NOT_FUTURE,
                "A reservation must start in the future.",
            )

    def check_party(self, party_size: int, capacity: int) -> None:
        if not within_party_capacity(party_size, capacity):
            raise PolicyViolation(
                PolicyViolation.PARTY_CAPACITY,
                f"Party of {party_size} exceeds the table capacity of {capacity}.",
            )

    def check_quota(self, active_future_count: int) -> None:
        if not within_active_reservation_quota(active_future_count, self.policy.max_future_active):
            raise PolicyViolation(
                PolicyViolation.ACTIVE_QUOTA,
                f"Each member may hold at most {self.policy.max_future_active} future reservations.",
            )
