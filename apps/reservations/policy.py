"""Booking policy configuration."""

from __future__ import annotations

from dataclasses import dataclass

from django.conf import settings  # type: ignore


@dataclass(frozen=True)
class BookingPolicy:
    """Immutable booking policy handed to the rule evaluator and manager.

    Defaults mirror the venue's standard opening: 90 minute slots between
    15:00 and 23:00, three live future reservations per member and
    cancellation allowed up to two hours before the start.
    """

    slot_minutes: int = 90
    open_hour: int = 15
    close_hour: int = 23
    max_future_active: int = 3
    cancellation_hours: int = 2

    def __post_init__(self):
        if self.slot_minutes <= 0:
            raise ValueError("Slot length must be positive")
        if not 0 <= self.open_hour < self.close_hour <= 24:
            raise ValueError(f"Invalid opening hours {self.open_hour}-{self.close_hour}")
        if self.max_future_active < 0 or self.cancellation_hours < 0:
            raise ValueError("Quota and cancellation cutoff cannot be negative")

    @classmethod
    def from_settings(cls) -> "BookingPolicy":
        conf = getattr(settings, "BOOKING_POLICY", {})
        defaults = cls()
        return cls(
            slot_minutes=int(conf.get("SLOT_MINUTES", defaults.slot_minutes)),
            open_hour=int(conf.get("OPEN_HOUR", defaults.open_hour)),
            close_hour=int(conf.get("CLOSE_HOUR", defaults.close_hour)),
            max_future_active=int(conf.get("MAX_FUTURE_ACTIVE", defaults.max_future_active)),
            cancellation_hours=int(conf.get("CANCELLATION_HOURS", defaults.cancellation_hours)),
        )
