"""
Common Value Objects

- TimeSlot: a half-open interval of aware datetimes, used for reservation
  windows and availability queries.
"""

from dataclasses import dataclass
from datetime import datetime

from shared.domain.base import ValueObject


@dataclass(frozen=True)
class TimeSlot(ValueObject):
    """
    Time slot value object

    Represents the interval [start_at, end_at). Adjacent slots do not
    overlap, so an 18:00-19:30 slot and a 19:30-21:00 slot can coexist
    on the same table. The overlap test itself runs in the database, see
    ``ReservationQuerySet.overlapping``.
    """
    start_at: datetime
    end_at: datetime

    def __post_init__(self):
        if self.start_at >= self.end_at:
            raise ValueError(f"Start ({self.start_at}) must be before end ({self.end_at})")

    def __str__(self):
        return f"{self.start_at.isoformat()} - {self.end_at.isoformat()}"

    def __repr__(self):
        return f"TimeSlot({self.start_at!r}, {self.end_at!r})"
