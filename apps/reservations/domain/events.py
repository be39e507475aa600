"""
Reservation Domain Events

Published after the create/cancel transaction commits.
"""

from dataclasses import dataclass, field
from datetime import datetime

from shared.domain.base import DomainEvent


@dataclass
class ReservationCreated(DomainEvent):
    """
    Event: a reservation was committed in CONFIRMED state

    Triggers:
    - RESERVATION_CREATE audit entry
    """
    actor_id: int | None = None
    table_id: int | None = None
    member_id: int | None = None
    party_size: int = 0
    start_at: datetime | None = None
    end_at: datetime | None = None
    games: dict[int, int] = field(default_factory=dict)


@dataclass
class ReservationCancelled(DomainEvent):
    """
    Event: a reservation was cancelled and its game holds released

    Triggers:
    - RESERVATION_CANCEL audit entry
    """
    actor_id: int | None = None
    released: dict[int, int] = field(default_factory=dict)
