"""Event handlers wiring reservation events to the audit journal."""

from __future__ import annotations

from apps.audit import services as audit

from .domain.events import ReservationCancelled, ReservationCreated


def audit_reservation_created(event: ReservationCreated) -> None:
    audit.record(
        event.actor_id,
        "RESERVATION_CREATE",
        "RESERVATION",
        event.aggregate_id,
        {
            "table_id": event.table_id,
            "member_id": event.member_id,
            "party_size": event.party_size,
            "start_at": event.start_at.isoformat() if event.start_at else None,
            "end_at": event.end_at.isoformat() if event.end_at else None,
            "games": {str(game_id): qty for game_id, qty in event.games.items()},
        },
    )


def audit_reservation_cancelled(event: ReservationCancelled) -> None:
    audit.record(
        event.actor_id,
        "RESERVATION_CANCEL",
        "RESERVATION",
        event.aggregate_id,
        {"released": {str(game_id): qty for game_id, qty in event.released.items()}},
    )


def register(bus) -> None:
    bus.register_event_handler(ReservationCreated, audit_reservation_created)
    bus.register_event_handler(ReservationCancelled, audit_reservation_cancelled)
