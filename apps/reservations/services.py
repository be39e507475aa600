"""Reservation transaction manager.

Creates and cancels reservations. Every create runs the cheap booking
rules first, then re-checks table overlap and takes board game stock inside
one atomic unit of work, so two requests racing for the same slot or the
last copy of a game cannot both commit.

Defense in depth against double booking:
1. Row lock on the table (SELECT FOR UPDATE on PostgreSQL, BEGIN IMMEDIATE
   on SQLite)
2. Overlap check inside the transaction (serializable on PostgreSQL)
3. PostgreSQL EXCLUDE constraint on (table, [start, end))
"""

from __future__ import annotations

import logging
from collections import OrderedDict
from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Callable, Iterable

from django.db import IntegrityError, OperationalError, connection, transaction  # type: ignore
from django.db.utils import NotSupportedError  # type: ignore
from django.utils import timezone  # type: ignore

from apps.games.models import BoardGame
from apps.games.services import release_stock, reserve_stock
from apps.tables.models import Table
from shared.application.uow import DjangoUnitOfWork
from shared.domain.value_objects import TimeSlot

from .actors import actor_for
from .domain.events import ReservationCancelled, ReservationCreated
from .exceptions import (
    CancellationNotAllowed,
    MalformedReservationRequest,
    PolicyViolation,
    ReservationConflict,
    ReservationTargetNotFound,
)
from .models import Reservation, ReservationGame
from .policy import BookingPolicy
from .rules import RuleEvaluator

logger = logging.getLogger(__name__)

# serialization_failure, deadlock_detected, exclusion_violation
CONFLICT_SQLSTATES = frozenset({"40001", "40P01", "23P01"})

# SQLite has no SQLSTATE; lock contention only shows in the message:
# "database is locked" (busy timeout hit) or "database table is locked".
SQLITE_LOCK_MARKER = "is locked"


@dataclass(frozen=True)
class GamePick:
    game_id: int
    quantity: int


@dataclass(frozen=True)
class ReservationRequest:
    table_id: int
    start_at: datetime
    end_at: datetime
    party_size: int
    note: str = ""
    member_id: int | None = None
    games: tuple[GamePick, ...] = field(default_factory=tuple)


def aggregate_picks(picks: Iterable[GamePick]) -> "OrderedDict[int, int]":
    """Sum quantities per game; repeated game ids are merged, not rejected."""
    totals: "OrderedDict[int, int]" = OrderedDict()
    for pick in picks:
        totals[pick.game_id] = totals.get(pick.game_id, 0) + pick.quantity
    return totals


def _lock_queryset_if_possible(queryset):
    """Apply select_for_update when inside transaction.atomic()."""

    if not transaction.get_connection().in_atomic_block:
        return queryset

    try:
        return queryset.select_for_update()
    except NotSupportedError:
        return queryset


def _is_conflict_error(exc: Exception) -> bool:
    cause = exc.__cause__
    sqlstate = getattr(cause, "sqlstate", None) or getattr(cause, "pgcode", None)
    if sqlstate in CONFLICT_SQLSTATES:
        return True
    return (
        isinstance(exc, OperationalError)
        and connection.vendor == "sqlite"
        and SQLITE_LOCK_MARKER in str(exc)
    )


@contextmanager
def _conflicts_as_reservation_conflict(detail: str | None = None):
    """Turn concurrency failures reported by the database into ReservationConflict."""
    try:
        yield
    except (IntegrityError, OperationalError) as exc:
        if not _is_conflict_error(exc):
            raise
        logger.warning(f"Concurrent write rejected by the database: {exc}")
        raise ReservationConflict(detail) from exc


class ReservationManager:
    """Create, cancel and scope reservations under a booking policy."""

    def __init__(
        self,
        policy: BookingPolicy | None = None,
        clock: Callable[[], datetime] = timezone.now,
    ):
        self.policy = policy or BookingPolicy.from_settings()
        self.rules = RuleEvaluator(self.policy)
        self._clock = clock

    # --- Queries -----------------------------------------------------------
    def visible_reservations(self, user):
        """Reservations the user may see, hydrated and ordered by start."""
        actor = actor_for(user)
        return actor.visible(Reservation.objects.hydrated()).order_by("start_at", "pk")

    # --- Create ------------------------------------------------------------
    def create(self, user, request: ReservationRequest) -> Reservation:
        now = self._clock()
        if timezone.is_naive(request.start_at) or timezone.is_naive(request.end_at):
            raise MalformedReservationRequest("Timestamps must carry a UTC offset.")

        self.rules.check_schedule(request.start_at, request.end_at, now)

        # Advisory reads can already hit a competing writer's lock.
        with _conflicts_as_reservation_conflict():
            actor = actor_for(user)
            member = actor.resolve_owner(request.member_id)

            table = Table.objects.active().filter(pk=request.table_id).first()
            if table is None:
                raise ReservationTargetNotFound("Table not available.")

            self.rules.check_party(request.party_size, table.capacity)
            self.rules.check_quota(Reservation.objects.active_future_for(member, now).count())

            picks = aggregate_picks(request.games)
            self._check_game_stock(picks)

            reservation = self._commit(actor, member, table, request, picks)

        logger.info(
            f"Reservation {reservation.pk} confirmed: table={table.code} member={member.pk} "
            f"slot={reservation.slot}"
        )
        return reservation

    def _check_game_stock(self, picks: "OrderedDict[int, int]") -> None:
        """Advisory stock check. The binding check is the conditional decrement."""
        if not picks:
            return

        games = BoardGame.objects.in_bulk(list(picks))
        missing = [game_id for game_id in picks if game_id not in games]
        if missing:
            raise ReservationTargetNotFound(f"Board games not found: {missing}.")

        for game_id, quantity in picks.items():
            game = games[game_id]
            if not game.is_active:
                raise PolicyViolation(
                    PolicyViolation.ITEM_INACTIVE,
                    f"{game.title} is not available for reservations.",
                )
            if quantity > game.stock_available:
                raise PolicyViolation(
                    PolicyViolation.INSUFFICIENT_STOCK,
                    f"Not enough copies of {game.title}.",
                )

    def _commit(self, actor, member, table, request: ReservationRequest, picks) -> Reservation:
        slot = TimeSlot(request.start_at, request.end_at)
        with DjangoUnitOfWork() as uow:
            # Serialises writers of the same table on backends with row locks.
            _lock_queryset_if_possible(Table.objects.filter(pk=table.pk)).first()

            overlapping = Reservation.objects.for_table(table).live().overlapping(slot)
            if overlapping.exists():
                logger.warning(f"Overlap on table {table.code} for {slot}")
                raise ReservationConflict("Table already booked for the requested slot.")

            reservation = Reservation.objects.create(
                member=member,
                table=table,
                start_at=request.start_at,
                end_at=request.end_at,
                party_size=request.party_size,
                note=request.note or "",
                status=Reservation.Status.CONFIRMED,
                created_by=actor.user,
            )

            for game_id, quantity in picks.items():
                if not reserve_stock(game_id, quantity):
                    raise ReservationConflict("Board game availability changed, please retry.")
                ReservationGame.objects.create(
                    reservation=reservation,
                    game_id=game_id,
                    quantity=quantity,
                )

            uow.add_event(ReservationCreated(
                aggregate_id=reservation.pk,
                actor_id=actor.user_id,
                table_id=table.pk,
                member_id=member.pk,
                party_size=request.party_size,
                start_at=request.start_at,
                end_at=request.end_at,
                games=dict(picks),
            ))

            return Reservation.objects.hydrated().get(pk=reservation.pk)

    # --- Cancel ------------------------------------------------------------
    def cancel(self, user, reservation_id) -> Reservation:
        now = self._clock()
        actor = actor_for(user)

        with _conflicts_as_reservation_conflict("Reservation changed concurrently, please retry."):
            reservation = Reservation.objects.filter(pk=reservation_id).first()
            if reservation is None:
                raise ReservationTargetNotFound("Reservation not found.")

            actor.ensure_can_cancel(reservation)

            if reservation.is_cancelled:
                raise CancellationNotAllowed(
                    CancellationNotAllowed.ALREADY_CANCELLED,
                    "Reservation already cancelled.",
                )

            hours = self.policy.cancellation_hours
            deadline = reservation.start_at - timedelta(hours=hours)
            if now > deadline:
                raise CancellationNotAllowed(
                    CancellationNotAllowed.CUTOFF_PASSED,
                    f"Cancellation is allowed up to {hours} hours before the start.",
                )

            with DjangoUnitOfWork() as uow:
                locked = _lock_queryset_if_possible(
                    Reservation.objects.filter(pk=reservation.pk)
                ).get()
                # A concurrent cancel may have committed while we waited for the lock.
                if locked.is_cancelled:
                    raise CancellationNotAllowed(
                        CancellationNotAllowed.ALREADY_CANCELLED,
                        "Reservation already cancelled.",
                    )

                locked.status = Reservation.Status.CANCELLED
                locked.cancelled_at = now
                locked.save(update_fields=["status", "cancelled_at"])

                released: dict[int, int] = {}
                for hold in locked.holds.all():
                    release_stock(hold.game_id, hold.quantity)
                    released[hold.game_id] = hold.quantity
                locked.holds.all().delete()

                uow.add_event(ReservationCancelled(
                    aggregate_id=locked.pk,
                    actor_id=actor.user_id,
                    released=released,
                ))

        logger.info(f"Reservation {locked.pk} cancelled by user {actor.user_id}, released {released}")
        return locked
