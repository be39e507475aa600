"""Table availability lookup.

Read-only. Uses the same half-open overlap predicate as the write path
(``ReservationQuerySet.overlapping``) so the listing can never disagree
with what a create would accept.
"""

from __future__ import annotations

from typing import Iterable

from apps.reservations.models import Reservation
from shared.domain.value_objects import TimeSlot

from .models import Table


def busy_table_ids(slot: TimeSlot, tables: Iterable[Table] | None = None) -> set[int]:
    """Ids of tables holding a pending or confirmed reservation overlapping ``slot``."""

    qs = Reservation.objects.blocking().overlapping(slot)
    if tables is not None:
        qs = qs.filter(table__in=list(tables))
    return set(qs.values_list("table_id", flat=True))


def is_table_available(table: Table, slot: TimeSlot) -> bool:
    return not Reservation.objects.blocking().for_table(table).overlapping(slot).exists()


def tables_with_availability(slot: TimeSlot | None) -> list[tuple[Table, bool]]:
    """Active tables paired with their availability for ``slot``.

    Without a slot there is nothing to compute and every active table is
    reported as available.
    """
    tables = list(Table.objects.active().order_by("code"))
    if slot is None:
        return [(table, True) for table in tables]

    busy = busy_table_ids(slot)
    return [(table, table.pk not in busy) for table in tables]
