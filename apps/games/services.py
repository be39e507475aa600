"""Stock protocol for board games.

Copies are held by reservations through a conditional decrement, which is
the compare-and-swap guard against overselling: the update only touches
the row while enough copies remain, and the caller learns from the
affected-row count whether it won.
"""

from __future__ import annotations

import logging

from django.db.models import F  # type: ignore
from django.db.models.functions import Least  # type: ignore

from .models import BoardGame

logger = logging.getLogger(__name__)


def reserve_stock(game_id: int, quantity: int) -> bool:
    """Take ``quantity`` copies if they are still available.

    Returns False when the row was not updated, i.e. the stock moved below
    ``quantity`` since the caller last looked.
    """
    if quantity < 1:
        raise ValueError("Quantity must be at least 1")

    updated = BoardGame.objects.filter(
        pk=game_id,
        stock_available__gte=quantity,
    ).update(stock_available=F("stock_available") - quantity)

    if not updated:
        logger.warning(f"Stock for game {game_id} dropped below {quantity} before commit")
    return bool(updated)


def release_stock(game_id: int, quantity: int) -> None:
    """Return ``quantity`` copies to the shelf, saturating at ``stock_total``."""

    if quantity < 1:
        raise ValueError("Quantity must be at least 1")

    BoardGame.objects.filter(pk=game_id).update(
        stock_available=Least(F("stock_available") + quantity, F("stock_total")),
    )
