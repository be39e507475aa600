"""Board game catalog models."""

from __future__ import annotations

from django.core.validators import MinValueValidator  # type: ignore
from django.db import models  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore


class BoardGameQuerySet(models.QuerySet):
    def active(self):
        return self.filter(is_active=True)


class BoardGame(models.Model):
    """A board game title with a number of physical copies.

    ``stock_available`` counts the copies not held by any live reservation.
    It never drops below zero and never exceeds ``stock_total``; both bounds
    are enforced by database constraints.
    """

    title = models.CharField(max_length=255, unique=True)
    category = models.CharField(max_length=100)
    min_players = models.PositiveSmallIntegerField(validators=[MinValueValidator(1)])
    max_players = models.PositiveSmallIntegerField(validators=[MinValueValidator(1)])
    min_age = models.PositiveSmallIntegerField(default=0)
    duration_min = models.PositiveSmallIntegerField(help_text=_("Average play time in minutes."))
    stock_total = models.PositiveIntegerField(default=1)
    stock_available = models.PositiveIntegerField(default=1)
    is_active = models.BooleanField(default=True)

    objects = BoardGameQuerySet.as_manager()

    class Meta:
        verbose_name = _("Board game")
        verbose_name_plural = _("Board games")
        ordering = ["title"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(stock_available__gte=0)
                & models.Q(stock_available__lte=models.F("stock_total")),
                name="board_game_stock_within_total",
            ),
            models.CheckConstraint(
                condition=models.Q(min_players__lte=models.F("max_players")),
                name="board_game_players_range",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.title} ({self.stock_available}/{self.stock_total})"
