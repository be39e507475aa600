"""Reservation domain models for LudoCloud."""

from __future__ import annotations

from django.conf import settings  # type: ignore
from django.core.exceptions import ValidationError  # type: ignore
from django.core.validators import MaxValueValidator, MinValueValidator  # type: ignore
from django.db import models  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore

from shared.domain.value_objects import TimeSlot


class ReservationQuerySet(models.QuerySet):
    def for_table(self, table):
        return self.filter(table=table)

    def live(self):
        """Reservations that still occupy their table (anything not cancelled)."""
        return self.exclude(status=Reservation.Status.CANCELLED)

    def blocking(self):
        """Reservations shown as occupying a table in availability listings."""
        return self.filter(status__in=Reservation.BLOCKING_STATUSES)

    def overlapping(self, slot: TimeSlot):
        """Half-open overlap: existing.start < slot.end AND existing.end > slot.start."""
        return self.filter(start_at__lt=slot.end_at, end_at__gt=slot.start_at)

    def active_future_for(self, member, now):
        return self.filter(
            member=member,
            start_at__gt=now,
            status__in=Reservation.BLOCKING_STATUSES,
        )

    def hydrated(self):
        return self.select_related("table", "member__user").prefetch_related("holds__game")


class Reservation(models.Model):
    """A table booked by a member for exactly one slot."""

    class Status(models.TextChoices):
        # PENDING and COMPLETED have no producer yet: new reservations are
        # confirmed immediately and completion is not tracked.
        PENDING = "PENDING", _("Pending")
        CONFIRMED = "CONFIRMED", _("Confirmed")
        CANCELLED = "CANCELLED", _("Cancelled")
        COMPLETED = "COMPLETED", _("Completed")

    BLOCKING_STATUSES = (Status.PENDING, Status.CONFIRMED)

    member = models.ForeignKey(
        "users.Member",
        on_delete=models.PROTECT,
        related_name="reservations",
    )
    table = models.ForeignKey(
        "tables.Table",
        on_delete=models.PROTECT,
        related_name="reservations",
    )
    start_at = models.DateTimeField()
    end_at = models.DateTimeField()
    party_size = models.PositiveSmallIntegerField(
        validators=[MinValueValidator(1), MaxValueValidator(20)],
    )
    note = models.TextField(blank=True)
    status = models.CharField(
        max_length=10,
        choices=Status.choices,
        default=Status.PENDING,
    )
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name="created_reservations",
    )
    created_at = models.DateTimeField(auto_now_add=True)
    cancelled_at = models.DateTimeField(null=True, blank=True)

    objects = ReservationQuerySet.as_manager()

    class Meta:
        verbose_name = _("Reservation")
        verbose_name_plural = _("Reservations")
        ordering = ["start_at"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(end_at__gt=models.F("start_at")),
                name="reservation_valid_interval",
            ),
        ]
        indexes = [
            models.Index(fields=["start_at", "table"], name="reservation_start_table_idx"),
            models.Index(fields=["member", "status"], name="reservation_member_status_idx"),
        ]

    def __str__(self) -> str:
        return f"Reservation #{self.pk} {self.table_id} {self.start_at:%Y-%m-%d %H:%M}"

    def clean(self) -> None:
        if self.start_at and self.end_at and self.start_at >= self.end_at:
            raise ValidationError(_("End must be after start."))

    @property
    def slot(self) -> TimeSlot:
        return TimeSlot(self.start_at, self.end_at)

    @property
    def is_cancelled(self) -> bool:
        return self.status == self.Status.CANCELLED


class ReservationGame(models.Model):
    """Copies of a board game held for the lifetime of a reservation."""

    reservation = models.ForeignKey(
        Reservation,
        on_delete=models.CASCADE,
        related_name="holds",
    )
    game = models.ForeignKey(
        "games.BoardGame",
        on_delete=models.PROTECT,
        related_name="holds",
    )
    quantity = models.PositiveIntegerField(validators=[MinValueValidator(1)])

    class Meta:
        verbose_name = _("Game hold")
        verbose_name_plural = _("Game holds")
        constraints = [
            models.UniqueConstraint(
                fields=["reservation", "game"],
                name="reservation_game_unique",
            ),
            models.CheckConstraint(
                condition=models.Q(quantity__gte=1),
                name="reservation_game_quantity_positive",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.quantity} x {self.game_id} for reservation {self.reservation_id}"
