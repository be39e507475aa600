"""Table (reservable resource) models."""

from __future__ import annotations

from django.core.validators import MinValueValidator  # type: ignore
from django.db import models  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore


class TableQuerySet(models.QuerySet):
    def active(self):
        return self.filter(is_active=True)


class Table(models.Model):
    """A physical table that members reserve by slot.

    Tables are never deleted: disabling one hides it from booking flows
    while keeping its reservation history.
    """

    code = models.CharField(max_length=20, unique=True)
    capacity = models.PositiveSmallIntegerField(validators=[MinValueValidator(1)])
    zone = models.CharField(max_length=50)
    is_active = models.BooleanField(default=True)

    objects = TableQuerySet.as_manager()

    class Meta:
        verbose_name = _("Table")
        verbose_name_plural = _("Tables")
        ordering = ["code"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(capacity__gte=1),
                name="table_capacity_positive",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.code} ({self.zone}, {self.capacity})"
