"""Admin registration for board games."""

from __future__ import annotations

from django.contrib import admin

from .models import BoardGame


@admin.register(BoardGame)
class BoardGameAdmin(admin.ModelAdmin):
    list_display = (
        "title",
        "category",
        "min_players",
        "max_players",
        "stock_available",
        "stock_total",
        "is_active",
    )
    list_filter = ("category", "is_active")
    search_fields = ("title", "category")
    # Available stock only moves through reservations.
    readonly_fields = ("stock_available",)

    def save_model(self, request, obj, form, change):  # type: ignore
        if not change:
            obj.stock_available = obj.stock_total
        super().save_model(request, obj, form, change)
