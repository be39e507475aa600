"""Admin registration for reservations."""

from __future__ import annotations

from django.contrib import admin

from .models import Reservation, ReservationGame


class ReservationGameInline(admin.TabularInline):
    model = ReservationGame
    extra = 0
    readonly_fields = ("game", "quantity")
    can_delete = False


@admin.register(Reservation)
class ReservationAdmin(admin.ModelAdmin):
    list_display = (
        "id",
        "table",
        "member",
        "start_at",
        "end_at",
        "party_size",
        "status",
        "created_at",
    )
    list_filter = ("status", "table__zone", "start_at")
    search_fields = ("member__membership_code", "member__user__email", "table__code")
    inlines = [ReservationGameInline]
    # Status and holds change only through ReservationManager so stock stays consistent.
    readonly_fields = (
        "member",
        "table",
        "start_at",
        "end_at",
        "party_size",
        "status",
        "created_by",
        "created_at",
        "cancelled_at",
    )

    def has_add_permission(self, request):  # type: ignore
        return False
