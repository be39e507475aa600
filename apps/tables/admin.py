"""Admin registration for tables."""

from __future__ import annotations

from django.contrib import admin

from .models import Table


@admin.register(Table)
class TableAdmin(admin.ModelAdmin):
    list_display = ("code", "zone", "capacity", "is_active")
    list_filter = ("zone", "is_active")
    search_fields = ("code", "zone")

    def has_delete_permission(self, request, obj=None):  # type: ignore
        # Tables are deactivated, never deleted.
        return False
