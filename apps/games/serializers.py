"""Serializers for the board game catalog."""

from __future__ import annotations

from rest_framework import serializers  # type: ignore

from .models import BoardGame


class BoardGameSerializer(serializers.ModelSerializer):
    class Meta:
        model = BoardGame
        fields = [
            "id",
            "title",
            "category",
            "min_players",
            "max_players",
            "min_age",
            "duration_min",
            "stock_total",
            "stock_available",
            "is_active",
        ]
        read_only_fields = fields
