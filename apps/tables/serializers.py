"""Serializers for tables and availability queries."""

from __future__ import annotations

from rest_framework import serializers  # type: ignore

from shared.domain.value_objects import TimeSlot

from .models import Table


class TableSerializer(serializers.ModelSerializer):
    class Meta:
        model = Table
        fields = ["id", "code", "capacity", "zone", "is_active"]
        read_only_fields = fields


class TableAvailabilitySerializer(TableSerializer):
    available = serializers.BooleanField(read_only=True)

    class Meta(TableSerializer.Meta):
        fields = TableSerializer.Meta.fields + ["available"]
        read_only_fields = fields


class AvailabilityQuerySerializer(serializers.Serializer):
    """Optional ``start_at``/``end_at`` window. Both are needed to compute availability."""

    start_at = serializers.DateTimeField(required=False)
    end_at = serializers.DateTimeField(required=False)

    def validate(self, attrs):  # type: ignore
        start_at = attrs.get("start_at")
        end_at = attrs.get("end_at")
        if start_at and end_at and start_at >= end_at:
            raise serializers.ValidationError("end_at must be after start_at.")
        return attrs

    @property
    def slot(self) -> TimeSlot | None:
        start_at = self.validated_data.get("start_at")
        end_at = self.validated_data.get("end_at")
        if not start_at or not end_at:
            return None
        return TimeSlot(start_at, end_at)
