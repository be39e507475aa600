"""Serializers for the reservation API."""

from __future__ import annotations

from rest_framework import serializers  # type: ignore

from .models import Reservation, ReservationGame
from .services import GamePick, ReservationRequest


class GamePickSerializer(serializers.Serializer):
    game_id = serializers.IntegerField(min_value=1)
    quantity = serializers.IntegerField(min_value=1)


class ReservationCreateSerializer(serializers.Serializer):
    """Shape validation of a create request. Booking rules run in the manager."""

    member_id = serializers.IntegerField(required=False, allow_null=True, min_value=1)
    table_id = serializers.IntegerField(min_value=1)
    start_at = serializers.DateTimeField()
    end_at = serializers.DateTimeField()
    party_size = serializers.IntegerField(min_value=1, max_value=20)
    note = serializers.CharField(allow_blank=True, default="")
    games = GamePickSerializer(many=True, default=list)

    def validate(self, attrs):  # type: ignore
        if attrs["end_at"] <= attrs["start_at"]:
            raise serializers.ValidationError({"end_at": ["End must be after start."]})
        return attrs

    def to_request(self) -> ReservationRequest:
        data = self.validated_data
        return ReservationRequest(
            member_id=data.get("member_id"),
            table_id=data["table_id"],
            start_at=data["start_at"],
            end_at=data["end_at"],
            party_size=data["party_size"],
            note=data.get("note") or "",
            games=tuple(GamePick(pick["game_id"], pick["quantity"]) for pick in data.get("games", [])),
        )


class ReservationTableSerializer(serializers.Serializer):
    id = serializers.IntegerField()
    code = serializers.CharField()
    zone = serializers.CharField()


class ReservationMemberSerializer(serializers.Serializer):
    id = serializers.IntegerField()
    full_name = serializers.CharField(source="user.full_name")
    email = serializers.EmailField(source="user.email")
    membership_code = serializers.CharField()


class ReservationGameSerializer(serializers.ModelSerializer):
    game_id = serializers.ReadOnlyField(source="game.id")
    title = serializers.ReadOnlyField(source="game.title")

    class Meta:
        model = ReservationGame
        fields = ["game_id", "title", "quantity"]


class ReservationSerializer(serializers.ModelSerializer):
    """Reservation summary with table, member and held games."""

    table = ReservationTableSerializer(read_only=True)
    member = ReservationMemberSerializer(read_only=True)
    games = ReservationGameSerializer(source="holds", many=True, read_only=True)

    class Meta:
        model = Reservation
        fields = [
            "id",
            "status",
            "start_at",
            "end_at",
            "party_size",
            "note",
            "created_at",
            "cancelled_at",
            "table",
            "member",
            "games",
        ]
        read_only_fields = fields
