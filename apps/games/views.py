"""API views for the board game catalog."""

from __future__ import annotations

from rest_framework import permissions, viewsets  # type: ignore

from apps.reservations.actors import actor_for

from .models import BoardGame
from .serializers import BoardGameSerializer


class BoardGameViewSet(viewsets.ReadOnlyModelViewSet):
    """Read-only catalog. Members only see games that can be picked."""

    queryset = BoardGame.objects.all()
    serializer_class = BoardGameSerializer
    lookup_value_regex = r"\d+"
    permission_classes = [permissions.IsAuthenticated]

    def get_queryset(self):  # type: ignore
        return actor_for(self.request.user).catalog(super().get_queryset())
