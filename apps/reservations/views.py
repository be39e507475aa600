"""API views for reservations."""

from __future__ import annotations

from rest_framework import mixins, permissions, status, viewsets  # type: ignore
from rest_framework.decorators import action  # type: ignore
from rest_framework.response import Response  # type: ignore

from .exceptions import MalformedReservationRequest
from .filters import ReservationFilterSet
from .models import Reservation
from .serializers import ReservationCreateSerializer, ReservationSerializer
from .services import ReservationManager


class ReservationViewSet(
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    viewsets.GenericViewSet,
):
    """List, create and cancel reservations.

    Members only ever see and cancel their own reservations; staff and
    admins see everything and may book on behalf of any member.
    """

    queryset = Reservation.objects.all()
    permission_classes = [permissions.IsAuthenticated]
    filterset_class = ReservationFilterSet
    lookup_value_regex = r"\d+"

    def get_manager(self) -> ReservationManager:
        return ReservationManager()

    def get_serializer_class(self):  # type: ignore
        if self.action == "create":
            return ReservationCreateSerializer
        return ReservationSerializer

    def get_queryset(self):  # type: ignore
        return self.get_manager().visible_reservations(self.request.user)

    def create(self, request, *args, **kwargs):  # type: ignore
        serializer = self.get_serializer(data=request.data)
        if not serializer.is_valid():
            raise MalformedReservationRequest(field_errors=serializer.errors)

        reservation = self.get_manager().create(request.user, serializer.to_request())

        read_serializer = ReservationSerializer(reservation, context=self.get_serializer_context())
        return Response(read_serializer.data, status=status.HTTP_201_CREATED)

    @action(detail=True, methods=["post", "patch"])
    def cancel(self, request, pk=None):  # type: ignore
        reservation = self.get_manager().cancel(request.user, pk)
        return Response(
            {
                "id": reservation.pk,
                "status": reservation.status,
                "message": "Reservation cancelled.",
            },
            status=status.HTTP_200_OK,
        )
