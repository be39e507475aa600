"""API views for tables."""

from __future__ import annotations

from rest_framework import permissions, viewsets  # type: ignore
from rest_framework.decorators import action  # type: ignore
from rest_framework.response import Response  # type: ignore

from apps.reservations.actors import actor_for
from apps.reservations.exceptions import MalformedReservationRequest

from .models import Table
from .serializers import AvailabilityQuerySerializer, TableAvailabilitySerializer, TableSerializer
from .services import is_table_available, tables_with_availability


class TableViewSet(viewsets.ReadOnlyModelViewSet):
    """Members see active tables with availability; staff see the configuration."""

    queryset = Table.objects.all()
    serializer_class = TableSerializer
    permission_classes = [permissions.IsAuthenticated]
    lookup_value_regex = r"\d+"

    def _sees_configuration(self) -> bool:
        return actor_for(self.request.user).sees_full_catalog

    def _availability_query(self, request) -> AvailabilityQuerySerializer:
        query = AvailabilityQuerySerializer(data=request.query_params)
        if not query.is_valid():
            raise MalformedReservationRequest(field_errors=query.errors)
        return query

    def get_queryset(self):  # type: ignore
        return actor_for(self.request.user).catalog(super().get_queryset())

    def list(self, request, *args, **kwargs):  # type: ignore
        if self._sees_configuration():
            return super().list(request, *args, **kwargs)

        query = self._availability_query(request)

        rows = []
        for table, available in tables_with_availability(query.slot):
            table.available = available
            rows.append(table)
        return Response(TableAvailabilitySerializer(rows, many=True).data)

    @action(detail=True, methods=["get"])
    def availability(self, request, pk=None):  # type: ignore
        table: Table = self.get_object()  # type: ignore
        query = self._availability_query(request)

        slot = query.slot
        table.available = True if slot is None else is_table_available(table, slot)
        return Response(TableAvailabilitySerializer(table).data)
