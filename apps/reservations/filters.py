"""FilterSet for the reservation listing."""

from __future__ import annotations

import django_filters  # type: ignore

from .actors import actor_for
from .models import Reservation


class ReservationFilterSet(django_filters.FilterSet):
    """Filters by status, start range, member and table.

    The member filter only applies to staff; for members the listing is
    already scoped to their own profile and the parameter is ignored.
    """

    status = django_filters.ChoiceFilter(choices=Reservation.Status.choices)
    to = django_filters.IsoDateTimeFilter(field_name="start_at", lookup_expr="lte")
    member = django_filters.NumberFilter(method="filter_member")
    table = django_filters.NumberFilter(field_name="table_id", lookup_expr="exact")

    class Meta:
        model = Reservation
        fields = ["status", "table"]

    def filter_member(self, queryset, name, value):  # type: ignore
        if self.request is None or not actor_for(self.request.user).filters_by_member:
            return queryset
        return queryset.filter(member_id=value)


# "from" is a keyword, so it cannot be declared in the class body.
ReservationFilterSet.base_filters["from"] = django_filters.IsoDateTimeFilter(
    field_name="start_at",
    lookup_expr="gte",
)
