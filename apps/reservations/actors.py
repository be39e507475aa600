"""Who is asking: self-service members or privileged staff.

Each actor decides which member owns a new reservation, which
reservations it may see and which it may cancel.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from functools import cached_property

from apps.users.models import Member

from .exceptions import MalformedReservationRequest, OwnershipMismatch, ReservationTargetNotFound


class Actor(ABC):
    def __init__(self, user):
        self.user = user

    @property
    def user_id(self) -> int:
        return self.user.pk

    @abstractmethod
    def resolve_owner(self, requested_member_id: int | None) -> Member:
        """Return the member a new reservation will belong to."""

    @abstractmethod
    def visible(self, queryset):
        """Restrict a reservation queryset to what this actor may see."""

    @abstractmethod
    def ensure_can_cancel(self, reservation) -> None:
        pass

    @property
    def filters_by_member(self) -> bool:
        """Whether a client-supplied member filter is honoured."""
        return False

    @property
    def sees_full_catalog(self) -> bool:
        """Whether inactive tables and games are listed too."""
        return False

    def catalog(self, queryset):
        """Restrict a table or board game queryset to what this actor may list."""
        if self.sees_full_catalog:
            return queryset
        return queryset.active()


class SelfServiceActor(Actor):
    """A member acting on their own behalf."""

    @cached_property
    def member(self) -> Member | None:
        return Member.objects.filter(user=self.user).first()

    def resolve_owner(self, requested_member_id: int | None) -> Member:
        if self.member is None:
            raise OwnershipMismatch("No member profile is configured for this account.")
        if requested_member_id is not None and requested_member_id != self.member.pk:
            raise OwnershipMismatch("Members can only book for themselves.")
        return self.member

    def visible(self, queryset):
        if self.member is None:
            return queryset.none()
        return queryset.filter(member=self.member)

    def ensure_can_cancel(self, reservation) -> None:
        if self.member is None or reservation.member_id != self.member.pk:
            raise OwnershipMismatch("You cannot cancel another member's reservation.")


class PrivilegedActor(Actor):
    """Staff or admin acting for any member."""

    def resolve_owner(self, requested_member_id: int | None) -> Member:
        if requested_member_id is None:
            raise MalformedReservationRequest(
                "Staff must say which member the reservation is for.",
                field_errors={"member_id": ["This field is required for staff."]},
            )
        member = Member.objects.filter(pk=requested_member_id).first()
        if member is None:
            raise ReservationTargetNotFound("Member not found.")
        return member

    def visible(self, queryset):
        return queryset

    def ensure_can_cancel(self, reservation) -> None:
        return None

    @property
    def filters_by_member(self) -> bool:
        return True

    @property
    def sees_full_catalog(self) -> bool:
        return True


def actor_for(user) -> Actor:
    if hasattr(user, "is_privileged") and user.is_privileged():
        return PrivilegedActor(user)
    return SelfServiceActor(user)
