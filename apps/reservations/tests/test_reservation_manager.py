"""Tests for ReservationManager: create, cancel and their race guards."""

from __future__ import annotations

from datetime import datetime, timedelta
from unittest import mock
from zoneinfo import ZoneInfo

from django.db import OperationalError
from django.test import TestCase

from apps.audit.models import AuditLog
from apps.games.models import BoardGame
from apps.reservations.exceptions import (
    CancellationNotAllowed,
    MalformedReservationRequest,
    OwnershipMismatch,
    PolicyViolation,
    ReservationConflict,
    ReservationTargetNotFound,
)
from apps.reservations.models import Reservation, ReservationGame
from apps.reservations.policy import BookingPolicy
from apps.reservations.services import (
    GamePick,
    ReservationManager,
    ReservationRequest,
    aggregate_picks,
)
from apps.tables.models import Table
from apps.users.models import Member, User

ROME = ZoneInfo("Europe/Rome")
NOW = datetime(2030, 3, 5, 10, 0, tzinfo=ROME)


def at(hour: int, minute: int = 0) -> datetime:
    return datetime(2030, 3, 5, hour, minute, tzinfo=ROME)


class ReservationManagerTestCase(TestCase):
    def setUp(self) -> None:
        self.user = User.objects.create_user(
            email="anna@example.com", password="MemberPass123", full_name="Anna Rossi"
        )
        self.member = Member.objects.create(user=self.user, membership_code="M-001")
        self.other_user = User.objects.create_user(
            email="luca@example.com", password="MemberPass123", full_name="Luca Bianchi"
        )
        self.other_member = Member.objects.create(user=self.other_user, membership_code="M-002")
        self.staff = User.objects.create_user(
            email="staff@example.com",
            password="StaffPass123",
            full_name="Front Desk",
            role=User.RoleChoices.STAFF,
        )
        self.table = Table.objects.create(code="T1", capacity=4, zone="Main hall")
        self.other_table = Table.objects.create(code="T2", capacity=6, zone="Main hall")
        self.game = BoardGame.objects.create(
            title="Catan",
            category="Strategy",
            min_players=3,
            max_players=4,
            duration_min=90,
            stock_total=2,
            stock_available=2,
        )
        self.manager = ReservationManager(policy=BookingPolicy(), clock=lambda: NOW)

    def request(self, start: datetime | None = None, **overrides) -> ReservationRequest:
        start = start or at(18)
        fields = {
            "table_id": self.table.pk,
            "start_at": start,
            "end_at": start + timedelta(minutes=90),
            "party_size": 4,
        }
        fields.update(overrides)
        return ReservationRequest(**fields)


class CreateReservationTests(ReservationManagerTestCase):
    def test_member_creates_confirmed_reservation_with_games(self) -> None:
        reservation = self.manager.create(
            self.user, self.request(games=(GamePick(self.game.pk, 1),), note="Birthday")
        )

        self.assertEqual(reservation.status, Reservation.Status.CONFIRMED)
        self.assertEqual(reservation.member, self.member)
        self.assertEqual(reservation.created_by, self.user)
        self.assertEqual(reservation.note, "Birthday")
        self.assertEqual(reservation.holds.get().quantity, 1)
        self.game.refresh_from_db()
        self.assertEqual(self.game.stock_available, 1)

    def test_overlapping_slot_on_same_table_conflicts(self) -> None:
        self.manager.create(self.user, self.request(at(18)))

        with self.assertRaises(ReservationConflict):
            self.manager.create(self.other_user, self.request(at(18, 30)))

        self.assertEqual(Reservation.objects.count(), 1)

    def test_adjacent_slots_and_other_tables_do_not_conflict(self) -> None:
        self.manager.create(self.user, self.request(at(18)))
        self.manager.create(self.other_user, self.request(at(19, 30)))
        self.manager.create(self.other_user, self.request(at(18), table_id=self.other_table.pk))

        self.assertEqual(Reservation.objects.count(), 3)

    def test_cancelled_reservation_frees_the_slot(self) -> None:
        first = self.manager.create(self.user, self.request(at(18)))
        self.manager.cancel(self.user, first.pk)

        second = self.manager.create(self.other_user, self.request(at(18)))

        self.assertEqual(second.status, Reservation.Status.CONFIRMED)

    def test_active_quota_is_enforced(self) -> None:
        for hour, minute in ((15, 0), (16, 30), (18, 0)):
            self.manager.create(self.user, self.request(at(hour, minute)))

        with self.assertRaises(PolicyViolation) as ctx:
            self.manager.create(self.user, self.request(at(19, 30)))

        self.assertEqual(ctx.exception.reason, PolicyViolation.ACTIVE_QUOTA)
        # The quota is per member.
        self.manager.create(self.other_user, self.request(at(19, 30)))

    def test_cancelling_frees_quota(self) -> None:
        booked = [
            self.manager.create(self.user, self.request(at(hour, minute)))
            for hour, minute in ((15, 0), (16, 30), (18, 0))
        ]
        self.manager.cancel(self.user, booked[0].pk)

        reservation = self.manager.create(self.user, self.request(at(19, 30)))

        self.assertEqual(reservation.status, Reservation.Status.CONFIRMED)

    def test_party_larger_than_table_is_rejected(self) -> None:
        with self.assertRaises(PolicyViolation) as ctx:
            self.manager.create(self.user, self.request(party_size=5))
        self.assertEqual(ctx.exception.reason, PolicyViolation.PARTY_CAPACITY)

    def test_inactive_or_unknown_table_is_not_found(self) -> None:
        self.other_table.is_active = False
        self.other_table.save()

        with self.assertRaises(ReservationTargetNotFound):
            self.manager.create(self.user, self.request(table_id=self.other_table.pk))
        with self.assertRaises(ReservationTargetNotFound):
            self.manager.create(self.user, self.request(table_id=9999))

    def test_naive_timestamps_are_malformed(self) -> None:
        start = datetime(2030, 3, 5, 18, 0)
        with self.assertRaises(MalformedReservationRequest):
            self.manager.create(self.user, self.request(start))

    def test_insufficient_stock_rejects_whole_request(self) -> None:
        with self.assertRaises(PolicyViolation) as ctx:
            self.manager.create(self.user, self.request(games=(GamePick(self.game.pk, 3),)))

        self.assertEqual(ctx.exception.reason, PolicyViolation.INSUFFICIENT_STOCK)
        self.assertFalse(Reservation.objects.exists())
        self.game.refresh_from_db()
        self.assertEqual(self.game.stock_available, 2)

    def test_released_copy_can_be_booked_again(self) -> None:
        self.game.stock_total = self.game.stock_available = 1
        self.game.save()
        pick = (GamePick(self.game.pk, 1),)
        first = self.manager.create(self.user, self.request(games=pick))

        rival = self.request(table_id=self.other_table.pk, games=pick)
        with self.assertRaises(PolicyViolation):
            self.manager.create(self.other_user, rival)

        self.manager.cancel(self.user, first.pk)
        second = self.manager.create(self.other_user, rival)

        self.assertEqual(second.holds.get().quantity, 1)
        self.game.refresh_from_db()
        self.assertEqual(self.game.stock_available, 0)

    def test_inactive_game_is_a_policy_violation(self) -> None:
        self.game.is_active = False
        self.game.save()

        with self.assertRaises(PolicyViolation) as ctx:
            self.manager.create(self.user, self.request(games=(GamePick(self.game.pk, 1),)))
        self.assertEqual(ctx.exception.reason, PolicyViolation.ITEM_INACTIVE)

    def test_unknown_game_is_not_found(self) -> None:
        with self.assertRaises(ReservationTargetNotFound):
            self.manager.create(self.user, self.request(games=(GamePick(9999, 1),)))

    def test_repeated_game_ids_are_merged(self) -> None:
        picks = (GamePick(self.game.pk, 1), GamePick(self.game.pk, 1))

        reservation = self.manager.create(self.user, self.request(games=picks))

        hold = ReservationGame.objects.get(reservation=reservation)
        self.assertEqual(hold.quantity, 2)
        self.game.refresh_from_db()
        self.assertEqual(self.game.stock_available, 0)

    def test_aggregate_picks_keeps_first_seen_order(self) -> None:
        totals = aggregate_picks([GamePick(7, 1), GamePick(3, 2), GamePick(7, 2)])
        self.assertEqual(list(totals.items()), [(7, 3), (3, 2)])


class OwnershipTests(ReservationManagerTestCase):
    def test_member_cannot_book_for_someone_else(self) -> None:
        with self.assertRaises(OwnershipMismatch):
            self.manager.create(self.user, self.request(member_id=self.other_member.pk))

    def test_member_may_name_themselves(self) -> None:
        reservation = self.manager.create(self.user, self.request(member_id=self.member.pk))
        self.assertEqual(reservation.member, self.member)

    def test_staff_books_on_behalf_of_member(self) -> None:
        reservation = self.manager.create(self.staff, self.request(member_id=self.member.pk))

        self.assertEqual(reservation.member, self.member)
        self.assertEqual(reservation.created_by, self.staff)

    def test_staff_must_name_the_member(self) -> None:
        with self.assertRaises(MalformedReservationRequest) as ctx:
            self.manager.create(self.staff, self.request())
        self.assertIn("member_id", ctx.exception.field_errors)

        with self.assertRaises(ReservationTargetNotFound):
            self.manager.create(self.staff, self.request(member_id=9999))


class RaceTests(ReservationManagerTestCase):
    """Another writer commits between the advisory checks and our commit."""

    def test_stock_taken_concurrently_becomes_conflict(self) -> None:
        original = ReservationManager._check_game_stock
        game_pk = self.game.pk

        def check_then_drain(manager, picks):
            original(manager, picks)
            BoardGame.objects.filter(pk=game_pk).update(stock_available=0)

        with mock.patch.object(ReservationManager, "_check_game_stock", autospec=True, side_effect=check_then_drain):
            with self.assertRaises(ReservationConflict):
                self.manager.create(self.user, self.request(games=(GamePick(game_pk, 1),)))

        self.assertFalse(Reservation.objects.exists())
        self.assertFalse(ReservationGame.objects.exists())

    def test_slot_taken_concurrently_becomes_conflict(self) -> None:
        original = ReservationManager._check_game_stock
        rival = dict(
            member=self.other_member,
            table=self.table,
            start_at=at(18),
            end_at=at(19, 30),
            party_size=2,
            status=Reservation.Status.CONFIRMED,
            created_by=self.other_user,
        )

        def check_then_book(manager, picks):
            original(manager, picks)
            Reservation.objects.create(**rival)

        with mock.patch.object(ReservationManager, "_check_game_stock", autospec=True, side_effect=check_then_book):
            with self.assertRaises(ReservationConflict):
                self.manager.create(self.user, self.request(at(18)))

        self.assertEqual(Reservation.objects.get().member, self.other_member)

    def test_sqlite_lock_timeout_becomes_conflict(self) -> None:
        pick = (GamePick(self.game.pk, 1),)
        with mock.patch("apps.reservations.services.connection", mock.Mock(vendor="sqlite")), \
                mock.patch("apps.reservations.services.reserve_stock", side_effect=OperationalError("database is locked")):
            with self.assertRaises(ReservationConflict):
                self.manager.create(self.user, self.request(games=pick))

        self.assertFalse(Reservation.objects.exists())

    def test_sqlite_lock_during_cancel_becomes_conflict(self) -> None:
        reservation = self.manager.create(self.user, self.request(games=(GamePick(self.game.pk, 1),)))
        locked = OperationalError("database table is locked: games_boardgame")
        with mock.patch("apps.reservations.services.connection", mock.Mock(vendor="sqlite")), \
                mock.patch("apps.reservations.services.release_stock", side_effect=locked):
            with self.assertRaises(ReservationConflict):
                self.manager.cancel(self.user, reservation.pk)

        reservation.refresh_from_db()
        self.assertEqual(reservation.status, Reservation.Status.CONFIRMED)

    def test_other_database_errors_propagate(self) -> None:
        with mock.patch("apps.reservations.services.reserve_stock", side_effect=OperationalError("disk I/O error")):
            with self.assertRaises(OperationalError):
                self.manager.create(self.user, self.request(games=(GamePick(self.game.pk, 1),)))


class CancelReservationTests(ReservationManagerTestCase):
    def test_cancel_releases_games_and_marks_cancelled(self) -> None:
        reservation = self.manager.create(self.user, self.request(games=(GamePick(self.game.pk, 2),)))

        cancelled = self.manager.cancel(self.user, reservation.pk)

        self.assertEqual(cancelled.status, Reservation.Status.CANCELLED)
        self.assertEqual(cancelled.cancelled_at, NOW)
        self.assertFalse(ReservationGame.objects.filter(reservation=reservation).exists())
        self.game.refresh_from_db()
        self.assertEqual(self.game.stock_available, 2)

    def test_cancel_twice_is_rejected(self) -> None:
        reservation = self.manager.create(self.user, self.request())
        self.manager.cancel(self.user, reservation.pk)

        with self.assertRaises(CancellationNotAllowed) as ctx:
            self.manager.cancel(self.user, reservation.pk)
        self.assertEqual(ctx.exception.reason, CancellationNotAllowed.ALREADY_CANCELLED)

    def test_cancel_after_cutoff_is_rejected(self) -> None:
        reservation = self.manager.create(self.user, self.request(at(18)))
        late = ReservationManager(policy=BookingPolicy(), clock=lambda: at(16, 30))

        with self.assertRaises(CancellationNotAllowed) as ctx:
            late.cancel(self.user, reservation.pk)

        self.assertEqual(ctx.exception.reason, CancellationNotAllowed.CUTOFF_PASSED)
        reservation.refresh_from_db()
        self.assertEqual(reservation.status, Reservation.Status.CONFIRMED)

    def test_cancel_exactly_at_cutoff_is_allowed(self) -> None:
        reservation = self.manager.create(self.user, self.request(at(18)))
        on_time = ReservationManager(policy=BookingPolicy(), clock=lambda: at(16))

        cancelled = on_time.cancel(self.user, reservation.pk)

        self.assertTrue(cancelled.is_cancelled)

    def test_only_owner_or_staff_may_cancel(self) -> None:
        reservation = self.manager.create(self.user, self.request())

        with self.assertRaises(OwnershipMismatch):
            self.manager.cancel(self.other_user, reservation.pk)

        cancelled = self.manager.cancel(self.staff, reservation.pk)
        self.assertTrue(cancelled.is_cancelled)

    def test_unknown_reservation_is_not_found(self) -> None:
        with self.assertRaises(ReservationTargetNotFound):
            self.manager.cancel(self.user, 9999)


class AuditTrailTests(ReservationManagerTestCase):
    def test_create_and_cancel_are_audited_after_commit(self) -> None:
        with self.captureOnCommitCallbacks(execute=True):
            reservation = self.manager.create(
                self.user, self.request(games=(GamePick(self.game.pk, 1),))
            )
        with self.captureOnCommitCallbacks(execute=True):
            self.manager.cancel(self.user, reservation.pk)

        created = AuditLog.objects.get(action="RESERVATION_CREATE")
        self.assertEqual(created.actor, self.user)
        self.assertEqual(created.entity_type, "RESERVATION")
        self.assertEqual(created.entity_id, str(reservation.pk))
        self.assertEqual(created.payload["games"], {str(self.game.pk): 1})
        self.assertEqual(created.payload["table_id"], self.table.pk)

        cancelled = AuditLog.objects.get(action="RESERVATION_CANCEL")
        self.assertEqual(cancelled.payload["released"], {str(self.game.pk): 1})

    def test_rejected_request_is_not_audited(self) -> None:
        with self.captureOnCommitCallbacks(execute=True):
            with self.assertRaises(PolicyViolation):
                self.manager.create(self.user, self.request(party_size=5))

        self.assertFalse(AuditLog.objects.exists())
