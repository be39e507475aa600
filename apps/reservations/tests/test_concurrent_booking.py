"""Concurrent create requests from real threads.

Runs on the configured backend: row locks and serializable isolation on
PostgreSQL, an immediate write lock on SQLite. Either way exactly one
writer wins and every loser gets a typed rejection.
"""

from __future__ import annotations

import threading
from datetime import datetime, timedelta
from zoneinfo import ZoneInfo

from django.db import connections
from django.test import TransactionTestCase

from apps.games.models import BoardGame
from apps.reservations.exceptions import ReservationConflict, ReservationError
from apps.reservations.models import Reservation
from apps.reservations.policy import BookingPolicy
from apps.reservations.services import GamePick, ReservationManager, ReservationRequest
from apps.tables.models import Table
from apps.users.models import Member, User

ROME = ZoneInfo("Europe/Rome")
NOW = datetime(2030, 3, 5, 10, 0, tzinfo=ROME)
START = datetime(2030, 3, 5, 18, 0, tzinfo=ROME)


class ConcurrentBookingTests(TransactionTestCase):
    workers = 6

    def setUp(self) -> None:
        self.users = []
        for index in range(self.workers):
            user = User.objects.create_user(email=f"member{index}@example.com", full_name=f"Member {index}")
            Member.objects.create(user=user, membership_code=f"M-{index:03d}")
            self.users.append(user)
        self.tables = [
            Table.objects.create(code=f"T{index}", capacity=4, zone="Main hall")
            for index in range(self.workers)
        ]
        self.game = BoardGame.objects.create(
            title="Ticket to Ride",
            category="Family",
            min_players=2,
            max_players=5,
            duration_min=60,
            stock_total=1,
            stock_available=1,
        )

    def _race(self, requests) -> tuple[list, list]:
        barrier = threading.Barrier(len(requests))
        won, lost = [], []
        lock = threading.Lock()

        def book(user, request):
            manager = ReservationManager(policy=BookingPolicy(), clock=lambda: NOW)
            try:
                barrier.wait()
                reservation = manager.create(user, request)
                with lock:
                    won.append(reservation.pk)
            except Exception as exc:  # asserted by the caller
                with lock:
                    lost.append(exc)
            finally:
                connections.close_all()

        threads = [threading.Thread(target=book, args=pair) for pair in requests]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()
        return won, lost

    def test_only_one_writer_gets_the_table(self) -> None:
        request = ReservationRequest(
            table_id=self.tables[0].pk,
            start_at=START,
            end_at=START + timedelta(minutes=90),
            party_size=2,
        )

        won, lost = self._race([(user, request) for user in self.users])

        self.assertEqual(len(won), 1)
        self.assertEqual(len(lost), self.workers - 1)
        self.assertTrue(all(isinstance(exc, ReservationConflict) for exc in lost), lost)
        self.assertEqual(Reservation.objects.filter(table=self.tables[0]).count(), 1)

    def test_last_copy_is_never_oversold(self) -> None:
        requests = [
            (
                user,
                ReservationRequest(
                    table_id=table.pk,
                    start_at=START,
                    end_at=START + timedelta(minutes=90),
                    party_size=2,
                    games=(GamePick(self.game.pk, 1),),
                ),
            )
            for user, table in zip(self.users, self.tables)
        ]

        won, lost = self._race(requests)

        self.assertEqual(len(won), 1)
        self.assertEqual(len(lost), self.workers - 1)
        self.assertTrue(all(isinstance(exc, ReservationError) for exc in lost), lost)
        self.game.refresh_from_db()
        self.assertEqual(self.game.stock_available, 0)
