"""Tests for the board game stock protocol and catalog endpoint."""

from __future__ import annotations

from django.db import IntegrityError, transaction
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase

from apps.games.models import BoardGame
from apps.games.services import release_stock, reserve_stock
from apps.users.models import User


class StockProtocolTests(APITestCase):
    def setUp(self) -> None:
        self.game = BoardGame.objects.create(
            title="Dixit",
            category="Party",
            min_players=3,
            max_players=8,
            duration_min=30,
            stock_total=3,
            stock_available=3,
        )

    def test_reserve_decrements_while_stock_lasts(self) -> None:
        self.assertTrue(reserve_stock(self.game.pk, 2))
        self.assertFalse(reserve_stock(self.game.pk, 2))
        self.assertTrue(reserve_stock(self.game.pk, 1))

        self.game.refresh_from_db()
        self.assertEqual(self.game.stock_available, 0)

    def test_release_never_exceeds_total(self) -> None:
        reserve_stock(self.game.pk, 1)
        release_stock(self.game.pk, 5)

        self.game.refresh_from_db()
        self.assertEqual(self.game.stock_available, 3)

    def test_non_positive_quantities_are_rejected(self) -> None:
        with self.assertRaises(ValueError):
            reserve_stock(self.game.pk, 0)
        with self.assertRaises(ValueError):
            release_stock(self.game.pk, -1)

    def test_database_rejects_stock_above_total(self) -> None:
        with self.assertRaises(IntegrityError), transaction.atomic():
            BoardGame.objects.filter(pk=self.game.pk).update(stock_available=4)


class BoardGameCatalogTests(APITestCase):
    def setUp(self) -> None:
        self.member = User.objects.create_user(email="anna@example.com", full_name="Anna Rossi")
        self.staff = User.objects.create_user(
            email="staff@example.com", full_name="Front Desk", role=User.RoleChoices.STAFF
        )
        for title, active in (("Azul", True), ("Retired", False)):
            BoardGame.objects.create(
                title=title,
                category="Abstract",
                min_players=2,
                max_players=4,
                duration_min=45,
                is_active=active,
            )
        self.list_url = reverse("game-list")

    def test_members_only_see_active_games(self) -> None:
        self.client.force_authenticate(self.member)
        response = self.client.get(self.list_url)

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([row["title"] for row in response.data], ["Azul"])

    def test_staff_see_whole_catalog(self) -> None:
        self.client.force_authenticate(self.staff)
        response = self.client.get(self.list_url)

        self.assertEqual(len(response.data), 2)
