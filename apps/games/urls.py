"""URL routing for the board game catalog."""

from __future__ import annotations

from django.urls import include, path  # type: ignore
from rest_framework.routers import DefaultRouter  # type: ignore

from .views import BoardGameViewSet

router = DefaultRouter()
router.register(r"", BoardGameViewSet, basename="game")

urlpatterns = [
    path("", include(router.urls)),
]
