"""URL routing for health probes."""

from __future__ import annotations

from django.urls import path  # type: ignore

from . import views

urlpatterns = [
    path("live/", views.live, name="health-live"),
    path("ready/", views.ready, name="health-ready"),
]
