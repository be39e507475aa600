"""URL configuration for the LudoCloud backend.

The `urlpatterns` list routes URLs to views. It includes both Django admin
and application‑level routers provided by Django Rest Framework and each app.
"""
from django.contrib import admin  # type: ignore
from django.urls import path, include  # type: ignore
from drf_spectacular.views import SpectacularAPIView  # type: ignore

# API versioning. v1 is our initial version; future versions can be added here.

urlpatterns = [
    path('admin/', admin.site.urls),
    path('api/v1/tables/', include('apps.tables.urls')),
    path('api/v1/games/', include('apps.games.urls')),
    path('api/v1/reservations/', include('apps.reservations.urls')),
    path('api/v1/health/', include('apps.health.urls')),
    path('api/v1/schema/', SpectacularAPIView.as_view(), name='schema'),
]
