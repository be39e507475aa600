from django.apps import AppConfig


class ReservationsConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "apps.reservations"

    def ready(self):
        from shared.application.message_bus import message_bus

        from . import handlers

        handlers.register(message_bus)
