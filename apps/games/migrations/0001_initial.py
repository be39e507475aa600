import django.core.validators
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="BoardGame",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("title", models.CharField(max_length=255, unique=True)),
                ("category", models.CharField(max_length=100)),
                (
                    "min_players",
                    models.PositiveSmallIntegerField(validators=[django.core.validators.MinValueValidator(1)]),
                ),
                (
                    "max_players",
                    models.PositiveSmallIntegerField(validators=[django.core.validators.MinValueValidator(1)]),
                ),
                ("min_age", models.PositiveSmallIntegerField(default=0)),
                ("duration_min", models.PositiveSmallIntegerField(help_text="Average play time in minutes.")),
                ("stock_total", models.PositiveIntegerField(default=1)),
                ("stock_available", models.PositiveIntegerField(default=1)),
                ("is_active", models.BooleanField(default=True)),
            ],
            options={
                "verbose_name": "Board game",
                "verbose_name_plural": "Board games",
                "ordering": ["title"],
            },
        ),
        migrations.AddConstraint(
            model_name="boardgame",
            constraint=models.CheckConstraint(
                condition=models.Q(stock_available__gte=0)
                & models.Q(stock_available__lte=models.F("stock_total")),
                name="board_game_stock_within_total",
            ),
        ),
        migrations.AddConstraint(
            model_name="boardgame",
            constraint=models.CheckConstraint(
                condition=models.Q(min_players__lte=models.F("max_players")),
                name="board_game_players_range",
            ),
        ),
    ]
