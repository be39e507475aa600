"""PostgreSQL exclusion constraint backing the no-overlap rule.

Only installed on PostgreSQL; other backends rely on the transactional
check alone.
"""

from django.db import migrations


CREATE_STATEMENTS = (
    "CREATE EXTENSION IF NOT EXISTS btree_gist",
    """
    ALTER TABLE reservations_reservation
    ADD CONSTRAINT reservations_no_overlap_per_table
    EXCLUDE USING gist (
        table_id WITH =,
        tstzrange(start_at, end_at, '[)') WITH &&
    )
    WHERE (status <> 'CANCELLED')
    """,
)

DROP_STATEMENT = (
    "ALTER TABLE reservations_reservation "
    "DROP CONSTRAINT IF EXISTS reservations_no_overlap_per_table"
)


def add_exclusion_constraint(apps, schema_editor):
    if schema_editor.connection.vendor != "postgresql":
        return
    for statement in CREATE_STATEMENTS:
        schema_editor.execute(statement, params=None)


def drop_exclusion_constraint(apps, schema_editor):
    if schema_editor.connection.vendor != "postgresql":
        return
    schema_editor.execute(DROP_STATEMENT, params=None)


class Migration(migrations.Migration):

    dependencies = [
        ("reservations", "0001_initial"),
    ]

    operations = [
        migrations.RunPython(add_exclusion_constraint, drop_exclusion_constraint),
    ]
