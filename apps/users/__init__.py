"""Users app package.

Defines the custom user model with booking roles and the member profile
that owns reservations. Use ``apps.users.models.CustomUser`` as the
AUTH_USER_MODEL throughout the project.
"""
