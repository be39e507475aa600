"""Tables app package.

Reservable tables of the venue and the availability lookup that tells
members which tables are free for a given slot.
"""
