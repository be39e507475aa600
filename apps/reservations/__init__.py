"""Reservations app package.

This app encapsulates the booking admission-control engine: the pure
booking rules, the transactional create and cancel operations that keep
tables from being double-booked and board games from being oversold, and
the API used by members and staff. Overlap is prevented both by the
application check inside a serializable transaction and, on PostgreSQL,
by an exclusion constraint.
"""
