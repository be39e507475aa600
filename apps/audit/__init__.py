"""Audit app package.

Append-only journal of sensitive operations (reservation creation and
cancellation). Entries are written after the business transaction commits
and a failure to write one never undoes the operation it describes.
"""
