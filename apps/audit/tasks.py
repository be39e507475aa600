"""Celery tasks for the audit journal."""

from __future__ import annotations

import logging

from celery import shared_task  # type: ignore

from .models import AuditLog

logger = logging.getLogger(__name__)


@shared_task(name="audit.write_audit_entry")
def write_audit_entry(
    actor_id: int | None,
    action: str,
    entity_type: str,
    entity_id: str = "",
    payload: dict | None = None,
) -> int:
    entry = AuditLog.objects.create(
        actor_id=actor_id,
        action=action,
        entity_type=entity_type,
        entity_id=entity_id,
        payload=payload or {},
    )
    logger.debug(f"Audit entry {entry.pk}: {action} {entity_type}:{entity_id}")
    return entry.pk
