"""Fire-and-forget audit recording."""

from __future__ import annotations

import logging
from typing import Any

logger = logging.getLogger(__name__)


def record(
    actor_id: int | None,
    action: str,
    entity_type: str,
    entity_id: Any = None,
    payload: dict | None = None,
) -> None:
    """Queue an audit entry.

    Errors (broker down, task failure in eager mode) are logged and
    swallowed: the audited operation has already committed.
    """
    try:
        from .tasks import write_audit_entry

        write_audit_entry.delay(
            actor_id,
            action,
            entity_type,
            "" if entity_id is None else str(entity_id),
            payload or {},
        )
    except Exception as e:
        logger.error(f"Failed to record audit {action} for {entity_type}:{entity_id}: {e}", exc_info=True)
