from __future__ import annotations

import json
import logging
from typing import Any

from core.models import AuditLogEntry
from infra.db.models import AuditLogORM

logger = logging.getLogger(__name__)


def details_to_json(details: dict[str, Any]) -> str:
    # dates and enums in details are stored as their string form
    return json.dumps(details or {}, default=str, ensure_ascii=False, sort_keys=True)


def details_from_json(raw: str | None, *, entry_id: str = "") -> dict[str, Any]:
    if not raw:
        return {}
    try:
        value = json.loads(raw)
    except json.JSONDecodeError:
        logger.warning("Audit entry %s has unreadable details; ignoring them.", entry_id)
        return {}
    return value if isinstance(value, dict) else {"value": value}


def audit_to_orm(entry: AuditLogEntry) -> AuditLogORM:
    return AuditLogORM(
        id=entry.id,
        occurred_at=entry.occurred_at,
        actor_username=entry.actor_username,
        action=entry.action,
        entity_type=entry.entity_type,
        entity_id=entry.entity_id,
        project_id=entry.project_id,
        details_json=details_to_json(entry.details),
    )


def audit_from_orm(obj: AuditLogORM) -> AuditLogEntry:
    return AuditLogEntry(
        id=obj.id,
        occurred_at=obj.occurred_at,
        actor_username=obj.actor_username,
        action=obj.action,
        entity_type=obj.entity_type,
        entity_id=obj.entity_id,
        project_id=obj.project_id,
        details=details_from_json(obj.details_json, entry_id=obj.id),
    )


__all__ = ["audit_to_orm", "audit_from_orm", "details_to_json", "details_from_json"]
