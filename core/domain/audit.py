from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

from core.domain.identifiers import generate_id


@dataclass
class AuditLogEntry:
    """One user-initiated change to the plan (cascade shifts are never recorded)."""

    id: str
    occurred_at: datetime
    actor_username: str | None
    action: str  # "<entity>.<verb>", e.g. "task.update", "dependency.add"
    entity_type: str
    entity_id: str | None
    project_id: str | None = None
    details: dict[str, Any] = field(default_factory=dict)

    def describe(self) -> str:
        target = f"{self.entity_type}:{self.entity_id}" if self.entity_id else self.entity_type
        label = self.details.get("summary") or self.details.get("name") or ""
        stamp = self.occurred_at.strftime("%Y-%m-%d %H:%M:%S")
        line = f"{stamp} {self.actor_username or 'System'} {self.action} {target}"
        return f"{line} {label}".rstrip()

    @staticmethod
    def create(
        action: str,
        entity_type: str,
        entity_id: str | None,
        *,
        actor_username: str | None = None,
        project_id: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> "AuditLogEntry":
        return AuditLogEntry(
            id=generate_id(),
            occurred_at=datetime.now(timezone.utc),
            actor_username=actor_username,
            action=action,
            entity_type=entity_type,
            entity_id=entity_id,
            project_id=project_id,
            details=dict(details or {}),
        )


__all__ = ["AuditLogEntry"]
