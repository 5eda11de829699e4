from __future__ import annotations

import logging
from typing import Any, List, Sequence

from sqlalchemy.orm import Session

from core.interfaces import AuditLogRepository
from core.models import AuditLogEntry

logger = logging.getLogger(__name__)

SYSTEM_ACTOR = "System"


class AuditService:
    """Appends audit entries for plan edits; the actor is whoever drives the session."""

    def __init__(
        self,
        session: Session,
        audit_repo: AuditLogRepository,
        actor_username: str | None = None,
    ):
        self._session = session
        self._audit_repo = audit_repo
        self._actor_username = (actor_username or "").strip() or None

    @property
    def actor(self) -> str:
        return self._actor_username or SYSTEM_ACTOR

    def set_actor(self, username: str | None) -> None:
        self._actor_username = (username or "").strip() or None

    def record(
        self,
        *,
        action: str,
        entity_type: str,
        entity_id: str | None,
        project_id: str | None = None,
        details: dict[str, Any] | None = None,
        commit: bool = False,
    ) -> AuditLogEntry:
        entry = AuditLogEntry.create(
            action=action,
            entity_type=entity_type,
            entity_id=entity_id,
            actor_username=self.actor,
            project_id=project_id,
            details=details,
        )
        self._audit_repo.add(entry)
        if commit:
            self._session.commit()
        logger.debug("Audit %s", entry.describe())
        return entry

    def list_recent(
        self,
        limit: int = 200,
        *,
        project_id: str | None = None,
        entity_type: str | None = None,
        actions: Sequence[str] | None = None,
    ) -> List[AuditLogEntry]:
        return self._audit_repo.list_recent(
            limit, project_id=project_id, entity_type=entity_type, actions=actions
        )

    def task_history(self, task_id: str, limit: int = 200) -> List[AuditLogEntry]:
        """Entries about one task, newest first. Cascade shifts are never audited."""
        return self._audit_repo.list_for_entity("task", task_id, limit)


__all__ = ["AuditService", "SYSTEM_ACTOR"]
