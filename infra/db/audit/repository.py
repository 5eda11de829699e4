from __future__ import annotations

from typing import List, Sequence

from sqlalchemy import Select, select
from sqlalchemy.orm import Session

from core.interfaces import AuditLogRepository
from core.models import AuditLogEntry
from infra.db.audit.mapper import audit_from_orm, audit_to_orm
from infra.db.models import AuditLogORM


def _newest_first(stmt: Select, limit: int) -> Select:
    # id breaks ties between entries written in the same instant
    return stmt.order_by(AuditLogORM.occurred_at.desc(), AuditLogORM.id).limit(max(1, int(limit)))


class SqlAlchemyAuditLogRepository(AuditLogRepository):
    def __init__(self, session: Session):
        self.session = session

    def add(self, entry: AuditLogEntry) -> None:
        self.session.add(audit_to_orm(entry))

    def _fetch(self, stmt: Select) -> List[AuditLogEntry]:
        return [audit_from_orm(row) for row in self.session.execute(stmt).scalars()]

    def list_recent(
        self,
        limit: int = 200,
        *,
        project_id: str | None = None,
        entity_type: str | None = None,
        actions: Sequence[str] | None = None,
    ) -> List[AuditLogEntry]:
        stmt = select(AuditLogORM)
        if project_id is not None:
            stmt = stmt.where(AuditLogORM.project_id == project_id)
        if entity_type is not None:
            stmt = stmt.where(AuditLogORM.entity_type == entity_type)
        if actions:
            stmt = stmt.where(AuditLogORM.action.in_(list(actions)))
        return self._fetch(_newest_first(stmt, limit))

    def list_for_entity(self, entity_type: str, entity_id: str, limit: int = 200) -> List[AuditLogEntry]:
        stmt = select(AuditLogORM).where(
            AuditLogORM.entity_type == entity_type,
            AuditLogORM.entity_id == entity_id,
        )
        return self._fetch(_newest_first(stmt, limit))


__all__ = ["SqlAlchemyAuditLogRepository"]
