from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from sqlalchemy.orm import Session

from core.services.audit import AuditService
from core.services.project import ProjectService
from core.services.scheduling import (
    CascadeRescheduler,
    ScheduleLockRegistry,
    SchedulingEngine,
    schedule_locks,
)
from core.services.task import TaskService
from infra.db.repositories import (
    SqlAlchemyAuditLogRepository,
    SqlAlchemyDependencyRepository,
    SqlAlchemyProjectRepository,
    SqlAlchemyTaskRepository,
)


@dataclass(frozen=True)
class ServiceGraph:
    session: Session
    audit_service: AuditService
    project_service: ProjectService
    task_service: TaskService
    scheduling_engine: SchedulingEngine
    cascade: CascadeRescheduler

    def as_dict(self) -> dict[str, Any]:
        return {
            "session": self.session,
            "audit_service": self.audit_service,
            "project_service": self.project_service,
            "task_service": self.task_service,
            "scheduling_engine": self.scheduling_engine,
            "cascade": self.cascade,
        }


def build_service_graph(
    session: Session,
    *,
    actor_username: str | None = None,
    locks: ScheduleLockRegistry | None = None,
) -> ServiceGraph:
    locks = locks or schedule_locks
    project_repo = SqlAlchemyProjectRepository(session)
    task_repo = SqlAlchemyTaskRepository(session)
    dependency_repo = SqlAlchemyDependencyRepository(session)
    audit_repo = SqlAlchemyAuditLogRepository(session)

    audit_service = AuditService(session, audit_repo, actor_username=actor_username)
    project_service = ProjectService(session, project_repo, audit_service=audit_service)
    scheduling_engine = SchedulingEngine(session, task_repo, dependency_repo, locks=locks)
    cascade = CascadeRescheduler(session, task_repo, dependency_repo, locks=locks)
    task_service = TaskService(
        session,
        task_repo,
        dependency_repo,
        project_repo=project_repo,
        cascade=cascade,
        scheduling_engine=scheduling_engine,
        audit_service=audit_service,
        locks=locks,
    )
    return ServiceGraph(
        session=session,
        audit_service=audit_service,
        project_service=project_service,
        task_service=task_service,
        scheduling_engine=scheduling_engine,
        cascade=cascade,
    )


def build_services(session: Session, **kwargs: Any) -> dict[str, Any]:
    return build_service_graph(session, **kwargs).as_dict()


__all__ = ["ServiceGraph", "build_service_graph", "build_services"]
