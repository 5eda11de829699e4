from __future__ import annotations

from sqlalchemy.orm import Session

from core.interfaces import DependencyRepository, ProjectRepository, TaskRepository
from core.services.audit.service import AuditService
from core.services.scheduling.cascade import CascadeRescheduler
from core.services.scheduling.engine import SchedulingEngine
from core.services.scheduling.locks import ScheduleLockRegistry, schedule_locks
from core.services.task.dependency import TaskDependencyMixin
from core.services.task.lifecycle import TaskLifecycleMixin
from core.services.task.query import TaskQueryMixin
from core.services.task.validation import TaskValidationMixin


class TaskService(
    TaskLifecycleMixin,
    TaskDependencyMixin,
    TaskQueryMixin,
    TaskValidationMixin,
):
    def __init__(
        self,
        session: Session,
        task_repo: TaskRepository,
        dependency_repo: DependencyRepository,
        project_repo: ProjectRepository | None = None,
        cascade: CascadeRescheduler | None = None,
        scheduling_engine: SchedulingEngine | None = None,
        audit_service: AuditService | None = None,
        locks: ScheduleLockRegistry | None = None,
    ):
        self._session: Session = session
        self._task_repo: TaskRepository = task_repo
        self._dependency_repo: DependencyRepository = dependency_repo
        self._project_repo: ProjectRepository | None = project_repo
        self._locks: ScheduleLockRegistry = locks or schedule_locks
        self._cascade: CascadeRescheduler = cascade or CascadeRescheduler(
            session, task_repo, dependency_repo, locks=self._locks
        )
        self._scheduling_engine: SchedulingEngine | None = scheduling_engine
        self._audit_service: AuditService | None = audit_service


__all__ = ["TaskService"]
