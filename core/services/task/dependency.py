from __future__ import annotations

import logging
from typing import List

from sqlalchemy.orm import Session

from core.events.domain_events import domain_events
from core.exceptions import NotFoundError, ValidationError
from core.interfaces import DependencyRepository, TaskRepository
from core.models import DependencyType, TaskDependency
from core.services.audit.helpers import audit_dependency

logger = logging.getLogger(__name__)


def _as_dependency_type(value: DependencyType | str) -> DependencyType:
    if isinstance(value, DependencyType):
        return value
    try:
        return DependencyType(str(value or DependencyType.FINISH_TO_START.value).strip().upper())
    except ValueError:
        raise ValidationError(
            f"Unknown dependency type {value!r}; expected one of FS, FF, SS, SF.",
            code="DEPENDENCY_INVALID_TYPE",
        ) from None


class TaskDependencyMixin:
    _session: Session
    _task_repo: TaskRepository
    _dependency_repo: DependencyRepository

    def add_dependency(
        self,
        predecessor_id: str,
        successor_id: str,
        dependency_type: DependencyType | str = DependencyType.FINISH_TO_START,
        lag_days: int = 0,
        project_id: str | None = None,
    ) -> TaskDependency:
        dependency_type = _as_dependency_type(dependency_type)
        if isinstance(lag_days, bool) or not isinstance(lag_days, int):
            raise ValidationError("lag_days must be a whole number of days.", code="DEPENDENCY_INVALID_LAG")
        self._validate_not_self_dependency(predecessor_id, successor_id)

        pred = self._task_repo.get(predecessor_id)
        if not pred or (project_id is not None and pred.project_id != project_id):
            raise ValidationError(
                "Predecessor task not found in this project.", code="DEPENDENCY_TASK_MISSING"
            )
        succ = self._task_repo.get(successor_id)
        if not succ or (project_id is not None and succ.project_id != project_id):
            raise ValidationError(
                "Successor task not found in this project.", code="DEPENDENCY_TASK_MISSING"
            )
        if pred.project_id != succ.project_id:
            raise ValidationError(
                "Dependencies are allowed only between tasks in the same project.",
                code="DEPENDENCY_CROSS_PROJECT",
            )

        with self._locks.hold(pred.project_id):
            self._check_no_circular_dependency(pred.project_id, predecessor_id, successor_id)

            dep = TaskDependency.create(predecessor_id, successor_id, dependency_type, lag_days)
            try:
                self._dependency_repo.add(dep)
                self._session.commit()
                audit_dependency(
                    self,
                    "add",
                    dep,
                    pred.project_id,
                    summary=f'"{pred.name}" -> "{succ.name}" ({dependency_type.value}, lag {lag_days}d)',
                    type=dep.dependency_type.value,
                    lag_days=dep.lag_days,
                )
            except Exception as exc:
                self._session.rollback()
                logger.error(f"Error adding dependency {predecessor_id} -> {successor_id}: {exc}")
                raise
        logger.info(f"Added dependency {dep.id}: {predecessor_id} -> {successor_id}")
        domain_events.tasks_changed.emit(pred.project_id)
        return dep

    def remove_dependency(self, dep_id: str, project_id: str | None = None) -> None:
        dep = self._dependency_repo.get(dep_id)
        if not dep:
            raise NotFoundError("Dependency not found.", code="DEPENDENCY_NOT_FOUND")
        pred = self._task_repo.get(dep.predecessor_task_id)
        succ = self._task_repo.get(dep.successor_task_id)
        owner_project = pred.project_id if pred else (succ.project_id if succ else None)
        if project_id is not None and owner_project != project_id:
            raise NotFoundError("Dependency not found.", code="DEPENDENCY_NOT_FOUND")

        try:
            self._dependency_repo.delete(dep_id)
            self._session.commit()
            audit_dependency(self, "remove", dep, owner_project)
        except Exception as exc:
            self._session.rollback()
            raise exc
        logger.info(f"Removed dependency {dep_id}")
        if owner_project:
            domain_events.tasks_changed.emit(owner_project)

    def list_dependencies_for_task(self, task_id: str) -> List[TaskDependency]:
        return self._dependency_repo.list_by_task(task_id)

    def list_dependencies_for_project(self, project_id: str) -> List[TaskDependency]:
        return self._dependency_repo.list_by_project(project_id)
