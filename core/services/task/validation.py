from __future__ import annotations

from datetime import date

from core.exceptions import BusinessRuleError, NotFoundError, ValidationError
from core.interfaces import DependencyRepository, TaskRepository
from core.models import Task
from core.services.scheduling.graph import find_cycle_path

MAX_TASK_NAME_LENGTH = 500


class TaskValidationMixin:
    _task_repo: TaskRepository
    _dependency_repo: DependencyRepository

    def _require_task(self, task_id: str) -> Task:
        task = self._task_repo.get(task_id)
        if not task:
            raise NotFoundError("Task not found.", code="TASK_NOT_FOUND")
        return task

    def _validate_task_name(self, name: str) -> None:
        if not (name or "").strip():
            raise ValidationError("Task name cannot be empty.", code="TASK_NAME_EMPTY")
        if len(name.strip()) > MAX_TASK_NAME_LENGTH:
            raise ValidationError(
                f"Task name must be at most {MAX_TASK_NAME_LENGTH} characters.",
                code="TASK_NAME_TOO_LONG",
            )

    def _validate_progress(self, progress: int) -> None:
        if progress < 0 or progress > 100:
            raise ValidationError("progress must be between 0 and 100.", code="TASK_INVALID_PROGRESS")

    def _validate_planned_dates(self, planned_start: date | None, planned_end: date | None) -> None:
        if planned_start and planned_end and planned_end < planned_start:
            raise ValidationError(
                f"Planned end ({planned_end}) cannot be before planned start ({planned_start}).",
                code="TASK_INVALID_DATE",
            )

    def _validate_parent(self, project_id: str, parent_id: str | None, task_id: str | None = None) -> None:
        if parent_id is None:
            return
        if task_id is not None and parent_id == task_id:
            raise ValidationError("A task cannot be its own parent.", code="TASK_INVALID_PARENT")
        parent = self._task_repo.get(parent_id)
        if not parent or parent.project_id != project_id:
            raise ValidationError("Parent task not found in this project.", code="TASK_INVALID_PARENT")
        if task_id is None:
            return
        # walk up from the new parent; meeting the task itself means a loop in the tree
        seen: set[str] = set()
        cur = parent
        while cur is not None and cur.parent_id and cur.id not in seen:
            seen.add(cur.id)
            if cur.parent_id == task_id:
                raise ValidationError(
                    "A task cannot be moved under one of its own descendants.",
                    code="TASK_INVALID_PARENT",
                )
            cur = self._task_repo.get(cur.parent_id)

    def _validate_not_self_dependency(self, predecessor_id: str, successor_id: str) -> None:
        if predecessor_id == successor_id:
            raise ValidationError("A task cannot depend on itself.", code="DEPENDENCY_SELF")

    def _check_no_circular_dependency(
        self, project_id: str, predecessor_id: str, successor_id: str
    ) -> None:
        deps = self._dependency_repo.list_by_project(project_id)
        cycle = find_cycle_path(deps, predecessor_id=predecessor_id, successor_id=successor_id)
        if not cycle:
            return
        names = {t.id: t.name for t in self._task_repo.list_by_project(project_id, archived=None)}
        cycle_text = " -> ".join(names.get(task_id, task_id) for task_id in cycle)
        raise BusinessRuleError(
            f"Circular dependency detected: {cycle_text}",
            code="DEPENDENCY_CYCLE",
        )
