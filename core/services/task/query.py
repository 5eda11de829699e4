from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import date, datetime, timezone
from enum import Enum
from typing import Any, List, Optional

from core.interfaces import TaskRepository
from core.models import Task, TaskStatus, TaskType
from core.services.scheduling.durations import inclusive_duration_days, working_days_inclusive


@dataclass
class TaskRow:
    """A task together with its display durations (both inclusive of the end day)."""

    task: Task
    duration_days: Optional[int]
    duration_work_days: Optional[int]

    @staticmethod
    def from_task(task: Task) -> "TaskRow":
        return TaskRow(
            task=task,
            duration_days=inclusive_duration_days(task.planned_start, task.planned_end),
            duration_work_days=working_days_inclusive(task.planned_start, task.planned_end),
        )

    def as_dict(self) -> dict[str, Any]:
        payload = {key: _jsonable(value) for key, value in asdict(self.task).items()}
        payload["duration_days"] = self.duration_days
        payload["duration_work_days"] = self.duration_work_days
        return payload


def _jsonable(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    return value


class TaskQueryMixin:
    _task_repo: TaskRepository

    def get_task(self, task_id: str) -> Task:
        return self._require_task(task_id)

    def list_tasks(
        self,
        project_id: str,
        archived: bool = False,
        status: TaskStatus | None = None,
        task_type: TaskType | None = None,
        parent_id: str | None = None,
        roots_only: bool = False,
    ) -> List[Task]:
        tasks = self._task_repo.list_by_project(project_id, archived=archived)
        if status:
            tasks = [t for t in tasks if t.status == status]
        if task_type:
            tasks = [t for t in tasks if t.task_type == task_type]
        if parent_id is not None:
            tasks = [t for t in tasks if t.parent_id == parent_id]
        elif roots_only:
            tasks = [t for t in tasks if t.parent_id is None]
        return sorted(tasks, key=lambda t: (t.sort_order, t.name))

    def list_task_rows(self, project_id: str, archived: bool = False) -> List[TaskRow]:
        return [TaskRow.from_task(t) for t in self.list_tasks(project_id, archived=archived)]

    def list_critical_tasks(self, project_id: str) -> List[Task]:
        return [t for t in self.list_tasks(project_id) if t.is_critical_path]

    def export_tasks(self, project_id: str) -> dict[str, Any]:
        rows = self.list_task_rows(project_id)
        return {
            "project_id": project_id,
            "exported_at": datetime.now(timezone.utc).isoformat(),
            "tasks": [row.as_dict() for row in rows],
        }
