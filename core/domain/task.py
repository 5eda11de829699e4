from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from core.domain.enums import DependencyType, TaskStatus, TaskType
from core.domain.identifiers import generate_id


@dataclass
class Task:
    id: str
    project_id: str
    name: str
    description: str = ""
    task_type: TaskType = TaskType.TASK
    parent_id: Optional[str] = None
    status: TaskStatus = TaskStatus.NOT_STARTED
    progress: int = 0
    is_milestone: bool = False
    sort_order: int = 0

    planned_start: Optional[date] = None
    planned_end: Optional[date] = None
    baseline_start: Optional[date] = None
    baseline_end: Optional[date] = None
    estimated_cost: Optional[float] = None

    # written by the critical path calculator only
    is_critical_path: bool = False
    float_days: Optional[int] = None

    archived: bool = False
    archived_at: Optional[datetime] = None
    archived_by: Optional[str] = None
    version: int = 1

    @property
    def is_scheduled(self) -> bool:
        return self.planned_start is not None and self.planned_end is not None

    @staticmethod
    def create(project_id: str, name: str, description: str = "", **extra) -> "Task":
        return Task(
            id=generate_id(),
            project_id=project_id,
            name=name,
            description=description,
            **extra,
        )


@dataclass
class TaskDependency:
    id: str
    predecessor_task_id: str
    successor_task_id: str
    dependency_type: DependencyType = DependencyType.FINISH_TO_START
    lag_days: int = 0  # negative = lead time

    @staticmethod
    def create(
        predecessor_id: str,
        successor_id: str,
        dependency_type: DependencyType = DependencyType.FINISH_TO_START,
        lag_days: int = 0,
    ) -> "TaskDependency":
        return TaskDependency(
            id=generate_id(),
            predecessor_task_id=predecessor_id,
            successor_task_id=successor_id,
            dependency_type=dependency_type,
            lag_days=lag_days,
        )


__all__ = ["Task", "TaskDependency"]
