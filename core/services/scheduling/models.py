from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Any, Dict, List, Optional

from core.models import DependencyType


@dataclass(frozen=True)
class DependencyLink:
    task_id: str  # the task on the other end of the edge
    dependency_type: DependencyType
    lag_days: int


@dataclass
class TaskNode:
    """Working record of one task during a single critical path calculation."""

    task_id: str
    duration_days: int
    earliest_start: int = 0
    earliest_finish: int = 0
    latest_start: Optional[int] = None
    latest_finish: Optional[int] = None
    float_days: int = 0
    is_critical: bool = False
    predecessors: List[DependencyLink] = field(default_factory=list)
    successors: List[DependencyLink] = field(default_factory=list)


@dataclass
class CriticalPathResult:
    critical_task_ids: List[str]
    total_duration_days: int
    nodes: Dict[str, TaskNode] = field(default_factory=dict)

    def as_dict(self) -> dict[str, Any]:
        return {
            "criticalPath": list(self.critical_task_ids),
            "totalDuration": self.total_duration_days,
        }

    @staticmethod
    def empty() -> "CriticalPathResult":
        return CriticalPathResult(critical_task_ids=[], total_duration_days=0)


@dataclass(frozen=True)
class ScheduleShift:
    task_id: str
    old_start: date
    old_end: Optional[date]
    new_start: date
    new_end: Optional[date]
    triggered_by: str  # predecessor whose finish pushed this task

    @property
    def shift_days(self) -> int:
        return (self.new_start - self.old_start).days
