from .cascade import CascadeRescheduler
from .engine import SchedulingEngine
from .locks import ScheduleLockRegistry, schedule_locks
from .models import CriticalPathResult, DependencyLink, ScheduleShift, TaskNode

__all__ = [
    "SchedulingEngine",
    "CascadeRescheduler",
    "ScheduleLockRegistry",
    "schedule_locks",
    "CriticalPathResult",
    "DependencyLink",
    "ScheduleShift",
    "TaskNode",
]
