from .audit import AuditService
from .project import ProjectService
from .scheduling import CascadeRescheduler, CriticalPathResult, SchedulingEngine
from .task import TaskService

__all__ = [
    "AuditService",
    "ProjectService",
    "TaskService",
    "SchedulingEngine",
    "CascadeRescheduler",
    "CriticalPathResult",
]
