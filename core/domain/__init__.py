from core.domain.audit import AuditLogEntry
from core.domain.enums import DependencyType, TaskStatus, TaskType
from core.domain.identifiers import generate_id
from core.domain.project import Project
from core.domain.task import Task, TaskDependency

__all__ = [
    "generate_id",
    "TaskStatus",
    "TaskType",
    "DependencyType",
    "Project",
    "Task",
    "TaskDependency",
    "AuditLogEntry",
]
