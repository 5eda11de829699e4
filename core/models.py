from __future__ import annotations

from core.domain import (
    AuditLogEntry,
    DependencyType,
    Project,
    Task,
    TaskDependency,
    TaskStatus,
    TaskType,
    generate_id,
)

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
