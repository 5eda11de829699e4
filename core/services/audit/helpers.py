from __future__ import annotations

from typing import Any

from core.models import Project, Task, TaskDependency


def _record(owner: object, **fields: Any) -> None:
    # services built without an audit service skip auditing
    audit_service = getattr(owner, "_audit_service", None)
    if audit_service is not None:
        audit_service.record(commit=True, **fields)


def audit_task(owner: object, action: str, task: Task, **details: Any) -> None:
    """Record a ``task.<action>`` entry; the task name is always included."""
    _record(
        owner,
        action=f"task.{action}",
        entity_type="task",
        entity_id=task.id,
        project_id=task.project_id,
        details={"name": task.name, **details},
    )


def audit_task_batch(owner: object, action: str, project_id: str, **details: Any) -> None:
    """One entry for an edit spanning many tasks of a project."""
    _record(
        owner,
        action=f"task.{action}",
        entity_type="task",
        entity_id=None,
        project_id=project_id,
        details=details,
    )


def audit_dependency(
    owner: object,
    action: str,
    dependency: TaskDependency,
    project_id: str | None,
    **details: Any,
) -> None:
    _record(
        owner,
        action=f"dependency.{action}",
        entity_type="task_dependency",
        entity_id=dependency.id,
        project_id=project_id,
        details={
            "predecessor_id": dependency.predecessor_task_id,
            "successor_id": dependency.successor_task_id,
            **details,
        },
    )


def audit_project(owner: object, action: str, project: Project) -> None:
    _record(
        owner,
        action=f"project.{action}",
        entity_type="project",
        entity_id=project.id,
        project_id=project.id,
        details={"name": project.name},
    )


__all__ = ["audit_task", "audit_task_batch", "audit_dependency", "audit_project"]
