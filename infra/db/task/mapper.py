from __future__ import annotations

from core.models import Task, TaskDependency
from infra.db.models import TaskDependencyORM, TaskORM


def task_to_orm(task: Task) -> TaskORM:
    return TaskORM(
        id=task.id,
        project_id=task.project_id,
        name=task.name,
        description=task.description,
        task_type=task.task_type,
        parent_id=task.parent_id,
        status=task.status,
        progress=task.progress,
        is_milestone=task.is_milestone,
        sort_order=task.sort_order,
        planned_start=task.planned_start,
        planned_end=task.planned_end,
        baseline_start=task.baseline_start,
        baseline_end=task.baseline_end,
        estimated_cost=task.estimated_cost,
        is_critical_path=task.is_critical_path,
        float_days=task.float_days,
        archived=task.archived,
        archived_at=task.archived_at,
        archived_by=task.archived_by,
        version=getattr(task, "version", 1),
    )


def task_from_orm(obj: TaskORM) -> Task:
    return Task(
        id=obj.id,
        project_id=obj.project_id,
        name=obj.name,
        description=obj.description or "",
        task_type=obj.task_type,
        parent_id=obj.parent_id,
        status=obj.status,
        progress=obj.progress or 0,
        is_milestone=bool(obj.is_milestone),
        sort_order=obj.sort_order or 0,
        planned_start=obj.planned_start,
        planned_end=obj.planned_end,
        baseline_start=obj.baseline_start,
        baseline_end=obj.baseline_end,
        estimated_cost=obj.estimated_cost,
        is_critical_path=bool(obj.is_critical_path),
        float_days=obj.float_days,
        archived=bool(obj.archived),
        archived_at=obj.archived_at,
        archived_by=obj.archived_by,
        version=getattr(obj, "version", 1),
    )


def task_update_values(task: Task) -> dict:
    """Columns written by a versioned task update (everything but id/project/version)."""
    return {
        "name": task.name,
        "description": task.description,
        "task_type": task.task_type,
        "parent_id": task.parent_id,
        "status": task.status,
        "progress": task.progress,
        "is_milestone": task.is_milestone,
        "sort_order": task.sort_order,
        "planned_start": task.planned_start,
        "planned_end": task.planned_end,
        "baseline_start": task.baseline_start,
        "baseline_end": task.baseline_end,
        "estimated_cost": task.estimated_cost,
        "is_critical_path": task.is_critical_path,
        "float_days": task.float_days,
        "archived": task.archived,
        "archived_at": task.archived_at,
        "archived_by": task.archived_by,
    }


def dependency_to_orm(dependency: TaskDependency) -> TaskDependencyORM:
    return TaskDependencyORM(
        id=dependency.id,
        predecessor_task_id=dependency.predecessor_task_id,
        successor_task_id=dependency.successor_task_id,
        dependency_type=dependency.dependency_type,
        lag_days=dependency.lag_days,
    )


def dependency_from_orm(obj: TaskDependencyORM) -> TaskDependency:
    return TaskDependency(
        id=obj.id,
        predecessor_task_id=obj.predecessor_task_id,
        successor_task_id=obj.successor_task_id,
        dependency_type=obj.dependency_type,
        lag_days=obj.lag_days,
    )


__all__ = [
    "task_to_orm",
    "task_from_orm",
    "task_update_values",
    "dependency_to_orm",
    "dependency_from_orm",
]
