from __future__ import annotations

from typing import List, Optional

from sqlalchemy import func, or_, select
from sqlalchemy.orm import Session

from core.interfaces import DependencyRepository, TaskRepository
from core.models import Task, TaskDependency
from infra.db.models import TaskDependencyORM, TaskORM
from infra.db.optimistic import apply_versioned_update
from infra.db.task.mapper import (
    dependency_from_orm,
    dependency_to_orm,
    task_from_orm,
    task_to_orm,
    task_update_values,
)


class SqlAlchemyTaskRepository(TaskRepository):
    def __init__(self, session: Session):
        self.session = session

    def add(self, task: Task) -> None:
        self.session.add(task_to_orm(task))

    def update(self, task: Task) -> None:
        apply_versioned_update(self.session, TaskORM, task, task_update_values(task), label="task")

    def delete(self, task_id: str) -> None:
        self.session.query(TaskORM).filter_by(id=task_id).delete()

    def get(self, task_id: str) -> Optional[Task]:
        obj = self.session.get(TaskORM, task_id)
        return task_from_orm(obj) if obj else None

    def list_by_project(self, project_id: str, archived: bool | None = False) -> List[Task]:
        stmt = select(TaskORM).where(TaskORM.project_id == project_id)
        if archived is not None:
            stmt = stmt.where(TaskORM.archived == archived)
        stmt = stmt.order_by(TaskORM.sort_order, TaskORM.name)
        rows = self.session.execute(stmt).scalars().all()
        return [task_from_orm(row) for row in rows]

    def list_schedulable(self, project_id: str) -> List[Task]:
        stmt = (
            select(TaskORM)
            .where(
                TaskORM.project_id == project_id,
                TaskORM.archived.is_(False),
                TaskORM.planned_start.is_not(None),
                TaskORM.planned_end.is_not(None),
            )
            .order_by(TaskORM.sort_order, TaskORM.name)
        )
        rows = self.session.execute(stmt).scalars().all()
        return [task_from_orm(row) for row in rows]

    def list_children(self, parent_id: str) -> List[Task]:
        stmt = select(TaskORM).where(TaskORM.parent_id == parent_id).order_by(TaskORM.sort_order)
        rows = self.session.execute(stmt).scalars().all()
        return [task_from_orm(row) for row in rows]

    def max_sort_order(self, project_id: str, parent_id: str | None) -> int:
        stmt = select(func.max(TaskORM.sort_order)).where(TaskORM.project_id == project_id)
        if parent_id is None:
            stmt = stmt.where(TaskORM.parent_id.is_(None))
        else:
            stmt = stmt.where(TaskORM.parent_id == parent_id)
        return int(self.session.execute(stmt).scalar() or 0)


class SqlAlchemyDependencyRepository(DependencyRepository):
    def __init__(self, session: Session):
        self.session = session

    def add(self, dependency: TaskDependency) -> None:
        self.session.add(dependency_to_orm(dependency))

    def get(self, dependency_id: str) -> Optional[TaskDependency]:
        obj = self.session.get(TaskDependencyORM, dependency_id)
        return dependency_from_orm(obj) if obj else None

    def list_by_project(self, project_id: str) -> List[TaskDependency]:
        task_ids_subq = select(TaskORM.id).where(TaskORM.project_id == project_id)
        stmt = select(TaskDependencyORM).where(
            TaskDependencyORM.predecessor_task_id.in_(task_ids_subq),
            TaskDependencyORM.successor_task_id.in_(task_ids_subq),
        )
        rows = self.session.execute(stmt).scalars().all()
        return [dependency_from_orm(row) for row in rows]

    def delete(self, dependency_id: str) -> None:
        self.session.query(TaskDependencyORM).filter_by(id=dependency_id).delete()

    def delete_for_task(self, task_id: str) -> None:
        self.session.query(TaskDependencyORM).filter(
            or_(
                TaskDependencyORM.predecessor_task_id == task_id,
                TaskDependencyORM.successor_task_id == task_id,
            )
        ).delete(synchronize_session=False)

    def list_by_task(self, task_id: str) -> List[TaskDependency]:
        stmt = select(TaskDependencyORM).where(
            or_(
                TaskDependencyORM.predecessor_task_id == task_id,
                TaskDependencyORM.successor_task_id == task_id,
            )
        )
        rows = self.session.execute(stmt).scalars().all()
        return [dependency_from_orm(row) for row in rows]

    def list_by_predecessor(self, task_id: str) -> List[TaskDependency]:
        stmt = select(TaskDependencyORM).where(TaskDependencyORM.predecessor_task_id == task_id)
        rows = self.session.execute(stmt).scalars().all()
        return [dependency_from_orm(row) for row in rows]


__all__ = [
    "SqlAlchemyTaskRepository",
    "SqlAlchemyDependencyRepository",
]
