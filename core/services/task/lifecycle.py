from __future__ import annotations

import logging
from datetime import date, datetime, timezone
from typing import Iterable, Optional

from sqlalchemy.orm import Session

from core.events.domain_events import domain_events
from core.exceptions import ConcurrencyError, NotFoundError
from core.interfaces import DependencyRepository, TaskRepository
from core.models import Task, TaskStatus, TaskType
from core.services.audit.helpers import audit_task, audit_task_batch
from core.services.scheduling.cascade import CascadeRescheduler
from core.services.scheduling.locks import ScheduleLockRegistry


logger = logging.getLogger(__name__)


class TaskLifecycleMixin:
    _session: Session
    _task_repo: TaskRepository
    _dependency_repo: DependencyRepository
    _cascade: CascadeRescheduler
    _locks: ScheduleLockRegistry

    def create_task(
        self,
        project_id: str,
        name: str,
        description: str = "",
        task_type: TaskType = TaskType.TASK,
        parent_id: Optional[str] = None,
        status: TaskStatus = TaskStatus.NOT_STARTED,
        progress: int = 0,
        is_milestone: bool = False,
        sort_order: Optional[int] = None,
        planned_start: Optional[date] = None,
        planned_end: Optional[date] = None,
        estimated_cost: Optional[float] = None,
    ) -> Task:
        self._validate_task_name(name)
        self._validate_progress(progress)
        self._validate_planned_dates(planned_start, planned_end)
        self._validate_parent(project_id, parent_id)
        if self._project_repo is not None and not self._project_repo.get(project_id):
            raise NotFoundError("Project not found.", code="PROJECT_NOT_FOUND")

        if sort_order is None:
            sort_order = self._task_repo.max_sort_order(project_id, parent_id) + 1

        task = Task.create(
            project_id=project_id,
            name=name.strip(),
            description=(description or "").strip(),
            task_type=task_type,
            parent_id=parent_id,
            status=status,
            progress=progress,
            is_milestone=is_milestone,
            sort_order=sort_order,
            planned_start=planned_start,
            planned_end=planned_end,
            estimated_cost=estimated_cost,
        )

        try:
            self._task_repo.add(task)
            self._session.commit()
            audit_task(self, "create", task, type=task.task_type.value)
            logger.info(f"Created task {task.id} - {task.name} for project {project_id}")
            domain_events.tasks_changed.emit(project_id)
            return task
        except Exception as exc:
            self._session.rollback()
            logger.error(f"Error creating task: {exc}")
            raise

    def update_task(
        self,
        task_id: str,
        name: str | None = None,
        description: str | None = None,
        task_type: TaskType | None = None,
        parent_id: str | None = None,
        status: TaskStatus | None = None,
        progress: int | None = None,
        is_milestone: bool | None = None,
        sort_order: int | None = None,
        planned_start: date | None = None,
        planned_end: date | None = None,
        estimated_cost: float | None = None,
        clear_planned_dates: bool = False,
        clear_parent: bool = False,
        clear_estimated_cost: bool = False,
        expected_version: int | None = None,
    ) -> Task:
        """
        Partial update; None leaves a field unchanged, the clear_* flags
        reset a field to empty. When the planned end moves to a new date,
        dependent tasks are pushed later before this returns.
        """
        task = self._require_task(task_id)
        with self._locks.hold(task.project_id):
            task = self._require_task(task_id)
            if expected_version is not None and task.version != expected_version:
                raise ConcurrencyError(
                    "Task changed since you opened it. Refresh and try again.",
                    code="STALE_WRITE",
                )
            previous_end = task.planned_end

            if name is not None:
                self._validate_task_name(name)
                task.name = name.strip()
            if description is not None:
                task.description = description.strip()
            if task_type is not None:
                task.task_type = task_type
            if clear_parent:
                task.parent_id = None
            if parent_id is not None:
                self._validate_parent(task.project_id, parent_id, task_id=task.id)
                task.parent_id = parent_id
            if status is not None:
                task.status = status
            if progress is not None:
                self._validate_progress(progress)
                task.progress = progress
            if is_milestone is not None:
                task.is_milestone = is_milestone
            if sort_order is not None:
                task.sort_order = sort_order
            if clear_planned_dates:
                task.planned_start = None
                task.planned_end = None
            if planned_start is not None:
                task.planned_start = planned_start
            if planned_end is not None:
                task.planned_end = planned_end
            if clear_estimated_cost:
                task.estimated_cost = None
            if estimated_cost is not None:
                task.estimated_cost = estimated_cost

            self._validate_planned_dates(task.planned_start, task.planned_end)

            try:
                self._task_repo.update(task)
                self._session.commit()
                audit_task(self, "update", task, status=task.status.value)
            except Exception as exc:
                self._session.rollback()
                raise exc

            if task.planned_end is not None and task.planned_end != previous_end:
                self._cascade.on_task_end_date_changed(task.id, task.planned_end, task.project_id)

        domain_events.tasks_changed.emit(task.project_id)
        return task

    def archive_task(self, task_id: str, archived_by: str | None = None) -> int:
        """Soft-delete a task and every non-archived descendant; returns how many were archived."""
        root = self._require_task(task_id)
        archived_at = datetime.now(timezone.utc)
        count = 0
        with self._locks.hold(root.project_id):
            try:
                stack = [root]
                while stack:
                    task = stack.pop()
                    task.archived = True
                    task.archived_at = archived_at
                    task.archived_by = archived_by
                    self._task_repo.update(task)
                    count += 1
                    stack.extend(c for c in self._task_repo.list_children(task.id) if not c.archived)
                self._session.commit()
                audit_task(self, "archive", root, archived_count=count)
            except Exception as exc:
                self._session.rollback()
                raise exc
        logger.info(f"Archived task {root.id} and {count - 1} descendant(s)")
        domain_events.tasks_changed.emit(root.project_id)
        return count

    def restore_task(self, task_id: str) -> Task:
        task = self._task_repo.get(task_id)
        if not task or not task.archived:
            raise NotFoundError("Archived task not found.", code="TASK_NOT_FOUND")
        with self._locks.hold(task.project_id):
            task.archived = False
            task.archived_at = None
            task.archived_by = None
            try:
                self._task_repo.update(task)
                self._session.commit()
                audit_task(self, "restore", task)
            except Exception as exc:
                self._session.rollback()
                raise exc
        domain_events.tasks_changed.emit(task.project_id)
        return task

    def delete_task_permanently(self, task_id: str) -> None:
        task = self._require_task(task_id)
        with self._locks.hold(task.project_id):
            try:
                for child in self._task_repo.list_children(task_id):
                    child.parent_id = None
                    self._task_repo.update(child)
                self._dependency_repo.delete_for_task(task_id)
                self._task_repo.delete(task_id)
                self._session.commit()
                audit_task(self, "delete", task)
            except Exception as exc:
                self._session.rollback()
                raise exc
        logger.info(f"Permanently deleted task {task_id} - {task.name}")
        domain_events.tasks_changed.emit(task.project_id)

    def reorder_tasks(self, project_id: str, items: Iterable[tuple[str, int]]) -> int:
        """
        Bulk sort order update from (task_id, sort_order) pairs.
        Ids that are unknown or belong to another project are skipped.
        Returns how many tasks were moved.
        """
        moved: list[str] = []
        with self._locks.hold(project_id):
            try:
                for task_id, sort_order in items:
                    task = self._task_repo.get(task_id)
                    if task is None or task.project_id != project_id:
                        logger.debug(f"Reorder skipped task {task_id}: not in project {project_id}")
                        continue
                    if task.sort_order == sort_order:
                        continue
                    task.sort_order = int(sort_order)
                    self._task_repo.update(task)
                    moved.append(task.id)
                self._session.commit()
                if moved:
                    audit_task_batch(self, "reorder", project_id, count=len(moved), task_ids=moved)
            except Exception as exc:
                self._session.rollback()
                raise exc
        if moved:
            domain_events.tasks_changed.emit(project_id)
        return len(moved)

    def save_baseline(self, task_id: str) -> Task:
        task = self._require_task(task_id)
        with self._locks.hold(task.project_id):
            task.baseline_start = task.planned_start
            task.baseline_end = task.planned_end
            try:
                self._task_repo.update(task)
                self._session.commit()
                audit_task(self, "baseline", task)
            except Exception as exc:
                self._session.rollback()
                raise exc
        domain_events.baseline_changed.emit(task.project_id)
        return task

    def save_all_baselines(self, project_id: str, recalculate: bool = True) -> int:
        """
        Snapshot planned dates of every scheduled, non-archived task, then
        refresh critical path flags for the project.
        """
        with self._locks.hold(project_id):
            tasks = self._task_repo.list_schedulable(project_id)
            try:
                for task in tasks:
                    task.baseline_start = task.planned_start
                    task.baseline_end = task.planned_end
                    self._task_repo.update(task)
                self._session.commit()
                audit_task_batch(self, "baseline_all", project_id, count=len(tasks))
            except Exception as exc:
                self._session.rollback()
                raise exc

            if recalculate and self._scheduling_engine is not None:
                # re-entrant: the engine takes the same project lock
                self._scheduling_engine.recalculate_critical_path(project_id)
        domain_events.baseline_changed.emit(project_id)
        return len(tasks)
