from __future__ import annotations

import logging
from datetime import date, timedelta
from typing import Iterator, List, Optional

from sqlalchemy.orm import Session

from core.events.domain_events import domain_events
from core.interfaces import DependencyRepository, TaskRepository
from core.models import TaskDependency
from core.services.scheduling.durations import shift_preserving_span
from core.services.scheduling.locks import ScheduleLockRegistry, schedule_locks
from core.services.scheduling.models import ScheduleShift


logger = logging.getLogger(__name__)


class CascadeRescheduler:
    """
    Pushes dependent tasks later when a predecessor's planned end moves.

    The walk is depth-first over successor edges: a successor whose start
    moves continues the cascade with its new end date before the next sibling
    edge is examined. Successors are only ever moved forward, so a diamond
    that reaches the same task twice settles on the latest candidate start.
    """

    def __init__(
        self,
        session: Session,
        task_repo: TaskRepository,
        dependency_repo: DependencyRepository,
        locks: ScheduleLockRegistry | None = None,
    ):
        self._session: Session = session
        self._task_repo: TaskRepository = task_repo
        self._dependency_repo: DependencyRepository = dependency_repo
        self._locks: ScheduleLockRegistry = locks or schedule_locks

    def on_task_end_date_changed(
        self,
        task_id: str,
        new_end_date: date,
        project_id: str,
    ) -> List[ScheduleShift]:
        shifts: List[ScheduleShift] = []
        with self._locks.hold(project_id):
            stack: list[tuple[Iterator[TaskDependency], date]] = [
                (iter(self._dependency_repo.list_by_predecessor(task_id)), new_end_date)
            ]
            while stack:
                outgoing, predecessor_end = stack[-1]
                dep = next(outgoing, None)
                if dep is None:
                    stack.pop()
                    continue

                shift = self._shift_successor(dep, predecessor_end, project_id)
                if shift is None:
                    continue
                shifts.append(shift)
                if shift.new_end is not None:
                    stack.append(
                        (iter(self._dependency_repo.list_by_predecessor(shift.task_id)), shift.new_end)
                    )

        if shifts:
            logger.info(
                "Cascade from task %s shifted %d dependent task(s) in project %s",
                task_id,
                len(shifts),
                project_id,
            )
            domain_events.tasks_changed.emit(project_id)
        return shifts

    def _shift_successor(
        self,
        dep: TaskDependency,
        predecessor_end: date,
        project_id: str,
    ) -> Optional[ScheduleShift]:
        successor = self._task_repo.get(dep.successor_task_id)
        if successor is None or successor.project_id != project_id:
            return None
        if successor.planned_start is None:
            return None

        candidate_start = predecessor_end + timedelta(days=int(dep.lag_days or 0))
        if candidate_start <= successor.planned_start:
            return None

        old_start = successor.planned_start
        old_end = successor.planned_end
        new_end = shift_preserving_span(old_start, old_end, candidate_start)

        successor.planned_start = candidate_start
        successor.planned_end = new_end
        try:
            self._task_repo.update(successor)
            self._session.commit()
        except Exception:
            self._session.rollback()
            raise

        logger.info(
            "Shifted task %s from %s..%s to %s..%s (predecessor %s, lag %d)",
            successor.id,
            old_start,
            old_end,
            candidate_start,
            new_end,
            dep.predecessor_task_id,
            dep.lag_days,
        )
        return ScheduleShift(
            task_id=successor.id,
            old_start=old_start,
            old_end=old_end,
            new_start=candidate_start,
            new_end=new_end,
            triggered_by=dep.predecessor_task_id,
        )


__all__ = ["CascadeRescheduler"]
