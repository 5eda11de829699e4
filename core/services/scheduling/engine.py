# core/services/scheduling/engine.py
from __future__ import annotations

import logging
from typing import Dict, List

from sqlalchemy.orm import Session

from core.events.domain_events import domain_events
from core.interfaces import DependencyRepository, TaskRepository
from core.models import Task, TaskDependency
from core.services.scheduling.graph import build_task_nodes, topological_order
from core.services.scheduling.locks import ScheduleLockRegistry, schedule_locks
from core.services.scheduling.models import CriticalPathResult
from core.services.scheduling.passes import run_backward_pass, run_forward_pass


logger = logging.getLogger(__name__)


class SchedulingEngine:
    """
    Critical Path Method calculator:
    - Kahn topological order over the project's dependency edges
    - Forward pass: ES/EF (finish-to-start arithmetic for every edge type)
    - Backward pass: LS/LF, float = LS - ES, critical when float == 0
    - Writes is_critical_path / float_days back onto every scheduled task
    Offsets are whole calendar days from the project's start.
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

    def recalculate_critical_path(self, project_id: str) -> CriticalPathResult:
        with self._locks.hold(project_id):
            tasks = self._task_repo.list_schedulable(project_id)
            if not tasks:
                logger.info("Critical path for project %s: no scheduled tasks", project_id)
                return CriticalPathResult.empty()

            tasks_by_id: Dict[str, Task] = {t.id: t for t in tasks}
            deps: List[TaskDependency] = [
                d
                for d in self._dependency_repo.list_by_project(project_id)
                if d.predecessor_task_id in tasks_by_id and d.successor_task_id in tasks_by_id
            ]

            nodes = build_task_nodes(tasks, deps)
            topo_order = topological_order(nodes)
            if len(topo_order) != len(nodes):
                skipped = sorted(set(nodes) - set(topo_order))
                logger.warning(
                    "Project %s has a dependency cycle; %d task(s) left out of the critical path: %s",
                    project_id,
                    len(skipped),
                    ", ".join(skipped),
                )

            project_end = run_forward_pass(nodes, topo_order)
            run_backward_pass(nodes, topo_order, project_end)

            try:
                for task_id, node in nodes.items():
                    task = tasks_by_id[task_id]
                    task.is_critical_path = node.is_critical
                    task.float_days = node.float_days
                    self._task_repo.update(task)
                self._session.commit()
            except Exception:
                self._session.rollback()
                raise

            critical_ids = [task_id for task_id, node in nodes.items() if node.is_critical]
            logger.info(
                "Critical path for project %s: %d of %d task(s) critical, total duration %d day(s)",
                project_id,
                len(critical_ids),
                len(nodes),
                project_end,
            )

        domain_events.schedule_changed.emit(project_id)
        return CriticalPathResult(
            critical_task_ids=critical_ids,
            total_duration_days=project_end,
            nodes=nodes,
        )


__all__ = ["SchedulingEngine"]
