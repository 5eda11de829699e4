from __future__ import annotations

from collections import deque
from typing import Dict, Iterable, List, Optional

from core.models import Task, TaskDependency
from core.services.scheduling.durations import span_days
from core.services.scheduling.models import DependencyLink, TaskNode


def build_task_nodes(
    tasks: Iterable[Task],
    deps: Iterable[TaskDependency],
) -> Dict[str, TaskNode]:
    nodes: Dict[str, TaskNode] = {
        t.id: TaskNode(task_id=t.id, duration_days=span_days(t.planned_start, t.planned_end))
        for t in tasks
    }
    # edges with an endpoint outside the task set are dropped
    for dep in deps:
        pred = nodes.get(dep.predecessor_task_id)
        succ = nodes.get(dep.successor_task_id)
        if pred is None or succ is None:
            continue
        lag = int(dep.lag_days or 0)
        pred.successors.append(DependencyLink(succ.task_id, dep.dependency_type, lag))
        succ.predecessors.append(DependencyLink(pred.task_id, dep.dependency_type, lag))
    return nodes


def topological_order(nodes: Dict[str, TaskNode]) -> List[str]:
    """
    Kahn's algorithm. Nodes sitting on a cycle never reach in-degree 0 and
    are left out of the returned order.
    """
    indegree: Dict[str, int] = {task_id: len(node.predecessors) for task_id, node in nodes.items()}
    queue = deque(task_id for task_id, degree in indegree.items() if degree == 0)

    order: List[str] = []
    while queue:
        task_id = queue.popleft()
        order.append(task_id)
        for link in nodes[task_id].successors:
            indegree[link.task_id] -= 1
            if indegree[link.task_id] == 0:
                queue.append(link.task_id)
    return order


def build_successor_map(deps: Iterable[TaskDependency]) -> Dict[str, List[str]]:
    graph: Dict[str, List[str]] = {}
    for dep in deps:
        graph.setdefault(dep.predecessor_task_id, []).append(dep.successor_task_id)
    return graph


def find_dependency_path(
    graph: Dict[str, List[str]],
    start: str,
    target: str,
) -> Optional[List[str]]:
    """Depth-first search along successor edges; returns the first path found."""
    stack: list[tuple[str, list[str]]] = [(start, [start])]
    visited: set[str] = set()
    while stack:
        node, path = stack.pop()
        if node == target:
            return path
        if node in visited:
            continue
        visited.add(node)
        for nxt in reversed(graph.get(node, [])):
            if nxt not in visited:
                stack.append((nxt, [*path, nxt]))
    return None


def find_cycle_path(
    deps: Iterable[TaskDependency],
    predecessor_id: str,
    successor_id: str,
) -> Optional[List[str]]:
    """
    Cycle that the edge predecessor -> successor would close, as a list of
    task ids starting and ending with the predecessor, or None.
    """
    path = find_dependency_path(build_successor_map(deps), successor_id, predecessor_id)
    if not path:
        return None
    return [predecessor_id, *path]


__all__ = [
    "build_task_nodes",
    "topological_order",
    "build_successor_map",
    "find_dependency_path",
    "find_cycle_path",
]
