from __future__ import annotations

from typing import Dict, List

from core.services.scheduling.models import TaskNode


def run_forward_pass(nodes: Dict[str, TaskNode], topo_order: List[str]) -> int:
    """
    Earliest start/finish in day offsets from project start.
    Every dependency is treated as finish-to-start: pred.EF + lag.
    A negative lag (lead) never pulls a task before the project start.
    Returns the project end (max earliest finish over all nodes).
    """
    for task_id in topo_order:
        node = nodes[task_id]
        node.earliest_start = max(
            [0, *(nodes[link.task_id].earliest_finish + link.lag_days for link in node.predecessors)]
        )
        node.earliest_finish = node.earliest_start + node.duration_days

    if not nodes:
        return 0
    return max(node.earliest_finish for node in nodes.values())


def run_backward_pass(
    nodes: Dict[str, TaskNode],
    topo_order: List[str],
    project_end: int,
) -> None:
    scheduled = set(topo_order)
    for task_id in reversed(topo_order):
        node = nodes[task_id]
        # Successors excluded from the order (cycle members) carry no latest dates.
        # A node whose only successors sit on a cycle falls back to the project end
        # rather than an unbounded latest finish.
        candidates = [
            nodes[link.task_id].latest_start - link.lag_days
            for link in node.successors
            if link.task_id in scheduled
        ]
        node.latest_finish = min(candidates) if candidates else project_end
        node.latest_start = node.latest_finish - node.duration_days
        node.float_days = node.latest_start - node.earliest_start
        node.is_critical = node.float_days == 0


__all__ = ["run_forward_pass", "run_backward_pass"]
