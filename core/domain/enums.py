from __future__ import annotations

from enum import Enum


class TaskStatus(str, Enum):
    NOT_STARTED = "not_started"
    IN_PROGRESS = "in_progress"
    DONE = "done"
    BLOCKED = "blocked"
    UNSCHEDULED = "unscheduled"


class TaskType(str, Enum):
    PHASE = "phase"
    WORKSTREAM = "workstream"
    TASK = "task"


class DependencyType(str, Enum):
    FINISH_TO_START = "FS"
    FINISH_TO_FINISH = "FF"
    START_TO_START = "SS"
    START_TO_FINISH = "SF"


__all__ = ["TaskStatus", "TaskType", "DependencyType"]
