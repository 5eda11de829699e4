"""Project-plan change notifications (task edits, dependency edits, schedule recomputes)."""
from __future__ import annotations

from core.events.signal import Signal


class DomainEvents:
    def __init__(self) -> None:
        self.project_changed: Signal[str] = Signal()   # project_id
        self.tasks_changed: Signal[str] = Signal()     # project_id
        self.schedule_changed: Signal[str] = Signal()  # project_id
        self.baseline_changed: Signal[str] = Signal()  # project_id


# SINGLE global instance
domain_events = DomainEvents()
