# core/interfaces.py
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import List, Optional, Sequence

from core.models import AuditLogEntry, Project, Task, TaskDependency


class ProjectRepository(ABC):
    @abstractmethod
    def add(self, project: Project) -> None: ...

    @abstractmethod
    def get(self, project_id: str) -> Optional[Project]: ...

    @abstractmethod
    def list_all(self) -> List[Project]: ...


class TaskRepository(ABC):
    @abstractmethod
    def add(self, task: Task) -> None: ...

    @abstractmethod
    def update(self, task: Task) -> None: ...

    @abstractmethod
    def delete(self, task_id: str) -> None: ...

    @abstractmethod
    def get(self, task_id: str) -> Optional[Task]: ...

    @abstractmethod
    def list_by_project(self, project_id: str, archived: bool | None = False) -> List[Task]: ...

    @abstractmethod
    def list_schedulable(self, project_id: str) -> List[Task]:
        """Non-archived tasks of a project having both planned start and end."""

    @abstractmethod
    def list_children(self, parent_id: str) -> List[Task]: ...

    @abstractmethod
    def max_sort_order(self, project_id: str, parent_id: str | None) -> int: ...


class DependencyRepository(ABC):
    @abstractmethod
    def add(self, dependency: TaskDependency) -> None: ...

    @abstractmethod
    def get(self, dependency_id: str) -> Optional[TaskDependency]: ...

    @abstractmethod
    def delete(self, dependency_id: str) -> None: ...

    @abstractmethod
    def delete_for_task(self, task_id: str) -> None: ...

    @abstractmethod
    def list_by_project(self, project_id: str) -> List[TaskDependency]: ...

    @abstractmethod
    def list_by_task(self, task_id: str) -> List[TaskDependency]: ...

    @abstractmethod
    def list_by_predecessor(self, task_id: str) -> List[TaskDependency]: ...


class AuditLogRepository(ABC):
    @abstractmethod
    def add(self, entry: AuditLogEntry) -> None: ...

    @abstractmethod
    def list_recent(
        self,
        limit: int = 200,
        *,
        project_id: str | None = None,
        entity_type: str | None = None,
        actions: Sequence[str] | None = None,
    ) -> List[AuditLogEntry]: ...

    @abstractmethod
    def list_for_entity(self, entity_type: str, entity_id: str, limit: int = 200) -> List[AuditLogEntry]: ...
