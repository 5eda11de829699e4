from .query import TaskRow
from .service import TaskService

__all__ = ["TaskService", "TaskRow"]
