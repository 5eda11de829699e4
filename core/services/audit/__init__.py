from .helpers import audit_dependency, audit_project, audit_task, audit_task_batch
from .service import AuditService

__all__ = ["AuditService", "audit_dependency", "audit_project", "audit_task", "audit_task_batch"]
