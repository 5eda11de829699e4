from __future__ import annotations

import logging
from typing import List

from sqlalchemy.orm import Session

from core.events.domain_events import domain_events
from core.exceptions import NotFoundError, ValidationError
from core.interfaces import ProjectRepository
from core.models import Project
from core.services.audit.helpers import audit_project
from core.services.audit.service import AuditService

logger = logging.getLogger(__name__)


class ProjectService:
    """Owner records for task plans; only what scoping of tasks needs."""

    def __init__(
        self,
        session: Session,
        project_repo: ProjectRepository,
        audit_service: AuditService | None = None,
    ):
        self._session: Session = session
        self._project_repo: ProjectRepository = project_repo
        self._audit_service: AuditService | None = audit_service

    def create_project(self, name: str, description: str = "") -> Project:
        if not (name or "").strip():
            raise ValidationError("Project name cannot be empty.", code="PROJECT_NAME_EMPTY")
        project = Project.create(name=name.strip(), description=(description or "").strip())
        try:
            self._project_repo.add(project)
            self._session.commit()
            audit_project(self, "create", project)
        except Exception as exc:
            self._session.rollback()
            logger.error(f"Error creating project: {exc}")
            raise
        logger.info(f"Created project {project.id} - {project.name}")
        domain_events.project_changed.emit(project.id)
        return project

    def get_project(self, project_id: str) -> Project | None:
        return self._project_repo.get(project_id)

    def require_project(self, project_id: str) -> Project:
        project = self._project_repo.get(project_id)
        if not project:
            raise NotFoundError("Project not found.", code="PROJECT_NOT_FOUND")
        return project

    def list_projects(self) -> List[Project]:
        return self._project_repo.list_all()


__all__ = ["ProjectService"]
