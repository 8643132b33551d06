from __future__ import annotations

from sqlalchemy.orm import Session

from core.interfaces import AllocationRepository, ProjectRepository
from core.services.project.lifecycle import ProjectLifecycleMixin
from core.services.project.query import ProjectQueryMixin


class ProjectService(ProjectLifecycleMixin, ProjectQueryMixin):
    """Project master data: wiring repositories + composing mixins."""

    def __init__(
        self,
        session: Session,
        project_repo: ProjectRepository,
        allocation_repo: AllocationRepository,
    ):
        self._session: Session = session
        self._project_repo: ProjectRepository = project_repo
        self._allocation_repo: AllocationRepository = allocation_repo


__all__ = ["ProjectService"]
