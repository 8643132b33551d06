from __future__ import annotations

from core.exceptions import NotFoundError
from core.interfaces import ProjectRepository, ResourceRepository
from core.models import SkillsCoverage
from core.services.skills.coverage import analyze_project_coverage, assigned_resources


class SkillsCoverageService:
    def __init__(self, *, project_repo: ProjectRepository, resource_repo: ResourceRepository) -> None:
        self._project_repo: ProjectRepository = project_repo
        self._resource_repo: ResourceRepository = resource_repo

    def get_project_coverage(self, project_id: str) -> SkillsCoverage:
        project = self._project_repo.get(project_id)
        if project is None:
            raise NotFoundError("Project not found.", code="PROJECT_NOT_FOUND")
        assigned = assigned_resources(project_id, self._resource_repo.list_all())
        return analyze_project_coverage(project, assigned)


__all__ = ["SkillsCoverageService"]
