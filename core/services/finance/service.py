from __future__ import annotations

from typing import List

from core.exceptions import NotFoundError
from core.interfaces import ProjectRepository, ResourceRepository
from core.services.finance.models import ProjectFinancials, ResourceFinancials
from core.services.finance.rollup import project_financials, resource_financials
from core.services.settings.service import SettingsService


class FinancialService:
    """Read-only financial rollups over live allocations."""

    def __init__(
        self,
        *,
        project_repo: ProjectRepository,
        resource_repo: ResourceRepository,
        settings_service: SettingsService,
    ) -> None:
        self._project_repo: ProjectRepository = project_repo
        self._resource_repo: ResourceRepository = resource_repo
        self._settings_service: SettingsService = settings_service

    def get_project_financials(self, project_id: str) -> ProjectFinancials:
        project = self._project_repo.get(project_id)
        if project is None:
            raise NotFoundError("Project not found.", code="PROJECT_NOT_FOUND")
        config = self._settings_service.get_system_config()
        return project_financials(
            project,
            self._resource_repo.list_all(),
            hours_per_day=config.hours_per_day,
        )

    def get_resource_financials(self, resource_id: str) -> ResourceFinancials:
        resource = self._resource_repo.get(resource_id)
        if resource is None:
            raise NotFoundError("Resource not found.", code="RESOURCE_NOT_FOUND")
        config = self._settings_service.get_system_config()
        return resource_financials(resource, hours_per_day=config.hours_per_day)

    def list_project_financials(self) -> List[ProjectFinancials]:
        config = self._settings_service.get_system_config()
        resources = self._resource_repo.list_all()
        return [
            project_financials(p, resources, hours_per_day=config.hours_per_day)
            for p in self._project_repo.list_all()
        ]


__all__ = ["FinancialService"]
