from __future__ import annotations

from datetime import date
from typing import Optional

from core.exceptions import NotFoundError, ValidationError
from core.interfaces import ProjectRepository, ResourceRepository
from core.models import Project, Resource, SystemConfig


class AllocationValidationMixin:
    _resource_repo: ResourceRepository
    _project_repo: ProjectRepository

    def _require_resource(self, resource_id: str) -> Resource:
        resource = self._resource_repo.get(resource_id)
        if not resource:
            raise NotFoundError("Resource not found.", code="RESOURCE_NOT_FOUND")
        return resource

    def _require_project(self, project_id: str) -> Project:
        project = self._project_repo.get(project_id)
        if not project:
            raise NotFoundError("Project not found.", code="PROJECT_NOT_FOUND")
        return project

    def _validate_window(self, start_date: Optional[date], end_date: Optional[date]) -> None:
        if start_date is None or end_date is None:
            raise ValidationError("Allocation start and end dates are required.", code="ALLOCATION_DATES_REQUIRED")
        if end_date < start_date:
            raise ValidationError("Allocation end date cannot be before start date.", code="ALLOCATION_END_BEFORE_START")

    def _validate_utilization(self, utilization, config: SystemConfig) -> int:
        if isinstance(utilization, bool) or not isinstance(utilization, int):
            raise ValidationError("Utilization must be a whole percentage.", code="UTILIZATION_NOT_INTEGER")
        upper = config.utilization_upper_bound
        if utilization < 1 or utilization > upper:
            raise ValidationError(
                f"Utilization must be between 1 and {upper}.",
                code="UTILIZATION_OUT_OF_RANGE",
            )
        return utilization

    def _validate_amounts(
        self,
        hourly_rate: Optional[float],
        billable_rate: Optional[float],
        total_hours: Optional[float],
    ) -> None:
        if hourly_rate is not None and hourly_rate < 0:
            raise ValidationError("Hourly rate cannot be negative.", code="RATE_NEGATIVE")
        if billable_rate is not None and billable_rate < 0:
            raise ValidationError("Billable rate cannot be negative.", code="RATE_NEGATIVE")
        if total_hours is not None and total_hours < 0:
            raise ValidationError("Total hours cannot be negative.", code="HOURS_NEGATIVE")


__all__ = ["AllocationValidationMixin"]
