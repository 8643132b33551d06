from __future__ import annotations

import logging
from datetime import date
from typing import List

from sqlalchemy.orm import Session

from core.events.domain_events import domain_events
from core.exceptions import ConcurrencyError, NotFoundError, ValidationError
from core.interfaces import AllocationRepository, ProjectRepository
from core.models import Project, ProjectStatus, RequiredRole, RequiredSkill
from core.services.project.validation import ProjectValidationMixin

logger = logging.getLogger(__name__)
DEFAULT_CURRENCY_CODE = "EUR"


class ProjectLifecycleMixin(ProjectValidationMixin):
    _session: Session
    _project_repo: ProjectRepository
    _allocation_repo: AllocationRepository

    def create_project(
        self,
        name: str,
        description: str = "",
        client_name: str | None = None,
        planned_budget: float | None = None,
        currency: str | None = None,
        start_date: date | None = None,
        end_date: date | None = None,
        status: ProjectStatus = ProjectStatus.PLANNED,
        required_skills: List[RequiredSkill] | None = None,
        required_roles: List[RequiredRole] | None = None,
    ) -> Project:
        self._validate_project_name(name)
        self._validate_project_window(start_date, end_date)
        if planned_budget is not None and planned_budget < 0:
            raise ValidationError("Planned budget cannot be negative.", code="BUDGET_NEGATIVE")
        resolved_currency = (currency or "").strip().upper() or DEFAULT_CURRENCY_CODE
        project = Project.create(
            name=name.strip(),
            description=description.strip(),
            client_name=(client_name or "").strip() or None,
            planned_budget=planned_budget,
            currency=resolved_currency,
            start_date=start_date,
            end_date=end_date,
            status=status,
            required_skills=self._clean_required_skills(required_skills),
            required_roles=self._clean_required_roles(required_roles),
        )

        try:
            self._project_repo.add(project)
            self._session.commit()
            logger.info("Created project %s - %s", project.id, project.name)
        except Exception as e:
            self._session.rollback()
            logger.error("Error creating project: %s", e)
            raise
        domain_events.project_changed.emit(project.id)
        return project

    def update_project(
        self,
        project_id: str,
        expected_version: int | None = None,
        name: str | None = None,
        description: str | None = None,
        status: ProjectStatus | None = None,
        start_date: date | None = None,
        end_date: date | None = None,
        client_name: str | None = None,
        planned_budget: float | None = None,
        currency: str | None = None,
        required_skills: List[RequiredSkill] | None = None,
        required_roles: List[RequiredRole] | None = None,
    ) -> Project:
        project = self._project_repo.get(project_id)
        if not project:
            raise NotFoundError("Project not found.", code="PROJECT_NOT_FOUND")
        if expected_version is not None and project.version != expected_version:
            raise ConcurrencyError(
                "Project changed since you opened it. Refresh and try again.",
                code="STALE_WRITE",
            )

        if name is not None:
            self._validate_project_name(name, exclude_id=project.id)
            project.name = name.strip()
        if description is not None:
            project.description = description.strip()
        if status is not None:
            project.status = status
        if start_date is not None:
            project.start_date = start_date
        if end_date is not None:
            project.end_date = end_date
        self._validate_project_window(project.start_date, project.end_date)
        if client_name is not None:
            project.client_name = client_name.strip() or None
        if planned_budget is not None:
            if planned_budget < 0:
                raise ValidationError("Planned budget cannot be negative.", code="BUDGET_NEGATIVE")
            project.planned_budget = planned_budget
        if currency is not None:
            project.currency = currency.strip().upper() or None
        if required_skills is not None:
            project.required_skills = self._clean_required_skills(required_skills)
        if required_roles is not None:
            project.required_roles = self._clean_required_roles(required_roles)

        try:
            self._project_repo.update(project)
            self._session.commit()
        except Exception:
            self._session.rollback()
            raise

        domain_events.project_changed.emit(project_id)
        return project

    def delete_project(self, project_id: str) -> None:
        project = self._project_repo.get(project_id)
        if not project:
            raise NotFoundError("Project not found.", code="PROJECT_NOT_FOUND")

        try:
            for alloc in self._allocation_repo.list_by_project(project_id):
                self._allocation_repo.delete(alloc.id)
            self._project_repo.delete(project_id)
            self._session.commit()
            logger.info("Deleted project %s - %s", project.id, project.name)
        except Exception:
            self._session.rollback()
            raise

        domain_events.project_changed.emit(project_id)


__all__ = ["ProjectLifecycleMixin", "DEFAULT_CURRENCY_CODE"]
