from __future__ import annotations

from datetime import date
from typing import Iterable, List

from core.exceptions import ValidationError
from core.interfaces import ProjectRepository
from core.models import RequiredRole, RequiredSkill


class ProjectValidationMixin:
    _project_repo: ProjectRepository

    def _validate_project_name(self, name: str, *, exclude_id: str | None = None) -> None:
        if not name or not name.strip():
            raise ValidationError("Project name cannot be empty.", code="PROJECT_NAME_EMPTY")
        if len(name.strip()) < 3:
            raise ValidationError("Project name must be at least 3 characters.", code="PROJECT_NAME_TOO_SHORT")

        for project in self._project_repo.list_all():
            if project.id == exclude_id:
                continue
            if project.name.strip().lower() == name.strip().lower():
                raise ValidationError("A project with this name already exists.", code="PROJECT_NAME_DUPLICATE")

    def _validate_project_window(self, start_date: date | None, end_date: date | None) -> None:
        if start_date and end_date and end_date < start_date:
            raise ValidationError("Project end date cannot be before start date.", code="PROJECT_END_BEFORE_START")

    def _clean_required_skills(self, skills: Iterable[RequiredSkill] | None) -> List[RequiredSkill]:
        out: List[RequiredSkill] = []
        for skill in skills or []:
            name = (skill.name or "").strip()
            if not name:
                raise ValidationError("Required skill name cannot be empty.", code="SKILL_NAME_EMPTY")
            out.append(RequiredSkill(name=name, min_proficiency=skill.min_proficiency))
        return out

    def _clean_required_roles(self, roles: Iterable[RequiredRole] | None) -> List[RequiredRole]:
        out: List[RequiredRole] = []
        for role in roles or []:
            name = (role.name or "").strip()
            if not name:
                raise ValidationError("Required role name cannot be empty.", code="ROLE_NAME_EMPTY")
            if int(role.count) < 1:
                raise ValidationError("Required role headcount must be at least 1.", code="ROLE_COUNT_INVALID")
            out.append(RequiredRole(name=name, count=int(role.count)))
        return out


__all__ = ["ProjectValidationMixin"]
