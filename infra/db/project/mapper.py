from __future__ import annotations

from core.models import ProficiencyLevel, Project, ProjectStatus, RequiredRole, RequiredSkill
from infra.db.models import ProjectORM
from infra.db.serialization import from_json_list, to_json


def required_skills_to_json(skills: list[RequiredSkill]) -> str:
    return to_json(
        [
            {
                "name": skill.name,
                "min_proficiency": skill.min_proficiency.value if skill.min_proficiency else None,
            }
            for skill in skills
        ]
    )


def required_skills_from_json(raw: str | None) -> list[RequiredSkill]:
    out: list[RequiredSkill] = []
    for item in from_json_list(raw):
        if isinstance(item, str):
            out.append(RequiredSkill(name=item))
        elif isinstance(item, dict) and item.get("name"):
            level = item.get("min_proficiency")
            out.append(
                RequiredSkill(
                    name=str(item["name"]),
                    min_proficiency=ProficiencyLevel(level) if level else None,
                )
            )
    return out


def required_roles_to_json(roles: list[RequiredRole]) -> str:
    return to_json([{"name": role.name, "count": int(role.count)} for role in roles])


def required_roles_from_json(raw: str | None) -> list[RequiredRole]:
    out: list[RequiredRole] = []
    for item in from_json_list(raw):
        if isinstance(item, dict) and item.get("name"):
            out.append(RequiredRole(name=str(item["name"]), count=int(item.get("count") or 1)))
    return out


def project_to_orm(project: Project) -> ProjectORM:
    return ProjectORM(
        id=project.id,
        name=project.name,
        description=project.description,
        start_date=project.start_date,
        end_date=project.end_date,
        status=project.status,
        client_name=project.client_name,
        planned_budget=project.planned_budget,
        currency=project.currency,
        required_skills_json=required_skills_to_json(project.required_skills),
        required_roles_json=required_roles_to_json(project.required_roles),
        version=getattr(project, "version", 1),
    )


def project_from_orm(obj: ProjectORM) -> Project:
    return Project(
        id=obj.id,
        name=obj.name,
        description=obj.description or "",
        start_date=obj.start_date,
        end_date=obj.end_date,
        status=obj.status or ProjectStatus.PLANNED,
        client_name=obj.client_name,
        planned_budget=obj.planned_budget,
        currency=obj.currency,
        required_skills=required_skills_from_json(obj.required_skills_json),
        required_roles=required_roles_from_json(obj.required_roles_json),
        version=getattr(obj, "version", 1),
    )


__all__ = [
    "project_to_orm",
    "project_from_orm",
    "required_skills_to_json",
    "required_roles_to_json",
]
