from __future__ import annotations

from typing import Any

from core.models import ProficiencyLevel, Resource, ResourceSkill
from infra.db.allocation.mapper import allocation_from_orm
from infra.db.models import ResourceORM
from infra.db.serialization import from_json_list, to_json


def skills_to_json(skills: list[ResourceSkill]) -> str:
    return to_json(
        [
            {
                "name": skill.name,
                "proficiency": skill.proficiency.value if skill.proficiency else None,
            }
            for skill in skills
        ]
    )


def skills_from_json(raw: str | None) -> list[ResourceSkill]:
    skills: list[ResourceSkill] = []
    for item in from_json_list(raw):
        if isinstance(item, str):
            skills.append(ResourceSkill(name=item))
            continue
        if not isinstance(item, dict) or not item.get("name"):
            continue
        level: Any = item.get("proficiency")
        skills.append(
            ResourceSkill(
                name=str(item["name"]),
                proficiency=ProficiencyLevel(level) if level else None,
            )
        )
    return skills


def resource_to_orm(resource: Resource) -> ResourceORM:
    # allocations live in their own table and are written by the allocation repository
    return ResourceORM(
        id=resource.id,
        name=resource.name,
        role=resource.role,
        hourly_rate=resource.hourly_rate,
        billable_rate=resource.billable_rate,
        currency_code=resource.currency_code,
        weekly_capacity_hours=resource.weekly_capacity_hours,
        skills_json=skills_to_json(resource.skills),
        is_active=resource.is_active,
        version=getattr(resource, "version", 1),
    )


def resource_from_orm(obj: ResourceORM) -> Resource:
    return Resource(
        id=obj.id,
        name=obj.name,
        role=obj.role or "",
        skills=skills_from_json(obj.skills_json),
        hourly_rate=float(obj.hourly_rate or 0.0),
        billable_rate=float(obj.billable_rate or 0.0),
        currency_code=obj.currency_code,
        weekly_capacity_hours=obj.weekly_capacity_hours,
        is_active=bool(obj.is_active),
        allocations=[allocation_from_orm(row) for row in obj.allocations],
        version=getattr(obj, "version", 1),
    )


__all__ = ["resource_to_orm", "resource_from_orm", "skills_to_json", "skills_from_json"]
