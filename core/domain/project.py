from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import List, Optional

from core.domain.enums import ProficiencyLevel, ProjectStatus
from core.domain.identifiers import generate_id


@dataclass
class RequiredSkill:
    name: str
    min_proficiency: Optional[ProficiencyLevel] = None


@dataclass
class RequiredRole:
    name: str
    count: int = 1


@dataclass
class Project:
    id: str
    name: str
    description: str = ""
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    status: ProjectStatus = ProjectStatus.PLANNED
    client_name: Optional[str] = None
    planned_budget: Optional[float] = None
    currency: Optional[str] = None
    required_skills: List[RequiredSkill] = field(default_factory=list)
    required_roles: List[RequiredRole] = field(default_factory=list)
    version: int = 1

    @staticmethod
    def create(name: str, description: str = "", **extra) -> "Project":
        return Project(
            id=generate_id(),
            name=name,
            description=description,
            **extra,
        )


__all__ = ["Project", "RequiredSkill", "RequiredRole"]
