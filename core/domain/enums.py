from __future__ import annotations

from enum import Enum


class ProjectStatus(str, Enum):
    PLANNED = "PLANNED"
    ACTIVE = "ACTIVE"
    ON_HOLD = "ON_HOLD"
    COMPLETED = "COMPLETED"


class ScenarioStatus(str, Enum):
    DRAFT = "DRAFT"
    PROMOTED = "PROMOTED"
    REJECTED = "REJECTED"


class AllocationStatus(str, Enum):
    AVAILABLE = "AVAILABLE"
    ENDING_SOON = "ENDING_SOON"
    FULLY_ALLOCATED = "FULLY_ALLOCATED"
    OVER_ALLOCATED = "OVER_ALLOCATED"


class ProficiencyLevel(str, Enum):
    BEGINNER = "BEGINNER"
    INTERMEDIATE = "INTERMEDIATE"
    ADVANCED = "ADVANCED"
    EXPERT = "EXPERT"

    @property
    def rank(self) -> int:
        return _PROFICIENCY_ORDER.index(self)


_PROFICIENCY_ORDER = [
    ProficiencyLevel.BEGINNER,
    ProficiencyLevel.INTERMEDIATE,
    ProficiencyLevel.ADVANCED,
    ProficiencyLevel.EXPERT,
]


__all__ = ["ProjectStatus", "ScenarioStatus", "AllocationStatus", "ProficiencyLevel"]
