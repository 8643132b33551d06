from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List, Optional

from core.domain.allocation import Allocation
from core.domain.enums import ProficiencyLevel
from core.domain.identifiers import generate_id


@dataclass
class ResourceSkill:
    name: str
    proficiency: Optional[ProficiencyLevel] = None


def reconcile_allocations(
    allocations: Iterable[Optional[Allocation]] | None,
    legacy_allocation: Optional[Allocation] = None,
) -> List[Allocation]:
    """
    Merge the list representation and the legacy single-slot field into one list.

    The list wins; the legacy slot is only appended when its id is not already
    present. Empty slots are dropped and ids are de-duplicated (first one kept).
    """
    merged: List[Allocation] = []
    seen: set[str] = set()
    for alloc in list(allocations or []) + [legacy_allocation]:
        if alloc is None or alloc.id in seen:
            continue
        seen.add(alloc.id)
        merged.append(alloc)
    return merged


@dataclass
class Resource:
    id: str
    name: str
    role: str = ""
    skills: List[ResourceSkill] = field(default_factory=list)
    hourly_rate: float = 0.0
    billable_rate: float = 0.0
    currency_code: Optional[str] = None
    weekly_capacity_hours: Optional[float] = None
    is_active: bool = True
    allocations: List[Allocation] = field(default_factory=list)
    version: int = 1

    @property
    def allocation(self) -> Optional[Allocation]:
        # legacy single-slot reader
        return self.allocations[0] if self.allocations else None

    def has_skill(self, name: str) -> bool:
        key = (name or "").strip().lower()
        return any(s.name.strip().lower() == key for s in self.skills)

    @staticmethod
    def create(
        name: str,
        role: str = "",
        skills: Optional[List[ResourceSkill]] = None,
        hourly_rate: float = 0.0,
        billable_rate: float = 0.0,
        currency_code: Optional[str] = None,
        weekly_capacity_hours: Optional[float] = None,
        is_active: bool = True,
        allocations: Optional[List[Allocation]] = None,
        allocation: Optional[Allocation] = None,
    ) -> "Resource":
        return Resource(
            id=generate_id(),
            name=name,
            role=role,
            skills=list(skills or []),
            hourly_rate=hourly_rate,
            billable_rate=billable_rate,
            currency_code=currency_code,
            weekly_capacity_hours=weekly_capacity_hours,
            is_active=is_active,
            allocations=reconcile_allocations(allocations, allocation),
        )


__all__ = ["Resource", "ResourceSkill", "reconcile_allocations"]
