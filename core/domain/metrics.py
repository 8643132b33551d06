from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Optional


@dataclass(frozen=True)
class AllocationShare:
    allocation_id: str
    project_id: str
    project_name: str
    utilization: int


@dataclass(frozen=True)
class ResourceUtilizationRow:
    resource_id: str
    resource_name: str
    total_utilization: int
    is_over_allocated: bool
    allocations: List[AllocationShare] = field(default_factory=list)


@dataclass(frozen=True)
class UtilizationMetrics:
    overall: int
    resource_count: int
    by_resource: Dict[str, ResourceUtilizationRow] = field(default_factory=dict)


@dataclass(frozen=True)
class ProjectCostRow:
    project_id: str
    project_name: str
    total_cost: float
    total_billable: float
    profit: float
    margin: float
    currency: Optional[str] = None


@dataclass(frozen=True)
class CostMetrics:
    total_cost: float
    total_billable: float
    total_profit: float
    margin: float
    by_project: Dict[str, ProjectCostRow] = field(default_factory=dict)


@dataclass(frozen=True)
class RoleCoverage:
    role: str
    required: int
    assigned: int
    fulfilled: bool
    gap: int


@dataclass(frozen=True)
class SkillsCoverage:
    coverage_percentage: float
    covered: List[str] = field(default_factory=list)
    missing: List[str] = field(default_factory=list)
    roles: List[RoleCoverage] = field(default_factory=list)


@dataclass(frozen=True)
class MetricsSnapshot:
    """Derived figures for one scenario at one change-list version. Never mutated."""

    utilization: UtilizationMetrics
    costs: CostMetrics
    skills_coverage: SkillsCoverage
    change_version: int
    calculated_at: datetime
    skills_by_project: Dict[str, SkillsCoverage] = field(default_factory=dict)


__all__ = [
    "AllocationShare",
    "ResourceUtilizationRow",
    "UtilizationMetrics",
    "ProjectCostRow",
    "CostMetrics",
    "RoleCoverage",
    "SkillsCoverage",
    "MetricsSnapshot",
]
