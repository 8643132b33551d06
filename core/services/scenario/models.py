from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Dict, List, Optional, Tuple

from core.exceptions import ConflictError
from core.models import (
    Allocation,
    MetricsSnapshot,
    Project,
    Resource,
    ScenarioStatus,
)


@dataclass(frozen=True)
class LiveDataset:
    """One read of live resources, projects and allocations. Treated as read-only."""

    resources: Tuple[Resource, ...]
    projects: Tuple[Project, ...]
    allocations: Tuple[Allocation, ...]


@dataclass(frozen=True)
class EffectiveDataset:
    scenario_id: str
    resources: List[Resource]
    projects: List[Project]
    allocations: List[Allocation]

    def resource(self, resource_id: str) -> Optional[Resource]:
        return next((r for r in self.resources if r.id == resource_id), None)

    def project(self, project_id: str) -> Optional[Project]:
        return next((p for p in self.projects if p.id == project_id), None)

    def allocation(self, allocation_id: str) -> Optional[Allocation]:
        return next((a for a in self.allocations if a.id == allocation_id), None)


@dataclass(frozen=True)
class ScenarioMetrics:
    scenario_id: str
    snapshot: Optional[MetricsSnapshot]
    is_stale: bool


@dataclass(frozen=True)
class ScenarioSummary:
    scenario_id: str
    name: str
    start_date: date
    end_date: date
    status: ScenarioStatus


@dataclass(frozen=True)
class UtilizationComparisonRow:
    scenario_id: str
    scenario_name: str
    overall: int
    resource_count: int
    over_allocated_count: int


@dataclass(frozen=True)
class CostComparisonRow:
    scenario_id: str
    scenario_name: str
    total_cost: float
    total_billable: float
    total_profit: float
    margin: float


@dataclass(frozen=True)
class SkillsComparisonRow:
    scenario_id: str
    scenario_name: str
    coverage_percentage: float
    covered_count: int
    missing: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class ScenarioComparison:
    scenarios: List[ScenarioSummary]
    metrics: List[str]
    start_date: date
    end_date: date
    by_metric: Dict[str, list] = field(default_factory=dict)


@dataclass(frozen=True)
class PromotionConflict:
    resource_id: str
    resource_name: str
    total_utilization: int
    threshold: int
    allocation_ids: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class PromotionResult:
    scenario_id: str
    status: ScenarioStatus
    conflicts: List[PromotionConflict] = field(default_factory=list)
    upserted_allocations: int = 0
    removed_allocations: int = 0
    updated_projects: int = 0

    @property
    def promoted(self) -> bool:
        return self.status == ScenarioStatus.PROMOTED

    def raise_for_conflicts(self) -> None:
        if not self.conflicts:
            return
        names = ", ".join(f"{c.resource_name} ({c.total_utilization}%)" for c in self.conflicts)
        raise ConflictError(
            f"Promotion would over-allocate: {names}.",
            conflicts=self.conflicts,
        )


__all__ = [
    "LiveDataset",
    "EffectiveDataset",
    "ScenarioMetrics",
    "ScenarioSummary",
    "UtilizationComparisonRow",
    "CostComparisonRow",
    "SkillsComparisonRow",
    "ScenarioComparison",
    "PromotionConflict",
    "PromotionResult",
]
