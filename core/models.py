# core/models.py
# Flat import surface for the domain package; infra and services import from here.
from __future__ import annotations

from core.domain import (
    Allocation,
    AllocationShare,
    AllocationStatus,
    CostMetrics,
    MetricsSnapshot,
    ProficiencyLevel,
    Project,
    ProjectCostRow,
    ProjectStatus,
    ProjectTimelineChange,
    RequiredRole,
    RequiredSkill,
    Resource,
    ResourceChange,
    ResourceSkill,
    ResourceUtilizationRow,
    RoleCoverage,
    Scenario,
    ScenarioStatus,
    SkillsCoverage,
    SystemConfig,
    UtilizationMetrics,
    generate_id,
    reconcile_allocations,
)

__all__ = [
    "generate_id",
    "ProjectStatus",
    "ScenarioStatus",
    "AllocationStatus",
    "ProficiencyLevel",
    "Allocation",
    "Resource",
    "ResourceSkill",
    "reconcile_allocations",
    "Project",
    "RequiredSkill",
    "RequiredRole",
    "Scenario",
    "ResourceChange",
    "ProjectTimelineChange",
    "AllocationShare",
    "ResourceUtilizationRow",
    "UtilizationMetrics",
    "ProjectCostRow",
    "CostMetrics",
    "RoleCoverage",
    "SkillsCoverage",
    "MetricsSnapshot",
    "SystemConfig",
]
