from core.domain.allocation import Allocation
from core.domain.enums import AllocationStatus, ProficiencyLevel, ProjectStatus, ScenarioStatus
from core.domain.identifiers import generate_id
from core.domain.metrics import (
    AllocationShare,
    CostMetrics,
    MetricsSnapshot,
    ProjectCostRow,
    ResourceUtilizationRow,
    RoleCoverage,
    SkillsCoverage,
    UtilizationMetrics,
)
from core.domain.project import Project, RequiredRole, RequiredSkill
from core.domain.resource import Resource, ResourceSkill, reconcile_allocations
from core.domain.scenario import ProjectTimelineChange, ResourceChange, Scenario
from core.domain.settings import SystemConfig

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
