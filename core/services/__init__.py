from .allocation import AllocationService, CapacityForecast, MonthlyForecast, ResourceUtilization
from .finance import FinancialService, ProjectFinancials, ResourceFinancials
from .project.service import ProjectService
from .resource.service import ResourceService
from .scenario import (
    PromotionCoordinator,
    PromotionResult,
    ScenarioComparison,
    ScenarioMetrics,
    ScenarioService,
)
from .settings import SettingsService
from .skills import SkillsCoverageService

__all__ = [
    "AllocationService",
    "ResourceUtilization",
    "CapacityForecast",
    "MonthlyForecast",
    "FinancialService",
    "ProjectFinancials",
    "ResourceFinancials",
    "ProjectService",
    "ResourceService",
    "ScenarioService",
    "PromotionCoordinator",
    "PromotionResult",
    "ScenarioComparison",
    "ScenarioMetrics",
    "SettingsService",
    "SkillsCoverageService",
]
