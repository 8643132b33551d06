from .models import (
    CostComparisonRow,
    EffectiveDataset,
    LiveDataset,
    PromotionConflict,
    PromotionResult,
    ScenarioComparison,
    ScenarioMetrics,
    ScenarioSummary,
    SkillsComparisonRow,
    UtilizationComparisonRow,
)
from .promotion import PromotionCoordinator
from .service import ScenarioService

__all__ = [
    "ScenarioService",
    "PromotionCoordinator",
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
