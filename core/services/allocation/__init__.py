from .models import (
    CapacityCell,
    CapacityForecast,
    MonthlyForecast,
    MonthlyForecastRow,
    ResourceCapacityRow,
    ResourceUtilization,
)
from .service import AllocationService

__all__ = [
    "AllocationService",
    "ResourceUtilization",
    "CapacityCell",
    "ResourceCapacityRow",
    "CapacityForecast",
    "MonthlyForecastRow",
    "MonthlyForecast",
]
