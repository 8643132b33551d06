from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Dict, List

from core.models import AllocationStatus


@dataclass(frozen=True)
class ResourceUtilization:
    resource_id: str
    total: int
    is_over_allocated: bool
    threshold: int
    status: AllocationStatus
    current: int = 0


@dataclass(frozen=True)
class CapacityCell:
    week_start: date
    utilization: int
    available_hours: float

    @property
    def display_hours(self) -> float:
        return max(0.0, self.available_hours)


@dataclass(frozen=True)
class ResourceCapacityRow:
    resource_id: str
    resource_name: str
    capacity_hours: float
    cells: List[CapacityCell] = field(default_factory=list)


@dataclass(frozen=True)
class CapacityForecast:
    start_date: date
    weeks: List[date]
    rows: List[ResourceCapacityRow]


@dataclass(frozen=True)
class MonthlyForecastRow:
    resource_id: str
    resource_name: str
    by_month: Dict[str, int]


@dataclass(frozen=True)
class MonthlyForecast:
    start_date: date
    months: List[str]
    rows: List[MonthlyForecastRow]


__all__ = [
    "ResourceUtilization",
    "CapacityCell",
    "ResourceCapacityRow",
    "CapacityForecast",
    "MonthlyForecastRow",
    "MonthlyForecast",
]
