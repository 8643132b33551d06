from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class SystemConfig:
    max_utilization_percentage: int = 100
    allow_overallocation: bool = False
    default_allocation_percentage: int = 100
    ending_soon_days: int = 14
    hours_per_day: float = 8.0
    default_weekly_capacity_hours: float = 40.0

    @property
    def utilization_upper_bound(self) -> int:
        """Largest utilization a single allocation may carry."""
        return max(100, int(self.max_utilization_percentage))


__all__ = ["SystemConfig"]
