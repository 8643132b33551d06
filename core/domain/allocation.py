from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional

from core.domain.identifiers import generate_id


@dataclass
class Allocation:
    id: str
    resource_id: str
    project_id: str
    start_date: date
    end_date: date
    utilization: int = 100
    hourly_rate: Optional[float] = None  # overrides Resource hourly_rate if set
    billable_rate: Optional[float] = None  # overrides Resource billable_rate if set
    total_hours: Optional[float] = None
    notes: str = ""
    version: int = 1

    @staticmethod
    def create(
        resource_id: str,
        project_id: str,
        start_date: date,
        end_date: date,
        utilization: int = 100,
        hourly_rate: Optional[float] = None,
        billable_rate: Optional[float] = None,
        total_hours: Optional[float] = None,
        notes: str = "",
    ) -> "Allocation":
        return Allocation(
            id=generate_id(),
            resource_id=resource_id,
            project_id=project_id,
            start_date=start_date,
            end_date=end_date,
            utilization=utilization,
            hourly_rate=hourly_rate,
            billable_rate=billable_rate,
            total_hours=total_hours,
            notes=notes,
        )


__all__ = ["Allocation"]
