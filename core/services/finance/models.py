from __future__ import annotations

from dataclasses import dataclass, field
from typing import List


@dataclass(frozen=True)
class AllocationFinancials:
    allocation_id: str
    resource_id: str
    project_id: str
    hours: float
    hourly_rate: float
    billable_rate: float
    cost: float
    billable: float
    profit: float
    margin: float
    currency: str


@dataclass(frozen=True)
class ResourceFinancials:
    resource_id: str
    resource_name: str
    total_cost: float
    total_billable: float
    profit: float
    markup: float
    currency: str
    mixed_currency: bool = False
    allocations: List[AllocationFinancials] = field(default_factory=list)


@dataclass(frozen=True)
class ProjectFinancials:
    project_id: str
    project_name: str
    budget: float | None
    actual_cost: float
    total_billable: float
    profit: float
    margin: float
    budget_utilization: float
    variance: float | None
    currency: str
    mixed_currency: bool = False
    allocations: List[AllocationFinancials] = field(default_factory=list)


__all__ = ["AllocationFinancials", "ResourceFinancials", "ProjectFinancials"]
