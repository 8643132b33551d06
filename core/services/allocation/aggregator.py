from __future__ import annotations

from datetime import date, timedelta
from typing import Dict, List, Optional

from core.models import Allocation, AllocationStatus, Resource, reconcile_allocations
from core.services.common.temporal import contains, iter_months, working_days_between


def effective_allocations(resource: Resource) -> List[Allocation]:
    """Unique, non-empty allocations of a resource in list order."""
    return reconcile_allocations(resource.allocations)


def total_utilization(resource: Resource, as_of: Optional[date] = None) -> int:
    """
    Sum of utilization percentages held by the resource.

    Without ``as_of`` this is the lifetime sum over every allocation, which is
    what over-allocation checks use. With ``as_of`` only allocations whose
    inclusive window contains the day count.
    """
    total = 0
    for alloc in effective_allocations(resource):
        if as_of is not None and not contains(alloc.start_date, alloc.end_date, as_of):
            continue
        total += int(alloc.utilization or 0)
    return total


def is_over_allocated(resource: Resource, threshold: int = 100) -> bool:
    return total_utilization(resource) > threshold


def availability(resource: Resource, week_start: date, capacity_hours_per_week: float) -> float:
    # negative values mean over-commitment and are kept as-is
    used = total_utilization(resource, week_start)
    return float(capacity_hours_per_week) * (1 - used / 100.0)


def display_hours(value: float) -> float:
    return max(0.0, float(value))


def allocation_status(
    resource: Resource,
    today: date,
    threshold: int = 100,
    ending_soon_days: int = 14,
) -> AllocationStatus:
    current = total_utilization(resource, today)
    if current > threshold:
        return AllocationStatus.OVER_ALLOCATED
    if current < threshold:
        return AllocationStatus.AVAILABLE

    horizon = today + timedelta(days=max(0, int(ending_soon_days)))
    for alloc in effective_allocations(resource):
        if contains(alloc.start_date, alloc.end_date, today) and alloc.end_date <= horizon:
            return AllocationStatus.ENDING_SOON
    return AllocationStatus.FULLY_ALLOCATED


def utilization_by_month(resource: Resource, start: date, months: int) -> Dict[str, int]:
    out: Dict[str, int] = {}
    for key, m_start, _m_end in iter_months(start, months):
        out[key] = total_utilization(resource, m_start.replace(day=15))
    return out


def allocation_hours(allocation: Allocation, hours_per_day: float = 8.0) -> float:
    if allocation.total_hours is not None:
        return float(allocation.total_hours)
    days = working_days_between(allocation.start_date, allocation.end_date)
    return days * float(hours_per_day) * int(allocation.utilization or 0) / 100.0


__all__ = [
    "effective_allocations",
    "total_utilization",
    "is_over_allocated",
    "availability",
    "display_hours",
    "allocation_status",
    "utilization_by_month",
    "allocation_hours",
]
