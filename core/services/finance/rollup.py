"""
Cost, billable and profit arithmetic over allocations.

All functions are pure. Amounts carry the currency code of the resource
(falling back to the project's); currencies are never converted, so a rollup
spanning several codes is summed as-is and flagged ``mixed_currency``.
"""
from __future__ import annotations

from typing import Dict, Iterable, List, Optional

from core.models import (
    Allocation,
    CostMetrics,
    Project,
    ProjectCostRow,
    Resource,
)
from core.services.allocation.aggregator import allocation_hours, effective_allocations
from core.services.finance.helpers import (
    is_mixed_currency,
    normalize_currency,
    percentage,
    resolve_rate,
)
from core.services.finance.models import (
    AllocationFinancials,
    ProjectFinancials,
    ResourceFinancials,
)


def allocation_financials(
    allocation: Allocation,
    resource: Optional[Resource],
    *,
    hours_per_day: float = 8.0,
    project_currency: str | None = None,
) -> AllocationFinancials:
    hours = allocation_hours(allocation, hours_per_day)
    hourly_rate = resolve_rate(
        allocation_rate=allocation.hourly_rate,
        resource_rate=getattr(resource, "hourly_rate", None),
    )
    billable_rate = resolve_rate(
        allocation_rate=allocation.billable_rate,
        resource_rate=getattr(resource, "billable_rate", None),
    )
    cost = hourly_rate * hours
    billable = billable_rate * hours
    profit = billable - cost
    return AllocationFinancials(
        allocation_id=allocation.id,
        resource_id=allocation.resource_id,
        project_id=allocation.project_id,
        hours=hours,
        hourly_rate=hourly_rate,
        billable_rate=billable_rate,
        cost=cost,
        billable=billable,
        profit=profit,
        margin=percentage(profit, billable),
        currency=normalize_currency(getattr(resource, "currency_code", None), project_currency),
    )


def resource_financials(resource: Resource, *, hours_per_day: float = 8.0) -> ResourceFinancials:
    rows = [
        allocation_financials(a, resource, hours_per_day=hours_per_day)
        for a in effective_allocations(resource)
    ]
    hourly = float(resource.hourly_rate or 0.0)
    billable_rate = float(resource.billable_rate or 0.0)
    markup = (billable_rate / hourly - 1) * 100.0 if hourly else 0.0
    return ResourceFinancials(
        resource_id=resource.id,
        resource_name=resource.name,
        total_cost=sum(r.cost for r in rows),
        total_billable=sum(r.billable for r in rows),
        profit=sum(r.profit for r in rows),
        markup=markup,
        currency=normalize_currency(resource.currency_code, None),
        mixed_currency=False,
        allocations=rows,
    )


def project_financials(
    project: Project,
    resources: Iterable[Resource],
    *,
    hours_per_day: float = 8.0,
) -> ProjectFinancials:
    rows: List[AllocationFinancials] = []
    for resource in resources:
        for alloc in effective_allocations(resource):
            if alloc.project_id != project.id:
                continue
            rows.append(
                allocation_financials(
                    alloc,
                    resource,
                    hours_per_day=hours_per_day,
                    project_currency=project.currency,
                )
            )

    actual_cost = sum(r.cost for r in rows)
    total_billable = sum(r.billable for r in rows)
    profit = total_billable - actual_cost
    budget = float(project.planned_budget) if project.planned_budget is not None else None
    currency = normalize_currency(project.currency, rows[0].currency if rows else None)
    return ProjectFinancials(
        project_id=project.id,
        project_name=project.name,
        budget=budget,
        actual_cost=actual_cost,
        total_billable=total_billable,
        profit=profit,
        margin=percentage(profit, total_billable),
        budget_utilization=percentage(actual_cost, budget or 0.0),
        variance=(budget - actual_cost) if budget is not None else None,
        currency=currency,
        mixed_currency=is_mixed_currency([currency] + [r.currency for r in rows]),
        allocations=rows,
    )


def cost_metrics(
    projects: Iterable[Project],
    resources: Iterable[Resource],
    *,
    hours_per_day: float = 8.0,
) -> CostMetrics:
    """Totals across every allocation, with one row per project that holds any."""
    resources = list(resources)
    by_project: Dict[str, ProjectCostRow] = {}
    for project in projects:
        pf = project_financials(project, resources, hours_per_day=hours_per_day)
        if not pf.allocations:
            continue
        by_project[project.id] = ProjectCostRow(
            project_id=pf.project_id,
            project_name=pf.project_name,
            total_cost=pf.actual_cost,
            total_billable=pf.total_billable,
            profit=pf.profit,
            margin=pf.margin,
            currency=pf.currency,
        )

    total_cost = 0.0
    total_billable = 0.0
    for resource in resources:
        for alloc in effective_allocations(resource):
            row = allocation_financials(alloc, resource, hours_per_day=hours_per_day)
            total_cost += row.cost
            total_billable += row.billable
    total_profit = total_billable - total_cost
    return CostMetrics(
        total_cost=total_cost,
        total_billable=total_billable,
        total_profit=total_profit,
        margin=percentage(total_profit, total_billable),
        by_project=by_project,
    )


__all__ = [
    "allocation_financials",
    "resource_financials",
    "project_financials",
    "cost_metrics",
]
