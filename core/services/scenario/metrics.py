from __future__ import annotations

from datetime import datetime, timezone
from typing import Dict, Optional

from core.models import (
    AllocationShare,
    MetricsSnapshot,
    ResourceUtilizationRow,
    Scenario,
    SystemConfig,
    UtilizationMetrics,
)
from core.services.allocation.aggregator import effective_allocations, total_utilization
from core.services.finance.rollup import cost_metrics
from core.services.scenario.models import EffectiveDataset, LiveDataset
from core.services.scenario.overlay import resolve
from core.services.skills.coverage import analyze_portfolio_coverage


def utilization_metrics(dataset: EffectiveDataset, threshold: int) -> UtilizationMetrics:
    project_names = {p.id: p.name for p in dataset.projects}
    by_resource: Dict[str, ResourceUtilizationRow] = {}
    for resource in dataset.resources:
        allocations = effective_allocations(resource)
        if not allocations:
            continue
        total = total_utilization(resource)
        by_resource[resource.id] = ResourceUtilizationRow(
            resource_id=resource.id,
            resource_name=resource.name,
            total_utilization=total,
            is_over_allocated=total > threshold,
            allocations=[
                AllocationShare(
                    allocation_id=a.id,
                    project_id=a.project_id,
                    project_name=project_names.get(a.project_id, a.project_id),
                    utilization=int(a.utilization or 0),
                )
                for a in allocations
            ],
        )
    totals = [row.total_utilization for row in by_resource.values()]
    overall = round(sum(totals) / len(totals)) if totals else 0
    return UtilizationMetrics(overall=overall, resource_count=len(totals), by_resource=by_resource)


def compute_snapshot(
    dataset: EffectiveDataset,
    config: SystemConfig,
    change_version: int,
    calculated_at: Optional[datetime] = None,
) -> MetricsSnapshot:
    overall_skills, per_project = analyze_portfolio_coverage(dataset.projects, dataset.resources)
    return MetricsSnapshot(
        utilization=utilization_metrics(dataset, int(config.max_utilization_percentage)),
        costs=cost_metrics(dataset.projects, dataset.resources, hours_per_day=config.hours_per_day),
        skills_coverage=overall_skills,
        change_version=change_version,
        calculated_at=calculated_at or datetime.now(timezone.utc),
        skills_by_project=per_project,
    )


def snapshot_for(scenario: Scenario, baseline: LiveDataset, config: SystemConfig) -> MetricsSnapshot:
    """Resolve ``scenario`` over ``baseline`` and compute its snapshot.

    Safe to call from worker threads: the scenario and baseline are only read.
    """
    dataset = resolve(baseline.resources, baseline.projects, baseline.allocations, scenario)
    return compute_snapshot(dataset, config, scenario.change_version)


__all__ = ["utilization_metrics", "compute_snapshot", "snapshot_for"]
