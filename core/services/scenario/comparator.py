from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Dict, Iterable, List, Sequence

from core.exceptions import ValidationError
from core.models import MetricsSnapshot, Scenario, SystemConfig
from core.services.scenario.metrics import snapshot_for
from core.services.scenario.models import (
    CostComparisonRow,
    LiveDataset,
    ScenarioComparison,
    ScenarioSummary,
    SkillsComparisonRow,
    UtilizationComparisonRow,
)

logger = logging.getLogger(__name__)

METRIC_NAMES = ("utilization", "costs", "skills")


def validate_request(scenario_ids: Sequence[str], metric_names: Iterable[str] | None) -> tuple[List[str], List[str]]:
    ids: List[str] = []
    for sid in scenario_ids or []:
        if sid and sid not in ids:
            ids.append(sid)
    if len(ids) < 2:
        raise ValidationError("At least two scenarios are required for comparison.", code="COMPARE_TOO_FEW")

    metrics: List[str] = []
    for name in metric_names or METRIC_NAMES:
        key = (name or "").strip().lower()
        if key not in METRIC_NAMES:
            raise ValidationError(f"Unknown comparison metric: {name!r}.", code="COMPARE_UNKNOWN_METRIC")
        if key not in metrics:
            metrics.append(key)
    return ids, metrics


def compute_snapshots(
    scenarios: Sequence[Scenario],
    baseline: LiveDataset,
    config: SystemConfig,
    max_workers: int | None = None,
) -> Dict[str, MetricsSnapshot]:
    """Compute snapshots for ``scenarios`` in parallel over one shared baseline."""
    if not scenarios:
        return {}
    workers = max_workers or min(8, len(scenarios))
    logger.debug("Computing metrics for %d scenario(s) on %d worker(s)", len(scenarios), workers)
    with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="scenario-metrics") as pool:
        futures = {s.id: pool.submit(snapshot_for, s, baseline, config) for s in scenarios}
        return {sid: future.result() for sid, future in futures.items()}


def build_comparison(
    scenarios: Sequence[Scenario],
    snapshots: Dict[str, MetricsSnapshot],
    metric_names: Sequence[str],
) -> ScenarioComparison:
    by_metric: Dict[str, list] = {}
    for metric in metric_names:
        rows = []
        for scenario in scenarios:
            snap = snapshots[scenario.id]
            if metric == "utilization":
                rows.append(
                    UtilizationComparisonRow(
                        scenario_id=scenario.id,
                        scenario_name=scenario.name,
                        overall=snap.utilization.overall,
                        resource_count=snap.utilization.resource_count,
                        over_allocated_count=sum(
                            1 for r in snap.utilization.by_resource.values() if r.is_over_allocated
                        ),
                    )
                )
            elif metric == "costs":
                rows.append(
                    CostComparisonRow(
                        scenario_id=scenario.id,
                        scenario_name=scenario.name,
                        total_cost=snap.costs.total_cost,
                        total_billable=snap.costs.total_billable,
                        total_profit=snap.costs.total_profit,
                        margin=snap.costs.margin,
                    )
                )
            else:
                rows.append(
                    SkillsComparisonRow(
                        scenario_id=scenario.id,
                        scenario_name=scenario.name,
                        coverage_percentage=snap.skills_coverage.coverage_percentage,
                        covered_count=len(snap.skills_coverage.covered),
                        missing=list(snap.skills_coverage.missing),
                    )
                )
        by_metric[metric] = rows

    return ScenarioComparison(
        scenarios=[
            ScenarioSummary(
                scenario_id=s.id,
                name=s.name,
                start_date=s.start_date,
                end_date=s.end_date,
                status=s.status,
            )
            for s in scenarios
        ],
        metrics=list(metric_names),
        start_date=min(s.start_date for s in scenarios),
        end_date=max(s.end_date for s in scenarios),
        by_metric=by_metric,
    )


__all__ = ["METRIC_NAMES", "validate_request", "compute_snapshots", "build_comparison"]
