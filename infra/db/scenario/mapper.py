from __future__ import annotations

from dataclasses import asdict
from typing import Any, Optional

from core.models import (
    AllocationShare,
    CostMetrics,
    MetricsSnapshot,
    ProjectCostRow,
    ProjectTimelineChange,
    ResourceChange,
    ResourceUtilizationRow,
    RoleCoverage,
    Scenario,
    ScenarioStatus,
    SkillsCoverage,
    UtilizationMetrics,
)
from infra.db.allocation.mapper import allocation_from_dict, allocation_to_dict
from infra.db.models import ScenarioORM
from infra.db.serialization import (
    from_json_dict,
    from_json_list,
    parse_date,
    parse_datetime,
    to_json,
)


def resource_changes_to_json(changes: list[ResourceChange]) -> str:
    return to_json(
        [
            {
                "id": change.id,
                "resource_id": change.resource_id,
                "allocation_id": change.allocation_id,
                "allocation": allocation_to_dict(change.allocation) if change.allocation else None,
            }
            for change in changes
        ]
    )


def resource_changes_from_json(raw: str | None) -> list[ResourceChange]:
    changes: list[ResourceChange] = []
    for item in from_json_list(raw):
        if not isinstance(item, dict):
            continue
        payload = item.get("allocation")
        changes.append(
            ResourceChange(
                id=str(item["id"]),
                resource_id=str(item["resource_id"]),
                allocation_id=str(item["allocation_id"]),
                allocation=allocation_from_dict(payload) if isinstance(payload, dict) else None,
            )
        )
    return changes


def timeline_changes_to_json(changes: list[ProjectTimelineChange]) -> str:
    return to_json([asdict(change) for change in changes])


def timeline_changes_from_json(raw: str | None) -> list[ProjectTimelineChange]:
    out: list[ProjectTimelineChange] = []
    for item in from_json_list(raw):
        if not isinstance(item, dict):
            continue
        out.append(
            ProjectTimelineChange(
                id=str(item["id"]),
                project_id=str(item["project_id"]),
                original_start=parse_date(item.get("original_start")),
                original_end=parse_date(item.get("original_end")),
                new_start=parse_date(item["new_start"]),
                new_end=parse_date(item["new_end"]),
                notes=item.get("notes") or "",
            )
        )
    return out


def snapshot_to_json(snapshot: Optional[MetricsSnapshot]) -> Optional[str]:
    if snapshot is None:
        return None
    # asdict recurses through the nested frozen dataclasses; dates fall back to str
    return to_json(asdict(snapshot))


def _coverage_from_dict(data: dict[str, Any]) -> SkillsCoverage:
    return SkillsCoverage(
        coverage_percentage=float(data.get("coverage_percentage") or 0.0),
        covered=list(data.get("covered") or []),
        missing=list(data.get("missing") or []),
        roles=[RoleCoverage(**role) for role in data.get("roles") or []],
    )


def snapshot_from_json(raw: str | None) -> Optional[MetricsSnapshot]:
    data = from_json_dict(raw)
    if not data:
        return None
    util = data.get("utilization") or {}
    costs = data.get("costs") or {}
    by_resource = {
        key: ResourceUtilizationRow(
            resource_id=row["resource_id"],
            resource_name=row["resource_name"],
            total_utilization=int(row["total_utilization"]),
            is_over_allocated=bool(row["is_over_allocated"]),
            allocations=[AllocationShare(**share) for share in row.get("allocations") or []],
        )
        for key, row in (util.get("by_resource") or {}).items()
    }
    return MetricsSnapshot(
        utilization=UtilizationMetrics(
            overall=int(util.get("overall") or 0),
            resource_count=int(util.get("resource_count") or 0),
            by_resource=by_resource,
        ),
        costs=CostMetrics(
            total_cost=float(costs.get("total_cost") or 0.0),
            total_billable=float(costs.get("total_billable") or 0.0),
            total_profit=float(costs.get("total_profit") or 0.0),
            margin=float(costs.get("margin") or 0.0),
            by_project={
                key: ProjectCostRow(**row) for key, row in (costs.get("by_project") or {}).items()
            },
        ),
        skills_coverage=_coverage_from_dict(data.get("skills_coverage") or {}),
        change_version=int(data.get("change_version") or 0),
        calculated_at=parse_datetime(data.get("calculated_at")),
        skills_by_project={
            key: _coverage_from_dict(value)
            for key, value in (data.get("skills_by_project") or {}).items()
        },
    )


def scenario_to_orm(scenario: Scenario) -> ScenarioORM:
    return ScenarioORM(
        id=scenario.id,
        name=scenario.name,
        description=scenario.description,
        start_date=scenario.start_date,
        end_date=scenario.end_date,
        base_scenario_id=scenario.base_scenario_id,
        clone_from_base=scenario.clone_from_base,
        status=scenario.status.value,
        resource_changes_json=resource_changes_to_json(scenario.resource_changes),
        timeline_changes_json=timeline_changes_to_json(scenario.timeline_changes),
        change_version=scenario.change_version,
        metrics_json=snapshot_to_json(scenario.metrics),
        metrics_version=scenario.metrics_version,
        created_at=scenario.created_at,
        promoted_at=scenario.promoted_at,
        version=getattr(scenario, "version", 1),
    )


def scenario_from_orm(obj: ScenarioORM) -> Scenario:
    return Scenario(
        id=obj.id,
        name=obj.name,
        start_date=obj.start_date,
        end_date=obj.end_date,
        description=obj.description or "",
        base_scenario_id=obj.base_scenario_id,
        clone_from_base=bool(obj.clone_from_base),
        status=ScenarioStatus(obj.status),
        resource_changes=resource_changes_from_json(obj.resource_changes_json),
        timeline_changes=timeline_changes_from_json(obj.timeline_changes_json),
        change_version=int(obj.change_version or 0),
        metrics=snapshot_from_json(obj.metrics_json),
        metrics_version=obj.metrics_version,
        created_at=obj.created_at,
        promoted_at=obj.promoted_at,
        version=getattr(obj, "version", 1),
    )


def scenario_values(scenario: Scenario) -> dict[str, Any]:
    """Column values for a versioned update; id and version are handled by the caller."""
    return {
        "name": scenario.name,
        "description": scenario.description,
        "start_date": scenario.start_date,
        "end_date": scenario.end_date,
        "base_scenario_id": scenario.base_scenario_id,
        "clone_from_base": scenario.clone_from_base,
        "status": scenario.status.value,
        "resource_changes_json": resource_changes_to_json(scenario.resource_changes),
        "timeline_changes_json": timeline_changes_to_json(scenario.timeline_changes),
        "change_version": scenario.change_version,
        "metrics_json": snapshot_to_json(scenario.metrics),
        "metrics_version": scenario.metrics_version,
        "promoted_at": scenario.promoted_at,
    }


__all__ = ["scenario_to_orm", "scenario_from_orm", "scenario_values"]
