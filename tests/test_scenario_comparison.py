from datetime import date

import pytest

from core.exceptions import ValidationError
from core.models import Resource, Scenario, ResourceChange, Allocation, SystemConfig
from core.services.scenario.comparator import compute_snapshots, validate_request
from core.services.scenario.models import LiveDataset


def test_validate_request_rules():
    assert validate_request(["a", "b", "a"], None) == (["a", "b"], ["utilization", "costs", "skills"])
    assert validate_request(["a", "b"], ["Costs", "costs"]) == (["a", "b"], ["costs"])

    with pytest.raises(ValidationError) as exc:
        validate_request(["a", "a"], None)
    assert exc.value.code == "COMPARE_TOO_FEW"

    with pytest.raises(ValidationError) as exc:
        validate_request(["a", "b"], ["velocity"])
    assert exc.value.code == "COMPARE_UNKNOWN_METRIC"


def test_compute_snapshots_in_parallel_over_one_baseline():
    baseline = LiveDataset(resources=(Resource(id="r-1", name="Dana"),), projects=(), allocations=())
    scenarios = []
    for i, pct in enumerate((30, 60, 90)):
        alloc = Allocation(
            id=f"a-{i}", resource_id="r-1", project_id="p-1",
            start_date=date(2026, 1, 1), end_date=date(2026, 1, 31), utilization=pct,
        )
        scenarios.append(
            Scenario(
                id=f"s-{i}", name=f"S{i}", start_date=date(2026, 1, 1), end_date=date(2026, 1, 31),
                resource_changes=[ResourceChange.upsert(alloc)], change_version=1,
            )
        )

    snapshots = compute_snapshots(scenarios, baseline, SystemConfig(), max_workers=2)

    assert {sid: snap.utilization.overall for sid, snap in snapshots.items()} == {"s-0": 30, "s-1": 60, "s-2": 90}
    assert baseline.resources[0].allocations == []


def test_compare_scenarios_groups_rows_by_metric(services):
    rs = services["resource_service"]
    ps = services["project_service"]
    ss = services["scenario_service"]
    dana = rs.create_resource("Dana", "Developer", hourly_rate=50.0, billable_rate=100.0)
    project = ps.create_project("Compare Project")

    lean = ss.create_scenario("Lean", date(2026, 2, 1), date(2026, 4, 30))
    heavy = ss.create_scenario("Heavy", date(2026, 1, 1), date(2026, 3, 31))
    ss.add_or_update_resource_change(
        lean.id, dana.id, project.id, date(2026, 2, 2), date(2026, 2, 27), utilization=40, total_hours=20.0
    )
    ss.add_or_update_resource_change(
        heavy.id, dana.id, project.id, date(2026, 2, 2), date(2026, 2, 27), utilization=80, total_hours=40.0
    )
    ss.add_or_update_resource_change(
        heavy.id, dana.id, project.id, date(2026, 3, 2), date(2026, 3, 27), utilization=40, total_hours=20.0
    )
    ss.calculate_metrics(lean.id)

    comparison = ss.compare_scenarios([lean.id, heavy.id], ["utilization", "costs"])

    assert comparison.metrics == ["utilization", "costs"]
    assert (comparison.start_date, comparison.end_date) == (date(2026, 1, 1), date(2026, 4, 30))
    assert [s.name for s in comparison.scenarios] == ["Lean", "Heavy"]

    util = comparison.by_metric["utilization"]
    assert [row.overall for row in util] == [40, 120]
    assert [row.over_allocated_count for row in util] == [0, 1]

    costs = comparison.by_metric["costs"]
    assert [row.total_cost for row in costs] == pytest.approx([1000.0, 3000.0])
    assert [row.total_profit for row in costs] == pytest.approx([1000.0, 3000.0])
    assert "skills" not in comparison.by_metric

    # the missing snapshot was computed and cached on the way
    assert not ss.get_metrics(heavy.id).is_stale


def test_compare_needs_two_distinct_scenarios(services):
    ss = services["scenario_service"]
    only = ss.create_scenario("Only", date(2026, 1, 1), date(2026, 1, 31))

    with pytest.raises(ValidationError) as exc:
        ss.compare_scenarios([only.id, only.id])
    assert exc.value.code == "COMPARE_TOO_FEW"
