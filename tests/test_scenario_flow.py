from datetime import date

import pytest

from core.exceptions import BusinessRuleError, NotFoundError, ValidationError
from core.models import ScenarioStatus


def _setup(services):
    rs = services["resource_service"]
    ps = services["project_service"]
    dana = rs.create_resource("Dana", "Developer", hourly_rate=50.0, billable_rate=90.0)
    eli = rs.create_resource("Eli", "Designer", hourly_rate=40.0, billable_rate=70.0)
    project = ps.create_project(
        "Scenario Project",
        planned_budget=50000.0,
        start_date=date(2026, 1, 1),
        end_date=date(2026, 6, 30),
    )
    return dana, eli, project


def test_create_scenario_validation(services):
    ss = services["scenario_service"]

    with pytest.raises(ValidationError) as exc:
        ss.create_scenario("  ", date(2026, 1, 1), date(2026, 2, 1))
    assert exc.value.code == "SCENARIO_NAME_EMPTY"

    with pytest.raises(ValidationError) as exc:
        ss.create_scenario("Backwards", date(2026, 2, 1), date(2026, 1, 1))
    assert exc.value.code == "SCENARIO_END_BEFORE_START"

    with pytest.raises(ValidationError) as exc:
        ss.create_scenario("Clone", date(2026, 1, 1), date(2026, 2, 1), clone_from_base=True)
    assert exc.value.code == "SCENARIO_BASE_REQUIRED"

    with pytest.raises(NotFoundError):
        ss.create_scenario("Orphan", date(2026, 1, 1), date(2026, 2, 1), base_scenario_id="missing")


def test_scenario_edits_never_touch_live_data(services):
    ss = services["scenario_service"]
    als = services["allocation_service"]
    dana, _eli, project = _setup(services)
    live = als.create_allocation(dana.id, project.id, date(2026, 1, 1), date(2026, 3, 31), utilization=50)

    scenario = ss.create_scenario("Hiring plan", date(2026, 1, 1), date(2026, 6, 30))
    ss.add_or_update_resource_change(
        scenario.id, dana.id, project.id, date(2026, 1, 1), date(2026, 3, 31), utilization=80, allocation_id=live.id
    )
    ss.add_or_update_resource_change(
        scenario.id, dana.id, project.id, date(2026, 4, 1), date(2026, 6, 30), utilization=20
    )

    dataset = ss.get_effective_dataset(scenario.id)
    assert dataset.allocation(live.id).utilization == 80
    assert len(dataset.resource(dana.id).allocations) == 2

    assert als.get_allocation(live.id).utilization == 50
    assert len(als.list_allocations()) == 1

    stored = ss.get_scenario(scenario.id)
    assert stored.change_version == 2
    assert stored.status == ScenarioStatus.DRAFT


def test_resource_change_requires_known_allocation(services):
    ss = services["scenario_service"]
    dana, _eli, project = _setup(services)
    scenario = ss.create_scenario("Unknown", date(2026, 1, 1), date(2026, 6, 30))

    with pytest.raises(NotFoundError) as exc:
        ss.add_or_update_resource_change(
            scenario.id, dana.id, project.id, date(2026, 1, 1), date(2026, 1, 31),
            utilization=50, allocation_id="nope",
        )
    assert exc.value.code == "ALLOCATION_NOT_FOUND"

    with pytest.raises(ValidationError) as exc:
        ss.add_or_update_resource_change(
            scenario.id, dana.id, project.id, date(2026, 1, 1), date(2026, 1, 31), utilization=150,
        )
    assert exc.value.code == "UTILIZATION_OUT_OF_RANGE"


def test_remove_allocation_marks_live_and_drops_proposals(services):
    ss = services["scenario_service"]
    als = services["allocation_service"]
    dana, eli, project = _setup(services)
    live = als.create_allocation(dana.id, project.id, date(2026, 1, 1), date(2026, 3, 31), utilization=50)
    scenario = ss.create_scenario("Cuts", date(2026, 1, 1), date(2026, 6, 30))
    proposal = ss.add_or_update_resource_change(
        scenario.id, eli.id, project.id, date(2026, 2, 1), date(2026, 2, 28), utilization=30
    )

    with pytest.raises(ValidationError) as exc:
        ss.remove_allocation(scenario.id, eli.id, live.id)
    assert exc.value.code == "ALLOCATION_RESOURCE_MISMATCH"

    ss.remove_allocation(scenario.id, dana.id, live.id)
    updated = ss.remove_allocation(scenario.id, eli.id, proposal.allocation_id)

    assert len(updated.resource_changes) == 1
    assert updated.resource_changes[0].is_removal
    assert ss.get_effective_dataset(scenario.id).allocations == []


def test_timeline_change_clamps_proposed_allocations(services):
    ss = services["scenario_service"]
    dana, eli, project = _setup(services)
    scenario = ss.create_scenario("Slip", date(2026, 1, 1), date(2026, 12, 31))
    inside = ss.add_or_update_resource_change(
        scenario.id, dana.id, project.id, date(2026, 2, 1), date(2026, 5, 31), utilization=50
    )
    outside = ss.add_or_update_resource_change(
        scenario.id, eli.id, project.id, date(2026, 1, 1), date(2026, 1, 31), utilization=50
    )

    change = ss.add_or_update_timeline_change(scenario.id, project.id, date(2026, 3, 1), date(2026, 8, 31), "late start")

    assert change.original_start == date(2026, 1, 1)
    dataset = ss.get_effective_dataset(scenario.id)
    clamped = dataset.allocation(inside.allocation_id)
    assert (clamped.start_date, clamped.end_date) == (date(2026, 3, 1), date(2026, 5, 31))
    moved = dataset.allocation(outside.allocation_id)
    assert (moved.start_date, moved.end_date) == (date(2026, 3, 1), date(2026, 8, 31))
    assert dataset.project(project.id).end_date == date(2026, 8, 31)

    # editing the same project's change keeps a single entry
    ss.add_or_update_timeline_change(scenario.id, project.id, date(2026, 3, 1), date(2026, 9, 30))
    assert len(ss.get_scenario(scenario.id).timeline_changes) == 1

    ss.remove_timeline_change(scenario.id, project.id)
    assert ss.get_effective_dataset(scenario.id).project(project.id).end_date == date(2026, 6, 30)
    with pytest.raises(NotFoundError):
        ss.remove_timeline_change(scenario.id, project.id)


def test_metrics_snapshot_and_staleness(services):
    ss = services["scenario_service"]
    dana, _eli, project = _setup(services)
    scenario = ss.create_scenario("Metrics", date(2026, 1, 1), date(2026, 6, 30))

    empty = ss.get_metrics(scenario.id)
    assert empty.snapshot is None and empty.is_stale

    ss.add_or_update_resource_change(
        scenario.id, dana.id, project.id, date(2026, 1, 5), date(2026, 1, 30), utilization=60, total_hours=10.0
    )
    ss.add_or_update_resource_change(
        scenario.id, dana.id, project.id, date(2026, 1, 5), date(2026, 1, 30), utilization=50, total_hours=10.0
    )
    snapshot = ss.calculate_metrics(scenario.id)

    assert snapshot.change_version == 2
    assert snapshot.utilization.overall == 110
    assert snapshot.utilization.resource_count == 1
    row = snapshot.utilization.by_resource[dana.id]
    assert row.total_utilization == 110 and row.is_over_allocated
    assert {share.project_name for share in row.allocations} == {"Scenario Project"}
    assert snapshot.costs.total_cost == pytest.approx(1000.0)
    assert snapshot.costs.total_billable == pytest.approx(1800.0)
    assert snapshot.costs.margin == pytest.approx(800.0 / 1800.0 * 100.0)

    fresh = ss.get_metrics(scenario.id)
    assert not fresh.is_stale
    assert fresh.snapshot.utilization.overall == 110
    assert fresh.snapshot.costs.by_project[project.id].total_cost == pytest.approx(1000.0)

    ss.add_or_update_timeline_change(scenario.id, project.id, date(2026, 1, 1), date(2026, 7, 31))
    stale = ss.get_metrics(scenario.id)
    assert stale.is_stale
    assert stale.snapshot.change_version == 2


def test_clone_from_base_starts_with_base_dataset(services):
    ss = services["scenario_service"]
    dana, eli, project = _setup(services)
    base = ss.create_scenario("Base", date(2026, 1, 1), date(2026, 6, 30))
    ss.add_or_update_resource_change(base.id, dana.id, project.id, date(2026, 1, 1), date(2026, 2, 28), utilization=70)
    ss.add_or_update_timeline_change(base.id, project.id, date(2026, 2, 1), date(2026, 7, 31))

    clone = ss.create_scenario(
        "Clone", date(2026, 1, 1), date(2026, 6, 30), base_scenario_id=base.id, clone_from_base=True
    )
    referenced = ss.create_scenario("Reference only", date(2026, 1, 1), date(2026, 6, 30), base_scenario_id=base.id)

    base_ds = ss.get_effective_dataset(base.id)
    clone_ds = ss.get_effective_dataset(clone.id)
    assert clone_ds.allocations == base_ds.allocations
    assert clone_ds.projects == base_ds.projects
    assert ss.get_effective_dataset(referenced.id).allocations == []

    # the clone's change list is its own copy
    ss.add_or_update_resource_change(clone.id, eli.id, project.id, date(2026, 3, 1), date(2026, 3, 31), utilization=20)
    assert len(ss.get_effective_dataset(base.id).allocations) == 1
    assert {c.id for c in ss.get_scenario(clone.id).resource_changes}.isdisjoint(
        {c.id for c in ss.get_scenario(base.id).resource_changes}
    )


def test_list_and_delete_scenarios(services):
    ss = services["scenario_service"]
    first = ss.create_scenario("First", date(2026, 1, 1), date(2026, 6, 30))
    second = ss.create_scenario("Second", date(2026, 1, 1), date(2026, 6, 30))

    assert {s.id for s in ss.list_scenarios()} == {first.id, second.id}

    ss.delete_scenario(first.id)
    assert [s.id for s in ss.list_scenarios()] == [second.id]
    with pytest.raises(NotFoundError):
        ss.get_scenario(first.id)


def test_promoted_scenario_is_read_only(services):
    ss = services["scenario_service"]
    dana, _eli, project = _setup(services)
    scenario = ss.create_scenario("Ship it", date(2026, 1, 1), date(2026, 6, 30))
    ss.add_or_update_resource_change(scenario.id, dana.id, project.id, date(2026, 1, 1), date(2026, 1, 31), utilization=50)

    assert ss.promote_scenario(scenario.id).promoted

    with pytest.raises(BusinessRuleError) as exc:
        ss.add_or_update_resource_change(
            scenario.id, dana.id, project.id, date(2026, 2, 1), date(2026, 2, 28), utilization=50
        )
    assert exc.value.code == "SCENARIO_PROMOTED"
