from datetime import date

import pytest

from core.exceptions import NotFoundError, ValidationError
from core.models import AllocationStatus


def _setup(services):
    rs = services["resource_service"]
    ps = services["project_service"]
    resource = rs.create_resource("Dev 1", "Developer", hourly_rate=50.0, billable_rate=80.0)
    project = ps.create_project("Alloc Project", start_date=date(2026, 1, 1), end_date=date(2026, 12, 31))
    return resource, project


def test_allocation_create_and_utilization(services):
    als = services["allocation_service"]
    resource, project = _setup(services)

    a1 = als.create_allocation(resource.id, project.id, date(2026, 3, 1), date(2026, 3, 31), utilization=60)
    a2 = als.create_allocation(resource.id, project.id, date(2026, 4, 1), date(2026, 4, 30), utilization=30)

    usage = als.get_resource_utilization(resource.id, as_of=date(2026, 3, 15))
    assert usage.total == 60
    assert usage.current == 60
    assert usage.threshold == 100
    assert not usage.is_over_allocated
    assert usage.status == AllocationStatus.AVAILABLE

    # no as_of: every allocation counts regardless of its window
    lifetime = als.get_resource_utilization(resource.id)
    assert lifetime.total == 90
    assert not lifetime.is_over_allocated

    stored = services["resource_service"].get_resource(resource.id)
    assert {a.id for a in stored.allocations} == {a1.id, a2.id}
    assert [a.id for a in als.list_allocations(project_id=project.id)] == [a1.id, a2.id]


def test_allocation_uses_configured_default_percentage(services):
    als = services["allocation_service"]
    services["settings_service"].update_setting("default_allocation_percentage", 40)
    resource, project = _setup(services)

    alloc = als.create_allocation(resource.id, project.id, date(2026, 3, 1), date(2026, 3, 31))

    assert alloc.utilization == 40


def test_allocation_validation_errors(services):
    als = services["allocation_service"]
    resource, project = _setup(services)

    with pytest.raises(ValidationError) as exc:
        als.create_allocation(resource.id, project.id, date(2026, 3, 31), date(2026, 3, 1), utilization=50)
    assert exc.value.code == "ALLOCATION_END_BEFORE_START"

    with pytest.raises(ValidationError) as exc:
        als.create_allocation(resource.id, project.id, date(2026, 3, 1), date(2026, 3, 31), utilization=0)
    assert exc.value.code == "UTILIZATION_OUT_OF_RANGE"

    with pytest.raises(ValidationError) as exc:
        als.create_allocation(resource.id, project.id, date(2026, 3, 1), date(2026, 3, 31), utilization=101)
    assert exc.value.code == "UTILIZATION_OUT_OF_RANGE"

    with pytest.raises(ValidationError) as exc:
        als.create_allocation(resource.id, project.id, date(2026, 3, 1), date(2026, 3, 31), utilization=12.5)
    assert exc.value.code == "UTILIZATION_NOT_INTEGER"

    with pytest.raises(NotFoundError) as exc:
        als.create_allocation("missing", project.id, date(2026, 3, 1), date(2026, 3, 31), utilization=50)
    assert exc.value.code == "RESOURCE_NOT_FOUND"

    assert als.list_allocations() == []


def test_utilization_upper_bound_follows_threshold(services):
    als = services["allocation_service"]
    services["settings_service"].update_setting("max_utilization_percentage", 120)
    resource, project = _setup(services)

    alloc = als.create_allocation(resource.id, project.id, date(2026, 3, 1), date(2026, 3, 31), utilization=120)

    assert alloc.utilization == 120


def test_live_over_allocation_is_warned_not_blocked(services):
    als = services["allocation_service"]
    resource, project = _setup(services)

    als.create_allocation(resource.id, project.id, date(2026, 3, 1), date(2026, 3, 31), utilization=60)
    assert als.consume_last_overallocation_warning() is None

    als.create_allocation(resource.id, project.id, date(2026, 3, 1), date(2026, 3, 31), utilization=50)
    warning = als.consume_last_overallocation_warning()
    assert warning is not None and "110%" in warning
    assert als.consume_last_overallocation_warning() is None

    over = als.list_over_allocated()
    assert [row.resource_id for row in over] == [resource.id]
    assert over[0].total == 110


def test_allocation_update_and_delete(services):
    als = services["allocation_service"]
    resource, project = _setup(services)
    alloc = als.create_allocation(resource.id, project.id, date(2026, 3, 1), date(2026, 3, 31), utilization=60)

    updated = als.update_allocation(alloc.id, utilization=20, notes="  part time ")
    assert updated.version == 2
    assert updated.notes == "part time"
    assert als.get_allocation(alloc.id).utilization == 20

    als.delete_allocation(alloc.id)
    with pytest.raises(NotFoundError):
        als.get_allocation(alloc.id)
    assert als.get_resource_utilization(resource.id).total == 0


def test_capacity_forecast_per_week(services):
    als = services["allocation_service"]
    rs = services["resource_service"]
    resource, project = _setup(services)
    part_timer = rs.create_resource("Analyst", "Analyst", weekly_capacity_hours=20.0)
    rs.create_resource("Gone", "Developer", is_active=False)

    # Monday 2026-03-02 .. Sunday 2026-03-08
    als.create_allocation(resource.id, project.id, date(2026, 3, 2), date(2026, 3, 8), utilization=75)
    als.create_allocation(resource.id, project.id, date(2026, 3, 2), date(2026, 3, 15), utilization=50)
    als.create_allocation(part_timer.id, project.id, date(2026, 3, 9), date(2026, 3, 15), utilization=50)

    forecast = als.get_capacity_forecast(date(2026, 3, 4), 2)

    assert forecast.weeks == [date(2026, 3, 2), date(2026, 3, 9)]
    assert [row.resource_name for row in forecast.rows] == ["Analyst", "Dev 1"]

    analyst, dev = forecast.rows
    assert analyst.capacity_hours == 20.0
    assert [c.available_hours for c in analyst.cells] == [20.0, 10.0]

    assert dev.capacity_hours == 40.0
    assert [c.utilization for c in dev.cells] == [125, 50]
    assert dev.cells[0].available_hours == -10.0
    assert dev.cells[0].display_hours == 0.0
    assert dev.cells[1].available_hours == 20.0


def test_monthly_forecast(services):
    als = services["allocation_service"]
    resource, project = _setup(services)
    als.create_allocation(resource.id, project.id, date(2026, 2, 1), date(2026, 2, 28), utilization=40)

    forecast = als.get_monthly_forecast(date(2026, 1, 1), 3)

    assert forecast.months == ["2026-01", "2026-02", "2026-03"]
    assert forecast.rows[0].by_month == {"2026-01": 0, "2026-02": 40, "2026-03": 0}


def test_deleting_a_resource_removes_its_allocations(services):
    als = services["allocation_service"]
    rs = services["resource_service"]
    resource, project = _setup(services)
    als.create_allocation(resource.id, project.id, date(2026, 3, 1), date(2026, 3, 31), utilization=60)

    rs.delete_resource(resource.id)

    assert als.list_allocations() == []
    with pytest.raises(NotFoundError):
        rs.get_resource(resource.id)


def test_deleting_a_project_removes_its_allocations(services):
    als = services["allocation_service"]
    ps = services["project_service"]
    resource, project = _setup(services)
    als.create_allocation(resource.id, project.id, date(2026, 3, 1), date(2026, 3, 31), utilization=60)

    ps.delete_project(project.id)

    assert als.list_allocations() == []
    assert als.get_resource_utilization(resource.id).total == 0
