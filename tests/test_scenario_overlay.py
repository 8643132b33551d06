from datetime import date

from core.models import (
    Allocation,
    Project,
    ProjectTimelineChange,
    Resource,
    ResourceChange,
    Scenario,
)
from core.services.scenario.overlay import resolve, touched_resource_ids


def _alloc(alloc_id: str, resource_id: str, utilization: int, project_id: str = "p-1") -> Allocation:
    return Allocation(
        id=alloc_id,
        resource_id=resource_id,
        project_id=project_id,
        start_date=date(2026, 2, 1),
        end_date=date(2026, 5, 31),
        utilization=utilization,
    )


def _live():
    live_alloc = _alloc("a-live", "r-1", 40)
    resources = [
        Resource(id="r-1", name="Dana", allocations=[live_alloc]),
        Resource(id="r-2", name="Eli"),
    ]
    projects = [Project(id="p-1", name="Portal", start_date=date(2026, 1, 1), end_date=date(2026, 6, 30))]
    return resources, projects, [live_alloc]


def _scenario(*changes, timeline=()):
    return Scenario(
        id="s-1",
        name="What if",
        start_date=date(2026, 1, 1),
        end_date=date(2026, 12, 31),
        resource_changes=list(changes),
        timeline_changes=list(timeline),
    )


def test_resolve_applies_upserts_and_is_idempotent():
    resources, projects, allocations = _live()
    scenario = _scenario(ResourceChange.upsert(_alloc("a-new", "r-2", 70)))

    first = resolve(resources, projects, allocations, scenario)
    second = resolve(resources, projects, allocations, scenario)

    assert sorted(a.id for a in first.allocations) == ["a-live", "a-new"]
    assert first.allocations == second.allocations
    assert [a.id for a in first.resource("r-2").allocations] == ["a-new"]


def test_later_changes_to_the_same_allocation_win():
    resources, projects, allocations = _live()
    scenario = _scenario(
        ResourceChange.upsert(_alloc("a-live", "r-1", 60)),
        ResourceChange.upsert(_alloc("a-live", "r-1", 20)),
    )

    dataset = resolve(resources, projects, allocations, scenario)

    assert len(dataset.allocations) == 1
    assert dataset.allocation("a-live").utilization == 20


def test_removal_drops_the_live_allocation():
    resources, projects, allocations = _live()
    scenario = _scenario(ResourceChange.removal("r-1", "a-live"))

    dataset = resolve(resources, projects, allocations, scenario)

    assert dataset.allocations == []
    assert dataset.resource("r-1").allocations == []


def test_timeline_change_replaces_project_window():
    resources, projects, allocations = _live()
    change = ProjectTimelineChange.create("p-1", date(2026, 1, 1), date(2026, 6, 30), date(2026, 3, 1), date(2026, 9, 30))

    dataset = resolve(resources, projects, allocations, _scenario(timeline=[change]))

    project = dataset.project("p-1")
    assert (project.start_date, project.end_date) == (date(2026, 3, 1), date(2026, 9, 30))


def test_live_objects_are_never_mutated():
    resources, projects, allocations = _live()
    scenario = _scenario(
        ResourceChange.upsert(_alloc("a-live", "r-1", 90)),
        timeline=[ProjectTimelineChange.create("p-1", None, None, date(2026, 4, 1), date(2026, 4, 30))],
    )

    dataset = resolve(resources, projects, allocations, scenario)
    dataset.allocation("a-live").notes = "edited copy"

    assert allocations[0].utilization == 40
    assert allocations[0].notes == ""
    assert resources[0].allocations[0].utilization == 40
    assert projects[0].start_date == date(2026, 1, 1)


def test_touched_resources_include_previous_owner():
    resources, projects, allocations = _live()
    # moving the live allocation from r-1 to r-2
    scenario = _scenario(ResourceChange.upsert(_alloc("a-live", "r-2", 40)))

    assert touched_resource_ids(scenario, allocations) == ["r-2", "r-1"]
    dataset = resolve(resources, projects, allocations, scenario)
    assert dataset.resource("r-1").allocations == []
    assert [a.id for a in dataset.resource("r-2").allocations] == ["a-live"]
