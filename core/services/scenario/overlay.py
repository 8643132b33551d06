"""
Copy-on-write overlay of a scenario's change lists onto live data.

Nothing here caches or mutates: every call rebuilds the effective dataset
from its inputs, and the live objects passed in are copied before any field
is replaced.
"""
from __future__ import annotations

from dataclasses import replace
from typing import Dict, Iterable, List

from core.interfaces import AllocationRepository, ProjectRepository, ResourceRepository
from core.models import Allocation, Project, Resource, Scenario
from core.services.scenario.models import EffectiveDataset, LiveDataset


def read_live(
    resource_repo: ResourceRepository,
    project_repo: ProjectRepository,
    allocation_repo: AllocationRepository,
) -> LiveDataset:
    return LiveDataset(
        resources=tuple(resource_repo.list_all()),
        projects=tuple(project_repo.list_all()),
        allocations=tuple(allocation_repo.list_all()),
    )


def resolve(
    live_resources: Iterable[Resource],
    live_projects: Iterable[Project],
    live_allocations: Iterable[Allocation],
    scenario: Scenario,
) -> EffectiveDataset:
    by_id: Dict[str, Allocation] = {}
    for alloc in live_allocations:
        if alloc is not None and alloc.id not in by_id:
            by_id[alloc.id] = replace(alloc)

    for change in scenario.resource_changes:
        if change.is_removal:
            by_id.pop(change.allocation_id, None)
            continue
        # later changes to the same id replace earlier ones in place
        by_id[change.allocation_id] = replace(
            change.allocation,
            id=change.allocation_id,
            resource_id=change.resource_id,
        )

    projects: Dict[str, Project] = {p.id: replace(p) for p in live_projects}
    for tc in scenario.timeline_changes:
        current = projects.get(tc.project_id)
        if current is None:
            continue
        projects[tc.project_id] = replace(current, start_date=tc.new_start, end_date=tc.new_end)

    allocations: List[Allocation] = list(by_id.values())
    resources = [
        replace(r, allocations=[a for a in allocations if a.resource_id == r.id])
        for r in live_resources
    ]
    return EffectiveDataset(
        scenario_id=scenario.id,
        resources=resources,
        projects=list(projects.values()),
        allocations=allocations,
    )


def touched_resource_ids(scenario: Scenario, live_allocations: Iterable[Allocation]) -> List[str]:
    """
    Resources whose commitment a scenario changes.

    Includes the resource named on every change and, for removals and moves,
    the resource that holds the live allocation being replaced.
    """
    live_owner = {a.id: a.resource_id for a in live_allocations if a is not None}
    touched: List[str] = []
    for change in scenario.resource_changes:
        for rid in (change.resource_id, live_owner.get(change.allocation_id)):
            if rid and rid not in touched:
                touched.append(rid)
    return touched


__all__ = ["read_live", "resolve", "touched_resource_ids"]
