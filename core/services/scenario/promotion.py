from __future__ import annotations

import logging
from contextlib import nullcontext
from datetime import datetime, timezone
from typing import Callable, ContextManager, Dict, List, Optional

from sqlalchemy.orm import Session

from core.events.domain_events import domain_events
from core.exceptions import BusinessRuleError, NotFoundError, StorageError
from core.interfaces import (
    AllocationRepository,
    ProjectRepository,
    ResourceRepository,
    ScenarioRepository,
)
from core.models import Allocation, Scenario, ScenarioStatus, SystemConfig
from core.services.allocation.aggregator import effective_allocations, total_utilization
from core.services.common.locks import PLANNING_WRITE_LOCK
from core.services.scenario.models import (
    EffectiveDataset,
    LiveDataset,
    PromotionConflict,
    PromotionResult,
)
from core.services.scenario.overlay import read_live, resolve, touched_resource_ids
from core.services.settings.service import SettingsService

logger = logging.getLogger(__name__)

TraceContext = Callable[[Optional[str]], ContextManager]


def find_conflicts(
    dataset: EffectiveDataset,
    resource_ids: List[str],
    config: SystemConfig,
) -> List[PromotionConflict]:
    """Every touched resource whose lifetime total exceeds the configured threshold."""
    if config.allow_overallocation:
        return []
    threshold = int(config.max_utilization_percentage)
    conflicts: List[PromotionConflict] = []
    for rid in resource_ids:
        resource = dataset.resource(rid)
        if resource is None:
            continue
        total = total_utilization(resource)
        if total > threshold:
            conflicts.append(
                PromotionConflict(
                    resource_id=resource.id,
                    resource_name=resource.name,
                    total_utilization=total,
                    threshold=threshold,
                    allocation_ids=[a.id for a in effective_allocations(resource)],
                )
            )
    return conflicts


class PromotionCoordinator:
    def __init__(
        self,
        session: Session,
        *,
        resource_repo: ResourceRepository,
        project_repo: ProjectRepository,
        allocation_repo: AllocationRepository,
        scenario_repo: ScenarioRepository,
        settings_service: SettingsService,
        trace_context: TraceContext | None = None,
    ):
        self._session = session
        self._resource_repo = resource_repo
        self._project_repo = project_repo
        self._allocation_repo = allocation_repo
        self._scenario_repo = scenario_repo
        self._settings_service = settings_service
        self._trace_context: TraceContext = trace_context or nullcontext

    def promote(self, scenario_id: str) -> PromotionResult:
        with PLANNING_WRITE_LOCK, self._trace_context(None) as trace_id:
            scenario = self._scenario_repo.get(scenario_id)
            if scenario is None:
                raise NotFoundError("Scenario not found.", code="SCENARIO_NOT_FOUND")
            if scenario.is_promoted:
                raise BusinessRuleError("Scenario has already been promoted.", code="SCENARIO_ALREADY_PROMOTED")

            logger.info("Promoting scenario %s (trace=%s)", scenario.id, trace_id)
            config = self._settings_service.get_system_config()
            live = read_live(self._resource_repo, self._project_repo, self._allocation_repo)
            dataset = resolve(live.resources, live.projects, live.allocations, scenario)
            touched = touched_resource_ids(scenario, live.allocations)
            conflicts = find_conflicts(dataset, touched, config)

            if conflicts:
                return self._reject(scenario, conflicts)
            return self._apply(scenario, live, dataset, touched)

    def _reject(self, scenario: Scenario, conflicts: List[PromotionConflict]) -> PromotionResult:
        scenario.status = ScenarioStatus.REJECTED
        try:
            self._scenario_repo.update(scenario)
            self._session.commit()
        except Exception as e:
            self._session.rollback()
            raise StorageError("Failed to record scenario rejection.", code="STORAGE_WRITE_FAILED") from e
        logger.warning(
            "Scenario %s rejected: %d over-allocated resource(s): %s",
            scenario.id,
            len(conflicts),
            ", ".join(c.resource_id for c in conflicts),
        )
        domain_events.scenario_changed.emit(scenario.id)
        return PromotionResult(scenario_id=scenario.id, status=scenario.status, conflicts=conflicts)

    def _apply(
        self,
        scenario: Scenario,
        live: LiveDataset,
        dataset: EffectiveDataset,
        touched: List[str],
    ) -> PromotionResult:
        live_allocations: Dict[str, Allocation] = {a.id: a for a in live.allocations}
        live_projects = {p.id: p for p in live.projects}
        live_resources = {r.id: r for r in live.resources}
        upserted = removed = 0
        updated_projects: List[str] = []

        try:
            # stale if another writer committed against the resource since read_live
            for rid in touched:
                if rid in live_resources:
                    self._resource_repo.bump_version(rid, live_resources[rid].version)

            seen: set[str] = set()
            for change in scenario.resource_changes:
                if change.allocation_id in seen:
                    continue
                seen.add(change.allocation_id)
                target = dataset.allocation(change.allocation_id)
                current = live_allocations.get(change.allocation_id)
                if target is None:
                    if current is not None:
                        self._allocation_repo.delete(current.id)
                        removed += 1
                    continue
                if current is None:
                    target.version = 1
                    self._allocation_repo.add(target)
                else:
                    target.version = current.version
                    self._allocation_repo.update(target)
                upserted += 1

            for project_id in dict.fromkeys(tc.project_id for tc in scenario.timeline_changes):
                effective = dataset.project(project_id)
                if effective is None or project_id not in live_projects:
                    raise NotFoundError("Project not found.", code="PROJECT_NOT_FOUND")
                effective.version = live_projects[project_id].version
                self._project_repo.update(effective)
                updated_projects.append(project_id)

            scenario.status = ScenarioStatus.PROMOTED
            scenario.promoted_at = datetime.now(timezone.utc)
            self._scenario_repo.update(scenario)
            self._session.commit()
        except Exception as e:
            self._session.rollback()
            logger.error("Promotion of scenario %s rolled back: %s", scenario.id, e)
            raise StorageError(
                "Scenario promotion failed; no changes were applied.",
                code="PROMOTION_FAILED",
            ) from e

        logger.info(
            "Scenario %s promoted: %d upserted, %d removed, %d project(s) rescheduled",
            scenario.id, upserted, removed, len(updated_projects),
        )
        for rid in touched:
            domain_events.allocations_changed.emit(rid)
        for pid in updated_projects:
            domain_events.project_changed.emit(pid)
        domain_events.scenario_promoted.emit(scenario.id)
        return PromotionResult(
            scenario_id=scenario.id,
            status=scenario.status,
            upserted_allocations=upserted,
            removed_allocations=removed,
            updated_projects=len(updated_projects),
        )


__all__ = ["PromotionCoordinator", "find_conflicts"]
