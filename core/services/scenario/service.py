from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date
from typing import Dict, List, Optional, Sequence

from sqlalchemy.orm import Session

from core.events.domain_events import domain_events
from core.exceptions import (
    BusinessRuleError,
    ConcurrencyError,
    NotFoundError,
    ValidationError,
)
from core.interfaces import (
    AllocationRepository,
    ProjectRepository,
    ResourceRepository,
    ScenarioRepository,
)
from core.models import (
    Allocation,
    MetricsSnapshot,
    ProjectTimelineChange,
    ResourceChange,
    Scenario,
    generate_id,
)
from core.services.allocation.validation import AllocationValidationMixin
from core.services.common.base import ServiceBase
from core.services.common.temporal import clamp_range
from core.services.scenario import comparator
from core.services.scenario.metrics import snapshot_for
from core.services.scenario.models import (
    EffectiveDataset,
    ScenarioComparison,
    ScenarioMetrics,
    PromotionResult,
)
from core.services.scenario.overlay import read_live, resolve
from core.services.scenario.promotion import PromotionCoordinator
from core.services.settings.service import SettingsService

logger = logging.getLogger(__name__)


class ScenarioService(AllocationValidationMixin, ServiceBase):
    def __init__(
        self,
        session: Session,
        scenario_repo: ScenarioRepository,
        resource_repo: ResourceRepository,
        project_repo: ProjectRepository,
        allocation_repo: AllocationRepository,
        settings_service: SettingsService,
        promotion_coordinator: PromotionCoordinator,
    ):
        super().__init__(session)
        self._scenario_repo = scenario_repo
        self._resource_repo = resource_repo
        self._project_repo = project_repo
        self._allocation_repo = allocation_repo
        self._settings_service = settings_service
        self._promotion = promotion_coordinator

    # ---------------- scenario lifecycle ----------------

    def create_scenario(
        self,
        name: str,
        start_date: date,
        end_date: date,
        description: str = "",
        base_scenario_id: str | None = None,
        clone_from_base: bool = False,
    ) -> Scenario:
        if not name or not name.strip():
            raise ValidationError("Scenario name cannot be empty.", code="SCENARIO_NAME_EMPTY")
        if start_date is None or end_date is None:
            raise ValidationError("Scenario start and end dates are required.", code="SCENARIO_DATES_REQUIRED")
        if end_date < start_date:
            raise ValidationError("Scenario end date cannot be before start date.", code="SCENARIO_END_BEFORE_START")
        if clone_from_base and not base_scenario_id:
            raise ValidationError("A base scenario is required to clone from.", code="SCENARIO_BASE_REQUIRED")

        base: Optional[Scenario] = None
        if base_scenario_id:
            base = self.get_scenario(base_scenario_id)

        scenario = Scenario.create(
            name=name,
            start_date=start_date,
            end_date=end_date,
            description=(description or "").strip(),
            base_scenario_id=base_scenario_id,
            clone_from_base=clone_from_base,
        )
        if clone_from_base and base is not None:
            scenario.resource_changes = [
                replace(
                    c,
                    id=generate_id(),
                    allocation=replace(c.allocation) if c.allocation is not None else None,
                )
                for c in base.resource_changes
            ]
            scenario.timeline_changes = [replace(tc, id=generate_id()) for tc in base.timeline_changes]

        with self.transaction():
            self._scenario_repo.add(scenario)
        logger.info("Created scenario %s - %s", scenario.id, scenario.name)
        domain_events.scenario_changed.emit(scenario.id)
        return scenario

    def get_scenario(self, scenario_id: str) -> Scenario:
        scenario = self._scenario_repo.get(scenario_id)
        if not scenario:
            raise NotFoundError("Scenario not found.", code="SCENARIO_NOT_FOUND")
        return scenario

    def list_scenarios(self) -> List[Scenario]:
        return sorted(self._scenario_repo.list_all(), key=lambda s: s.created_at)

    def delete_scenario(self, scenario_id: str) -> None:
        self.get_scenario(scenario_id)
        with self.transaction():
            self._scenario_repo.delete(scenario_id)
        domain_events.scenario_changed.emit(scenario_id)

    # ---------------- change lists ----------------

    def add_or_update_resource_change(
        self,
        scenario_id: str,
        resource_id: str,
        project_id: str,
        start_date: date,
        end_date: date,
        utilization: int | None = None,
        allocation_id: str | None = None,
        hourly_rate: float | None = None,
        billable_rate: float | None = None,
        total_hours: float | None = None,
        notes: str = "",
    ) -> ResourceChange:
        """
        Record what an allocation would look like in the scenario.

        Without ``allocation_id`` a new allocation is proposed; with it, the
        payload replaces the live allocation (or an earlier proposal) of that id.
        """
        scenario = self._editable(scenario_id)
        config = self._settings_service.get_system_config()
        self._require_resource(resource_id)
        self._require_project(project_id)
        self._validate_window(start_date, end_date)
        if utilization is None:
            utilization = config.default_allocation_percentage
        self._validate_utilization(utilization, config)
        self._validate_amounts(hourly_rate, billable_rate, total_hours)
        if allocation_id is not None:
            known = any(c.allocation_id == allocation_id for c in scenario.resource_changes)
            if not known and self._allocation_repo.get(allocation_id) is None:
                raise NotFoundError("Allocation not found.", code="ALLOCATION_NOT_FOUND")

        payload = Allocation(
            id=allocation_id or generate_id(),
            resource_id=resource_id,
            project_id=project_id,
            start_date=start_date,
            end_date=end_date,
            utilization=utilization,
            hourly_rate=hourly_rate,
            billable_rate=billable_rate,
            total_hours=total_hours,
            notes=(notes or "").strip(),
        )
        change = ResourceChange.upsert(payload)
        scenario.resource_changes = [
            c for c in scenario.resource_changes if c.allocation_id != payload.id
        ] + [change]
        self._save_edit(scenario)
        return change

    def remove_allocation(self, scenario_id: str, resource_id: str, allocation_id: str) -> Scenario:
        """
        Propose removing an allocation.

        A live allocation gets a removal marker; an allocation that only exists
        as a proposal in this scenario is simply dropped from the change list.
        """
        scenario = self._editable(scenario_id)
        live = self._allocation_repo.get(allocation_id)
        proposed = [c for c in scenario.resource_changes if c.allocation_id == allocation_id]
        if live is None and not proposed:
            raise NotFoundError("Allocation not found.", code="ALLOCATION_NOT_FOUND")
        if live is not None and live.resource_id != resource_id:
            raise ValidationError(
                "Allocation does not belong to the given resource.",
                code="ALLOCATION_RESOURCE_MISMATCH",
            )

        remaining = [c for c in scenario.resource_changes if c.allocation_id != allocation_id]
        if live is not None:
            remaining.append(ResourceChange.removal(resource_id, allocation_id))
        scenario.resource_changes = remaining
        self._save_edit(scenario)
        return scenario

    def add_or_update_timeline_change(
        self,
        scenario_id: str,
        project_id: str,
        new_start: date,
        new_end: date,
        notes: str = "",
    ) -> ProjectTimelineChange:
        scenario = self._editable(scenario_id)
        project = self._require_project(project_id)
        if new_start is None or new_end is None:
            raise ValidationError("Project start and end dates are required.", code="PROJECT_DATES_REQUIRED")
        if new_end < new_start:
            raise ValidationError("Project end date cannot be before start date.", code="PROJECT_END_BEFORE_START")

        existing = next((tc for tc in scenario.timeline_changes if tc.project_id == project_id), None)
        if existing is None:
            change = ProjectTimelineChange.create(
                project_id=project_id,
                original_start=project.start_date,
                original_end=project.end_date,
                new_start=new_start,
                new_end=new_end,
                notes=(notes or "").strip(),
            )
            scenario.timeline_changes.append(change)
        else:
            existing.new_start = new_start
            existing.new_end = new_end
            existing.notes = (notes or "").strip()
            change = existing

        # proposed allocations on the project follow the new window
        for rc in scenario.resource_changes:
            alloc = rc.allocation
            if alloc is None or alloc.project_id != project_id:
                continue
            window = clamp_range(alloc.start_date, alloc.end_date, new_start, new_end)
            alloc.start_date, alloc.end_date = window if window else (new_start, new_end)

        self._save_edit(scenario)
        return change

    def remove_timeline_change(self, scenario_id: str, project_id: str) -> Scenario:
        scenario = self._editable(scenario_id)
        before = len(scenario.timeline_changes)
        scenario.timeline_changes = [tc for tc in scenario.timeline_changes if tc.project_id != project_id]
        if len(scenario.timeline_changes) == before:
            raise NotFoundError("Timeline change not found.", code="TIMELINE_CHANGE_NOT_FOUND")
        self._save_edit(scenario)
        return scenario

    # ---------------- metrics ----------------

    def get_effective_dataset(self, scenario_id: str) -> EffectiveDataset:
        scenario = self.get_scenario(scenario_id)
        live = read_live(self._resource_repo, self._project_repo, self._allocation_repo)
        return resolve(live.resources, live.projects, live.allocations, scenario)

    def calculate_metrics(self, scenario_id: str) -> MetricsSnapshot:
        scenario = self.get_scenario(scenario_id)
        config = self._settings_service.get_system_config()
        live = read_live(self._resource_repo, self._project_repo, self._allocation_repo)
        snapshot = snapshot_for(_frozen_changes(scenario), live, config)
        self._store_snapshot(scenario, snapshot)
        return snapshot

    def get_metrics(self, scenario_id: str) -> ScenarioMetrics:
        scenario = self.get_scenario(scenario_id)
        return ScenarioMetrics(
            scenario_id=scenario.id,
            snapshot=scenario.metrics,
            is_stale=not scenario.has_fresh_metrics,
        )

    def compare_scenarios(
        self,
        scenario_ids: Sequence[str],
        metrics: Sequence[str] | None = None,
    ) -> ScenarioComparison:
        ids, metric_names = comparator.validate_request(scenario_ids, metrics)
        scenarios = [self.get_scenario(sid) for sid in ids]

        snapshots: Dict[str, MetricsSnapshot] = {
            s.id: s.metrics for s in scenarios if s.has_fresh_metrics and s.metrics is not None
        }
        pending = [_frozen_changes(s) for s in scenarios if s.id not in snapshots]
        if pending:
            config = self._settings_service.get_system_config()
            baseline = read_live(self._resource_repo, self._project_repo, self._allocation_repo)
            computed = comparator.compute_snapshots(pending, baseline, config)
            for scenario in scenarios:
                if scenario.id in computed:
                    self._store_snapshot(scenario, computed[scenario.id])
            snapshots.update(computed)

        return comparator.build_comparison(scenarios, snapshots, metric_names)

    # ---------------- promotion ----------------

    def promote_scenario(self, scenario_id: str) -> PromotionResult:
        return self._promotion.promote(scenario_id)

    # ---------------- helpers ----------------

    def _editable(self, scenario_id: str) -> Scenario:
        scenario = self.get_scenario(scenario_id)
        if scenario.is_promoted:
            raise BusinessRuleError("A promoted scenario can no longer be edited.", code="SCENARIO_PROMOTED")
        return scenario

    def _save_edit(self, scenario: Scenario) -> None:
        scenario.touch()
        with self.transaction():
            self._scenario_repo.update(scenario)
        logger.info("Scenario %s edited (change version %s)", scenario.id, scenario.change_version)
        domain_events.scenario_changed.emit(scenario.id)

    def _store_snapshot(self, scenario: Scenario, snapshot: MetricsSnapshot) -> None:
        scenario.metrics = snapshot
        scenario.metrics_version = snapshot.change_version
        try:
            with self.transaction():
                self._scenario_repo.update(scenario)
        except ConcurrencyError:
            # edited while computing; the snapshot is returned but not cached
            logger.info("Scenario %s changed during metrics calculation; snapshot not cached", scenario.id)


def _frozen_changes(scenario: Scenario) -> Scenario:
    """Copy of ``scenario`` whose change lists can no longer be affected by later edits."""
    return replace(
        scenario,
        resource_changes=[
            replace(c, allocation=replace(c.allocation) if c.allocation is not None else None)
            for c in scenario.resource_changes
        ],
        timeline_changes=[replace(tc) for tc in scenario.timeline_changes],
    )


__all__ = ["ScenarioService"]
