from __future__ import annotations

import logging
from datetime import date
from typing import List, Optional

from sqlalchemy.orm import Session

from core.events.domain_events import domain_events
from core.exceptions import ConcurrencyError, NotFoundError
from core.interfaces import AllocationRepository, ProjectRepository, ResourceRepository
from core.models import Allocation, Resource
from core.services.allocation import aggregator
from core.services.allocation.models import (
    CapacityCell,
    CapacityForecast,
    MonthlyForecast,
    MonthlyForecastRow,
    ResourceCapacityRow,
    ResourceUtilization,
)
from core.services.allocation.validation import AllocationValidationMixin
from core.services.common.base import ServiceBase
from core.services.common.locks import PLANNING_WRITE_LOCK
from core.services.common.temporal import iter_months, iter_weeks
from core.services.settings.service import SettingsService

logger = logging.getLogger(__name__)


class AllocationService(AllocationValidationMixin, ServiceBase):
    def __init__(
        self,
        session: Session,
        resource_repo: ResourceRepository,
        project_repo: ProjectRepository,
        allocation_repo: AllocationRepository,
        settings_service: SettingsService,
    ):
        super().__init__(session)
        self._resource_repo = resource_repo
        self._project_repo = project_repo
        self._allocation_repo = allocation_repo
        self._settings_service = settings_service
        self._last_overallocation_warning: str | None = None

    def consume_last_overallocation_warning(self) -> str | None:
        warning = self._last_overallocation_warning
        self._last_overallocation_warning = None
        return warning

    # ---------------- live writes ----------------

    def create_allocation(
        self,
        resource_id: str,
        project_id: str,
        start_date: date,
        end_date: date,
        utilization: int | None = None,
        hourly_rate: float | None = None,
        billable_rate: float | None = None,
        total_hours: float | None = None,
        notes: str = "",
    ) -> Allocation:
        config = self._settings_service.get_system_config()
        self._require_resource(resource_id)
        self._require_project(project_id)
        self._validate_window(start_date, end_date)
        if utilization is None:
            utilization = config.default_allocation_percentage
        self._validate_utilization(utilization, config)
        self._validate_amounts(hourly_rate, billable_rate, total_hours)

        allocation = Allocation.create(
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
        with PLANNING_WRITE_LOCK:
            with self.transaction():
                self._allocation_repo.add(allocation)
                self._resource_repo.bump_version(resource_id)
            logger.info(
                "Created allocation %s: resource=%s project=%s %s%%",
                allocation.id, resource_id, project_id, utilization,
            )
            self._check_overallocation(resource_id)
        domain_events.allocations_changed.emit(resource_id)
        return allocation

    def update_allocation(
        self,
        allocation_id: str,
        expected_version: int | None = None,
        start_date: date | None = None,
        end_date: date | None = None,
        utilization: int | None = None,
        hourly_rate: float | None = None,
        billable_rate: float | None = None,
        total_hours: float | None = None,
        notes: str | None = None,
    ) -> Allocation:
        allocation = self.get_allocation(allocation_id)
        if expected_version is not None and allocation.version != expected_version:
            raise ConcurrencyError(
                "Allocation changed since you opened it. Refresh and try again.",
                code="STALE_WRITE",
            )
        config = self._settings_service.get_system_config()

        if start_date is not None:
            allocation.start_date = start_date
        if end_date is not None:
            allocation.end_date = end_date
        self._validate_window(allocation.start_date, allocation.end_date)
        if utilization is not None:
            allocation.utilization = self._validate_utilization(utilization, config)
        self._validate_amounts(hourly_rate, billable_rate, total_hours)
        if hourly_rate is not None:
            allocation.hourly_rate = hourly_rate
        if billable_rate is not None:
            allocation.billable_rate = billable_rate
        if total_hours is not None:
            allocation.total_hours = total_hours
        if notes is not None:
            allocation.notes = notes.strip()

        with PLANNING_WRITE_LOCK:
            with self.transaction():
                self._allocation_repo.update(allocation)
                self._resource_repo.bump_version(allocation.resource_id)
            self._check_overallocation(allocation.resource_id)
        domain_events.allocations_changed.emit(allocation.resource_id)
        return allocation

    def delete_allocation(self, allocation_id: str) -> None:
        allocation = self.get_allocation(allocation_id)
        with self.transaction():
            self._allocation_repo.delete(allocation_id)
        logger.info("Deleted allocation %s", allocation_id)
        domain_events.allocations_changed.emit(allocation.resource_id)

    # ---------------- reads ----------------

    def get_allocation(self, allocation_id: str) -> Allocation:
        allocation = self._allocation_repo.get(allocation_id)
        if not allocation:
            raise NotFoundError("Allocation not found.", code="ALLOCATION_NOT_FOUND")
        return allocation

    def list_allocations(self, resource_id: str | None = None, project_id: str | None = None) -> List[Allocation]:
        if resource_id is not None:
            rows = self._allocation_repo.list_by_resource(resource_id)
        elif project_id is not None:
            rows = self._allocation_repo.list_by_project(project_id)
        else:
            rows = self._allocation_repo.list_all()
        if resource_id is not None and project_id is not None:
            rows = [a for a in rows if a.project_id == project_id]
        return rows

    def get_resource_utilization(self, resource_id: str, as_of: Optional[date] = None) -> ResourceUtilization:
        resource = self._require_resource(resource_id)
        config = self._settings_service.get_system_config()
        threshold = int(config.max_utilization_percentage)
        total = aggregator.total_utilization(resource, as_of)
        today = as_of or date.today()
        return ResourceUtilization(
            resource_id=resource.id,
            total=total,
            is_over_allocated=aggregator.is_over_allocated(resource, threshold),
            threshold=threshold,
            status=aggregator.allocation_status(resource, today, threshold, config.ending_soon_days),
            current=aggregator.total_utilization(resource, today),
        )

    def get_capacity_forecast(self, start_date: date, weeks: int) -> CapacityForecast:
        config = self._settings_service.get_system_config()
        week_starts = list(iter_weeks(start_date, weeks))
        rows: List[ResourceCapacityRow] = []
        for resource in self._active_resources():
            capacity = self._capacity_for(resource, config.default_weekly_capacity_hours)
            cells = [
                CapacityCell(
                    week_start=ws,
                    utilization=aggregator.total_utilization(resource, ws),
                    available_hours=aggregator.availability(resource, ws, capacity),
                )
                for ws in week_starts
            ]
            rows.append(
                ResourceCapacityRow(
                    resource_id=resource.id,
                    resource_name=resource.name,
                    capacity_hours=capacity,
                    cells=cells,
                )
            )
        return CapacityForecast(start_date=start_date, weeks=week_starts, rows=rows)

    def get_monthly_forecast(self, start_date: date, months: int) -> MonthlyForecast:
        keys = [key for key, _s, _e in iter_months(start_date, months)]
        rows = [
            MonthlyForecastRow(
                resource_id=resource.id,
                resource_name=resource.name,
                by_month=aggregator.utilization_by_month(resource, start_date, months),
            )
            for resource in self._active_resources()
        ]
        return MonthlyForecast(start_date=start_date, months=keys, rows=rows)

    def list_over_allocated(self) -> List[ResourceUtilization]:
        out: List[ResourceUtilization] = []
        for resource in self._active_resources():
            usage = self.get_resource_utilization(resource.id)
            if usage.is_over_allocated:
                out.append(usage)
        return out

    # ---------------- helpers ----------------

    def _active_resources(self) -> List[Resource]:
        resources = [r for r in self._resource_repo.list_all() if r.is_active]
        return sorted(resources, key=lambda r: (r.name or "").lower())

    @staticmethod
    def _capacity_for(resource: Resource, default_hours: float) -> float:
        if resource.weekly_capacity_hours is None:
            return float(default_hours)
        return float(resource.weekly_capacity_hours)

    def _check_overallocation(self, resource_id: str) -> None:
        resource = self._resource_repo.get(resource_id)
        if resource is None:
            return
        threshold = int(self._settings_service.get_system_config().max_utilization_percentage)
        total = aggregator.total_utilization(resource)
        if total > threshold:
            message = f"Resource '{resource.name}' is allocated {total}% (threshold {threshold}%)."
            self._last_overallocation_warning = message
            logger.warning(message)


__all__ = ["AllocationService"]
