from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from typing import List, Optional

from core.domain.allocation import Allocation
from core.domain.enums import ScenarioStatus
from core.domain.identifiers import generate_id
from core.domain.metrics import MetricsSnapshot


@dataclass
class ResourceChange:
    """
    What one allocation would look like inside a scenario.

    ``allocation`` is the full replacement payload. When it is ``None`` the
    change is a removal marker for ``allocation_id``.
    """

    id: str
    resource_id: str
    allocation_id: str
    allocation: Optional[Allocation] = None

    @property
    def is_removal(self) -> bool:
        return self.allocation is None

    @staticmethod
    def upsert(allocation: Allocation) -> "ResourceChange":
        return ResourceChange(
            id=generate_id(),
            resource_id=allocation.resource_id,
            allocation_id=allocation.id,
            allocation=allocation,
        )

    @staticmethod
    def removal(resource_id: str, allocation_id: str) -> "ResourceChange":
        return ResourceChange(
            id=generate_id(),
            resource_id=resource_id,
            allocation_id=allocation_id,
            allocation=None,
        )


@dataclass
class ProjectTimelineChange:
    id: str
    project_id: str
    original_start: Optional[date]
    original_end: Optional[date]
    new_start: date
    new_end: date
    notes: str = ""

    @staticmethod
    def create(
        project_id: str,
        original_start: Optional[date],
        original_end: Optional[date],
        new_start: date,
        new_end: date,
        notes: str = "",
    ) -> "ProjectTimelineChange":
        return ProjectTimelineChange(
            id=generate_id(),
            project_id=project_id,
            original_start=original_start,
            original_end=original_end,
            new_start=new_start,
            new_end=new_end,
            notes=notes,
        )


@dataclass
class Scenario:
    id: str
    name: str
    start_date: date
    end_date: date
    description: str = ""
    base_scenario_id: Optional[str] = None
    clone_from_base: bool = False
    status: ScenarioStatus = ScenarioStatus.DRAFT
    resource_changes: List[ResourceChange] = field(default_factory=list)
    timeline_changes: List[ProjectTimelineChange] = field(default_factory=list)
    change_version: int = 0
    metrics: Optional[MetricsSnapshot] = None
    metrics_version: Optional[int] = None
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    promoted_at: Optional[datetime] = None
    version: int = 1

    @property
    def is_promoted(self) -> bool:
        return self.status == ScenarioStatus.PROMOTED

    @property
    def has_fresh_metrics(self) -> bool:
        return self.metrics is not None and self.metrics_version == self.change_version

    def touch(self) -> None:
        """Record that the change lists were edited."""
        self.change_version += 1
        if self.status == ScenarioStatus.REJECTED:
            self.status = ScenarioStatus.DRAFT

    @staticmethod
    def create(
        name: str,
        start_date: date,
        end_date: date,
        description: str = "",
        base_scenario_id: Optional[str] = None,
        clone_from_base: bool = False,
    ) -> "Scenario":
        return Scenario(
            id=generate_id(),
            name=name.strip(),
            start_date=start_date,
            end_date=end_date,
            description=description,
            base_scenario_id=base_scenario_id,
            clone_from_base=clone_from_base,
        )


__all__ = ["ResourceChange", "ProjectTimelineChange", "Scenario"]
