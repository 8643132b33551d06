from __future__ import annotations
from typing import List, Optional
from sqlalchemy.orm import Session

from core.events.domain_events import domain_events
from core.models import Resource, ResourceSkill
from core.interfaces import ResourceRepository, AllocationRepository
from core.exceptions import ConcurrencyError, NotFoundError, ValidationError
import logging

logger = logging.getLogger(__name__)

class ResourceService:
    def __init__(self, session: Session,
                 resource_repo: ResourceRepository,
                 allocation_repo: AllocationRepository,
        ):
        self._session = session
        self._resource_repo = resource_repo
        self._allocation_repo = allocation_repo

    def create_resource(
        self,
        name: str,
        role: str = "",
        hourly_rate: float = 0.0,
        billable_rate: float = 0.0,
        currency_code: str | None = None,
        weekly_capacity_hours: float | None = None,
        skills: Optional[List[ResourceSkill]] = None,
        is_active: bool = True,
    ) -> Resource:
        if not name or not name.strip():
            raise ValidationError("Resource name cannot be empty.", code="RESOURCE_NAME_EMPTY")
        self._validate_rates(hourly_rate, billable_rate, weekly_capacity_hours)
        resource = Resource.create(
            name=name.strip(),
            role=role.strip(),
            skills=self._clean_skills(skills),
            hourly_rate=hourly_rate,
            billable_rate=billable_rate,
            currency_code=(currency_code or "").strip().upper() or None,
            weekly_capacity_hours=weekly_capacity_hours,
            is_active=is_active,
        )
        try:
            self._resource_repo.add(resource)
            self._session.commit()
            logger.info(f"Created resource {resource.id} - {resource.name}")
        except Exception as e:
            self._session.rollback()
            logger.error(f"Error creating resource: {e}")
            raise
        return resource

    def update_resource(
        self,
        resource_id: str,
        expected_version: int | None = None,
        name: str | None = None,
        role: str | None = None,
        hourly_rate: float | None = None,
        billable_rate: float | None = None,
        currency_code: str | None = None,
        weekly_capacity_hours: float | None = None,
        skills: Optional[List[ResourceSkill]] = None,
        is_active: bool | None = None,
    ) -> Resource:
        resource = self.get_resource(resource_id)
        if expected_version is not None and resource.version != expected_version:
            raise ConcurrencyError(
                "Resource changed since you opened it. Refresh and try again.",
                code="STALE_WRITE",
            )
        self._validate_rates(hourly_rate, billable_rate, weekly_capacity_hours)

        if name is not None:
            if not name.strip():
                raise ValidationError("Resource name cannot be empty.", code="RESOURCE_NAME_EMPTY")
            resource.name = name.strip()
        if role is not None:
            resource.role = role.strip()
        if hourly_rate is not None:
            resource.hourly_rate = hourly_rate
        if billable_rate is not None:
            resource.billable_rate = billable_rate
        if currency_code is not None:
            resource.currency_code = currency_code.strip().upper() or None
        if weekly_capacity_hours is not None:
            resource.weekly_capacity_hours = weekly_capacity_hours
        if skills is not None:
            resource.skills = self._clean_skills(skills)
        if is_active is not None:
            resource.is_active = is_active

        try:
            self._resource_repo.update(resource)
            self._session.commit()
        except Exception as e:
            self._session.rollback()
            raise e
        return resource

    def list_resources(self) -> List[Resource]:
        return self._resource_repo.list_all()

    def get_resource(self, resource_id: str) -> Resource:
        resource = self._resource_repo.get(resource_id)
        if not resource:
            raise NotFoundError("Resource not found.", code="RESOURCE_NOT_FOUND")
        return resource

    def delete_resource(self, resource_id: str) -> None:
        self.get_resource(resource_id)

        try:
            # allocations go first
            for a in self._allocation_repo.list_by_resource(resource_id):
                self._allocation_repo.delete(a.id)
            self._resource_repo.delete(resource_id)
            self._session.commit()
        except Exception as e:
            self._session.rollback()
            raise e
        domain_events.allocations_changed.emit(resource_id)

    @staticmethod
    def _validate_rates(hourly_rate, billable_rate, weekly_capacity_hours) -> None:
        if hourly_rate is not None and hourly_rate < 0:
            raise ValidationError("Hourly rate cannot be negative.", code="RATE_NEGATIVE")
        if billable_rate is not None and billable_rate < 0:
            raise ValidationError("Billable rate cannot be negative.", code="RATE_NEGATIVE")
        if weekly_capacity_hours is not None and weekly_capacity_hours < 0:
            raise ValidationError("Weekly capacity cannot be negative.", code="CAPACITY_NEGATIVE")

    @staticmethod
    def _clean_skills(skills: Optional[List[ResourceSkill]]) -> List[ResourceSkill]:
        cleaned: List[ResourceSkill] = []
        seen: set[str] = set()
        for skill in skills or []:
            key = (skill.name or "").strip().lower()
            if not key or key in seen:
                continue
            seen.add(key)
            cleaned.append(ResourceSkill(name=skill.name.strip(), proficiency=skill.proficiency))
        return cleaned
