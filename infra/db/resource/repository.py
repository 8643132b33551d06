from __future__ import annotations

from typing import List, Optional

from sqlalchemy import select, update
from sqlalchemy.orm import Session

from core.interfaces import ResourceRepository
from core.models import Resource
from infra.db.models import ResourceORM
from infra.db.optimistic import update_with_version_check
from infra.db.resource.mapper import resource_from_orm, resource_to_orm, skills_to_json


class SqlAlchemyResourceRepository(ResourceRepository):
    def __init__(self, session: Session):
        self.session = session

    def add(self, resource: Resource) -> None:
        self.session.add(resource_to_orm(resource))

    def update(self, resource: Resource) -> None:
        resource.version = update_with_version_check(
            self.session,
            ResourceORM,
            resource.id,
            getattr(resource, "version", 1),
            {
                "name": resource.name,
                "role": resource.role,
                "hourly_rate": resource.hourly_rate,
                "billable_rate": resource.billable_rate,
                "currency_code": resource.currency_code,
                "weekly_capacity_hours": resource.weekly_capacity_hours,
                "skills_json": skills_to_json(resource.skills),
                "is_active": resource.is_active,
            },
            not_found_message="Resource not found.",
            stale_message="Resource was updated by another user.",
            not_found_code="RESOURCE_NOT_FOUND",
        )

    def bump_version(self, resource_id: str, expected_version: int | None = None) -> None:
        """Advance the resource version, marking a change to its committed load.

        With ``expected_version`` the bump is conditional and a resource that
        moved on raises ConcurrencyError.
        """
        if expected_version is not None:
            update_with_version_check(
                self.session,
                ResourceORM,
                resource_id,
                expected_version,
                {},
                not_found_message="Resource not found.",
                stale_message="Resource allocations changed while the write was in progress.",
                not_found_code="RESOURCE_NOT_FOUND",
            )
            return
        stmt = (
            update(ResourceORM)
            .where(ResourceORM.id == resource_id)
            .values(version=ResourceORM.version + 1)
            .execution_options(synchronize_session="fetch")
        )
        self.session.execute(stmt)

    def delete(self, resource_id: str) -> None:
        self.session.query(ResourceORM).filter_by(id=resource_id).delete()

    def get(self, resource_id: str) -> Optional[Resource]:
        obj = self.session.get(ResourceORM, resource_id)
        return resource_from_orm(obj) if obj else None

    def list_all(self) -> List[Resource]:
        stmt = select(ResourceORM).order_by(ResourceORM.name, ResourceORM.id)
        rows = self.session.execute(stmt).scalars().all()
        return [resource_from_orm(row) for row in rows]


__all__ = ["SqlAlchemyResourceRepository"]
