from __future__ import annotations

from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from core.interfaces import AllocationRepository
from core.models import Allocation
from infra.db.allocation.mapper import allocation_from_orm, allocation_to_orm
from infra.db.models import AllocationORM
from infra.db.optimistic import update_with_version_check


class SqlAlchemyAllocationRepository(AllocationRepository):
    def __init__(self, session: Session):
        self.session = session

    def add(self, allocation: Allocation) -> None:
        self.session.add(allocation_to_orm(allocation))

    def update(self, allocation: Allocation) -> None:
        allocation.version = update_with_version_check(
            self.session,
            AllocationORM,
            allocation.id,
            getattr(allocation, "version", 1),
            {
                "resource_id": allocation.resource_id,
                "project_id": allocation.project_id,
                "start_date": allocation.start_date,
                "end_date": allocation.end_date,
                "utilization": int(allocation.utilization),
                "hourly_rate": allocation.hourly_rate,
                "billable_rate": allocation.billable_rate,
                "total_hours": allocation.total_hours,
                "notes": allocation.notes or "",
            },
            not_found_message="Allocation not found.",
            stale_message="Allocation was updated by another user.",
            not_found_code="ALLOCATION_NOT_FOUND",
        )

    def delete(self, allocation_id: str) -> None:
        self.session.query(AllocationORM).filter_by(id=allocation_id).delete()

    def get(self, allocation_id: str) -> Optional[Allocation]:
        obj = self.session.get(AllocationORM, allocation_id)
        return allocation_from_orm(obj) if obj else None

    def list_all(self) -> List[Allocation]:
        stmt = select(AllocationORM).order_by(AllocationORM.start_date, AllocationORM.id)
        rows = self.session.execute(stmt).scalars().all()
        return [allocation_from_orm(row) for row in rows]

    def list_by_resource(self, resource_id: str) -> List[Allocation]:
        stmt = (
            select(AllocationORM)
            .where(AllocationORM.resource_id == resource_id)
            .order_by(AllocationORM.start_date, AllocationORM.id)
        )
        rows = self.session.execute(stmt).scalars().all()
        return [allocation_from_orm(row) for row in rows]

    def list_by_project(self, project_id: str) -> List[Allocation]:
        stmt = (
            select(AllocationORM)
            .where(AllocationORM.project_id == project_id)
            .order_by(AllocationORM.start_date, AllocationORM.id)
        )
        rows = self.session.execute(stmt).scalars().all()
        return [allocation_from_orm(row) for row in rows]


__all__ = ["SqlAlchemyAllocationRepository"]
