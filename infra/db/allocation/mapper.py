from __future__ import annotations

from typing import Any

from core.models import Allocation
from infra.db.models import AllocationORM
from infra.db.serialization import parse_date


def allocation_to_orm(allocation: Allocation) -> AllocationORM:
    return AllocationORM(
        id=allocation.id,
        resource_id=allocation.resource_id,
        project_id=allocation.project_id,
        start_date=allocation.start_date,
        end_date=allocation.end_date,
        utilization=int(allocation.utilization),
        hourly_rate=allocation.hourly_rate,
        billable_rate=allocation.billable_rate,
        total_hours=allocation.total_hours,
        notes=allocation.notes or "",
        version=getattr(allocation, "version", 1),
    )


def allocation_from_orm(obj: AllocationORM) -> Allocation:
    return Allocation(
        id=obj.id,
        resource_id=obj.resource_id,
        project_id=obj.project_id,
        start_date=obj.start_date,
        end_date=obj.end_date,
        utilization=int(obj.utilization or 0),
        hourly_rate=obj.hourly_rate,
        billable_rate=obj.billable_rate,
        total_hours=obj.total_hours,
        notes=obj.notes or "",
        version=getattr(obj, "version", 1),
    )


def allocation_to_dict(allocation: Allocation) -> dict[str, Any]:
    return {
        "id": allocation.id,
        "resource_id": allocation.resource_id,
        "project_id": allocation.project_id,
        "start_date": allocation.start_date.isoformat(),
        "end_date": allocation.end_date.isoformat(),
        "utilization": int(allocation.utilization),
        "hourly_rate": allocation.hourly_rate,
        "billable_rate": allocation.billable_rate,
        "total_hours": allocation.total_hours,
        "notes": allocation.notes or "",
    }


def allocation_from_dict(data: dict[str, Any]) -> Allocation:
    return Allocation(
        id=str(data["id"]),
        resource_id=str(data["resource_id"]),
        project_id=str(data["project_id"]),
        start_date=parse_date(data["start_date"]),
        end_date=parse_date(data["end_date"]),
        utilization=int(data.get("utilization") or 0),
        hourly_rate=data.get("hourly_rate"),
        billable_rate=data.get("billable_rate"),
        total_hours=data.get("total_hours"),
        notes=data.get("notes") or "",
    )


__all__ = [
    "allocation_to_orm",
    "allocation_from_orm",
    "allocation_to_dict",
    "allocation_from_dict",
]
