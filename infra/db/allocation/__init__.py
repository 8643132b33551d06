from infra.db.allocation.mapper import (
    allocation_from_dict,
    allocation_from_orm,
    allocation_to_dict,
    allocation_to_orm,
)
from infra.db.allocation.repository import SqlAlchemyAllocationRepository

__all__ = [
    "allocation_to_orm",
    "allocation_from_orm",
    "allocation_to_dict",
    "allocation_from_dict",
    "SqlAlchemyAllocationRepository",
]
