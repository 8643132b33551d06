from __future__ import annotations

from typing import Any

from sqlalchemy import update
from sqlalchemy.orm import Session

from core.exceptions import ConcurrencyError, NotFoundError


def update_with_version_check(
    session: Session,
    orm_type: type[Any],
    row_id: str,
    expected_version: int,
    values: dict[str, Any],
    *,
    not_found_message: str,
    stale_message: str,
    not_found_code: str = "NOT_FOUND",
) -> int:
    """
    Write ``values`` only if the row still carries ``expected_version``.

    Returns the bumped version. A missing row raises NotFoundError, a row that
    moved on raises ConcurrencyError(code="STALE_WRITE").
    """
    next_version = int(expected_version) + 1
    stmt = (
        update(orm_type)
        .where(orm_type.id == row_id, orm_type.version == expected_version)
        .values(**values, version=next_version)
    )
    result = session.execute(stmt)
    if result.rowcount == 1:
        return next_version

    if session.get(orm_type, row_id) is None:
        raise NotFoundError(not_found_message, code=not_found_code)
    raise ConcurrencyError(stale_message, code="STALE_WRITE")


__all__ = ["update_with_version_check"]
