from __future__ import annotations

from datetime import datetime, timezone
from typing import Dict

from sqlalchemy import select
from sqlalchemy.orm import Session

from core.interfaces import SettingsRepository
from infra.db.models import SystemSettingORM


class SqlAlchemySettingsRepository(SettingsRepository):
    def __init__(self, session: Session):
        self.session = session

    def get_all(self) -> Dict[str, str]:
        rows = self.session.execute(select(SystemSettingORM)).scalars().all()
        return {row.key: row.value for row in rows}

    def set(self, key: str, value: str) -> None:
        now = datetime.now(timezone.utc)
        obj = self.session.get(SystemSettingORM, key)
        if obj is None:
            self.session.add(SystemSettingORM(key=key, value=value, updated_at=now))
            return
        obj.value = value
        obj.updated_at = now


__all__ = ["SqlAlchemySettingsRepository"]
