from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from core.interfaces import SettingsRepository
from core.models import SystemConfig
from core.services.common.base import ServiceBase
from core.services.settings.policy import build_system_config, parse_setting

logger = logging.getLogger(__name__)


class SettingsService(ServiceBase):
    def __init__(self, session: Session, settings_repo: SettingsRepository):
        super().__init__(session)
        self._settings_repo = settings_repo

    def get_system_config(self) -> SystemConfig:
        return build_system_config(self._settings_repo.get_all())

    def update_setting(self, key: str, value) -> SystemConfig:
        key = (key or "").strip()
        raw = str(value).strip().lower() if isinstance(value, bool) else str(value).strip()
        parse_setting(key, raw)
        with self.transaction():
            self._settings_repo.set(key, raw)
        logger.info("Updated system setting %s=%s", key, raw)
        return self.get_system_config()


__all__ = ["SettingsService"]
