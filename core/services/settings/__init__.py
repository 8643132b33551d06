from .policy import build_system_config
from .service import SettingsService

__all__ = ["SettingsService", "build_system_config"]
