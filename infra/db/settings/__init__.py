from infra.db.settings.repository import SqlAlchemySettingsRepository

__all__ = ["SqlAlchemySettingsRepository"]
