# infra/db/repositories.py
# Flat import surface for the SQLAlchemy repositories.
from infra.db.allocation.repository import SqlAlchemyAllocationRepository
from infra.db.project.repository import SqlAlchemyProjectRepository
from infra.db.resource.repository import SqlAlchemyResourceRepository
from infra.db.scenario.repository import SqlAlchemyScenarioRepository
from infra.db.settings.repository import SqlAlchemySettingsRepository

__all__ = [
    "SqlAlchemyAllocationRepository",
    "SqlAlchemyProjectRepository",
    "SqlAlchemyResourceRepository",
    "SqlAlchemyScenarioRepository",
    "SqlAlchemySettingsRepository",
]
