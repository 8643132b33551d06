from infra.db.scenario.mapper import scenario_from_orm, scenario_to_orm
from infra.db.scenario.repository import SqlAlchemyScenarioRepository

__all__ = [
    "scenario_to_orm",
    "scenario_from_orm",
    "SqlAlchemyScenarioRepository",
]
