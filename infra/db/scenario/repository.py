from __future__ import annotations

from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from core.interfaces import ScenarioRepository
from core.models import Scenario
from infra.db.models import ScenarioORM
from infra.db.optimistic import update_with_version_check
from infra.db.scenario.mapper import scenario_from_orm, scenario_to_orm, scenario_values


class SqlAlchemyScenarioRepository(ScenarioRepository):
    def __init__(self, session: Session):
        self.session = session

    def add(self, scenario: Scenario) -> None:
        self.session.add(scenario_to_orm(scenario))

    def update(self, scenario: Scenario) -> None:
        scenario.version = update_with_version_check(
            self.session,
            ScenarioORM,
            scenario.id,
            getattr(scenario, "version", 1),
            scenario_values(scenario),
            not_found_message="Scenario not found.",
            stale_message="Scenario was updated by another user.",
            not_found_code="SCENARIO_NOT_FOUND",
        )

    def delete(self, scenario_id: str) -> None:
        self.session.query(ScenarioORM).filter_by(id=scenario_id).delete()

    def get(self, scenario_id: str) -> Optional[Scenario]:
        obj = self.session.get(ScenarioORM, scenario_id)
        return scenario_from_orm(obj) if obj else None

    def list_all(self) -> List[Scenario]:
        stmt = select(ScenarioORM).order_by(ScenarioORM.created_at, ScenarioORM.id)
        rows = self.session.execute(stmt).scalars().all()
        return [scenario_from_orm(row) for row in rows]


__all__ = ["SqlAlchemyScenarioRepository"]
