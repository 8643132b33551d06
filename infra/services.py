from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from sqlalchemy.orm import Session

from core.services.allocation import AllocationService
from core.services.finance import FinancialService
from core.services.project.service import ProjectService
from core.services.resource.service import ResourceService
from core.services.scenario import PromotionCoordinator, ScenarioService
from core.services.settings import SettingsService
from core.services.skills import SkillsCoverageService
from infra.db.repositories import (
    SqlAlchemyAllocationRepository,
    SqlAlchemyProjectRepository,
    SqlAlchemyResourceRepository,
    SqlAlchemyScenarioRepository,
    SqlAlchemySettingsRepository,
)
from infra.operational_support import bind_trace_id


@dataclass(frozen=True)
class ServiceGraph:
    session: Session
    settings_service: SettingsService
    resource_service: ResourceService
    project_service: ProjectService
    allocation_service: AllocationService
    financial_service: FinancialService
    skills_service: SkillsCoverageService
    promotion_coordinator: PromotionCoordinator
    scenario_service: ScenarioService

    def as_dict(self) -> dict[str, Any]:
        return {
            "session": self.session,
            "settings_service": self.settings_service,
            "resource_service": self.resource_service,
            "project_service": self.project_service,
            "allocation_service": self.allocation_service,
            "financial_service": self.financial_service,
            "skills_service": self.skills_service,
            "promotion_coordinator": self.promotion_coordinator,
            "scenario_service": self.scenario_service,
        }


def build_service_graph(session: Session) -> ServiceGraph:
    resource_repo = SqlAlchemyResourceRepository(session)
    project_repo = SqlAlchemyProjectRepository(session)
    allocation_repo = SqlAlchemyAllocationRepository(session)
    scenario_repo = SqlAlchemyScenarioRepository(session)
    settings_repo = SqlAlchemySettingsRepository(session)

    settings_service = SettingsService(session, settings_repo)
    resource_service = ResourceService(session, resource_repo, allocation_repo)
    project_service = ProjectService(session, project_repo, allocation_repo)
    allocation_service = AllocationService(
        session,
        resource_repo,
        project_repo,
        allocation_repo,
        settings_service,
    )
    financial_service = FinancialService(
        project_repo=project_repo,
        resource_repo=resource_repo,
        settings_service=settings_service,
    )
    skills_service = SkillsCoverageService(
        project_repo=project_repo,
        resource_repo=resource_repo,
    )
    promotion_coordinator = PromotionCoordinator(
        session,
        resource_repo=resource_repo,
        project_repo=project_repo,
        allocation_repo=allocation_repo,
        scenario_repo=scenario_repo,
        settings_service=settings_service,
        trace_context=bind_trace_id,
    )
    scenario_service = ScenarioService(
        session,
        scenario_repo,
        resource_repo,
        project_repo,
        allocation_repo,
        settings_service,
        promotion_coordinator,
    )

    return ServiceGraph(
        session=session,
        settings_service=settings_service,
        resource_service=resource_service,
        project_service=project_service,
        allocation_service=allocation_service,
        financial_service=financial_service,
        skills_service=skills_service,
        promotion_coordinator=promotion_coordinator,
        scenario_service=scenario_service,
    )


def build_service_dict(session: Session) -> dict[str, Any]:
    return build_service_graph(session).as_dict()
