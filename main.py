# main.py
import logging
from datetime import date

from infra.db.base import SessionLocal, db_url
from infra.logging_config import setup_logging
from infra.migrate import run_migrations
from infra.services import ServiceGraph, build_service_graph

logger = logging.getLogger(__name__)


def build_services() -> ServiceGraph:
    run_migrations(db_url=db_url)
    session = SessionLocal()
    return build_service_graph(session)


def log_portfolio_summary(services: ServiceGraph, today: date | None = None) -> None:
    today = today or date.today()
    config = services.settings_service.get_system_config()
    resources = services.resource_service.list_resources()
    projects = services.project_service.list_projects()
    scenarios = services.scenario_service.list_scenarios()
    logger.info(
        "Loaded %d resources, %d projects, %d scenarios (threshold %d%%, overallocation %s)",
        len(resources),
        len(projects),
        len(scenarios),
        config.max_utilization_percentage,
        "allowed" if config.allow_overallocation else "blocked",
    )
    for row in services.allocation_service.list_over_allocated():
        logger.warning(
            "Resource %s is over-allocated at %d%% (threshold %d%%)",
            row.resource_id,
            row.total,
            row.threshold,
        )


def main() -> int:
    setup_logging()
    services = build_services()
    try:
        log_portfolio_summary(services)
    finally:
        services.session.close()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
