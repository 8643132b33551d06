# tests/conftest.py
import os
import tempfile

# keep the default engine and log files out of the real per-user data dir
os.environ.setdefault("RP_DATA_DIR", tempfile.mkdtemp(prefix="rp-tests-"))

import pytest
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker

from core.services.settings.policy import ENV_OVERRIDES
from infra.db.base import Base
from infra.services import build_service_graph


@pytest.fixture(autouse=True)
def _clear_setting_overrides(monkeypatch):
    for env_name in ENV_OVERRIDES.values():
        monkeypatch.delenv(env_name, raising=False)


@pytest.fixture
def engine():
    # separate in-memory DB for tests
    engine = create_engine("sqlite:///:memory:", future=True)

    @event.listens_for(engine, "connect")
    def _enable_foreign_keys(dbapi_connection, _record):
        dbapi_connection.execute("PRAGMA foreign_keys=ON")

    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def session(engine):
    TestingSessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def services(session):
    # same wiring as main.build_services(), on the test session
    return build_service_graph(session).as_dict()
