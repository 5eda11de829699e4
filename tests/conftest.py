# tests/conftest.py
import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from core.services.scheduling import ScheduleLockRegistry
from infra.db.base import Base
from infra.db.repositories import (
    SqlAlchemyDependencyRepository,
    SqlAlchemyTaskRepository,
)
from infra.services import build_service_graph


@pytest.fixture
def session():
    # separate in-memory DB for tests
    engine = create_engine("sqlite:///:memory:", future=True)
    TestingSessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        engine.dispose()


@pytest.fixture
def services(session):
    # Recreate what main_plan builds, but with the test session and private locks
    graph = build_service_graph(session, locks=ScheduleLockRegistry())
    services = graph.as_dict()
    services["task_repo"] = SqlAlchemyTaskRepository(session)
    services["dependency_repo"] = SqlAlchemyDependencyRepository(session)
    return services


@pytest.fixture
def project(services):
    return services["project_service"].create_project("Plan Project", "fixture project")
