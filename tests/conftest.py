import os

# must be set before core.database builds the process engine
os.environ["DATABASE_URL"] = "sqlite+pysqlite:///:memory:"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool

from core.database import Base, build_engine, build_sessionmaker
from core.init_db import ensure_statistics
from game_management.dependencies import get_store
from game_management.store import GameStore


@pytest.fixture
def engine():
    engine = build_engine("sqlite+pysqlite:///:memory:", poolclass=StaticPool)
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return build_sessionmaker(engine)


@pytest.fixture
def store(session_factory):
    ensure_statistics(session_factory)
    return GameStore(session_factory)


@pytest.fixture
def uninitialized_store(session_factory):
    return GameStore(session_factory)


@pytest.fixture
def client(store):
    from main import create_app

    app = create_app(lifespan=None)
    app.dependency_overrides[get_store] = lambda: store
    with TestClient(app) as c:
        yield c
