"""
Test configuration and fixtures for the shortlink service.
This centralizes all test setup, making individual tests clean.
"""

import time

import pytest
from fastapi.testclient import TestClient

from main import create_app
from shortlink_app.background.strategies import TaskSpawnRunner
from shortlink_app.cache.strategies import InMemoryCache
from shortlink_app.config import Settings
from shortlink_app.context import AppContext
from shortlink_app.database.connection import Base, create_db_engine
from shortlink_app.storage.strategies import SQLAlchemyLinkStore


@pytest.fixture(scope="function")
def test_settings(tmp_path):
    """Settings pointing at a throwaway SQLite file and no Redis."""
    return Settings(
        database_url=f"sqlite:///{tmp_path / 'test.db'}",
        cache_backend="memory",
        background_backend="tasks",
        base_url=None,
    )


@pytest.fixture(scope="function")
def link_store(test_settings):
    """
    Create a fresh link store for each test.
    This ensures tests are isolated and don't affect each other.
    """
    engine = create_db_engine(test_settings.database_url)
    store = SQLAlchemyLinkStore(engine)
    store.create_schema()

    try:
        yield store
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture(scope="function")
def cache():
    return InMemoryCache()


@pytest.fixture(scope="function")
def runner():
    return TaskSpawnRunner()


@pytest.fixture(scope="function")
def app_context(test_settings, link_store, cache, runner):
    return AppContext(
        settings=test_settings,
        store=link_store,
        cache=cache,
        runner=runner,
    )


@pytest.fixture(scope="function")
def client(app_context):
    """
    Create a test client running on the test context.
    This is the main fixture that API tests will use.
    """
    app = create_app(context=app_context)

    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def wait_until():
    """
    Poll a condition until it holds.

    Background work runs on the app's event loop after the response,
    so its effects are only eventually visible to the test.
    """
    def _wait_until(predicate, timeout: float = 3.0, interval: float = 0.02) -> bool:
        deadline = time.monotonic() + timeout
        while time.monotonic() < deadline:
            if predicate():
                return True
            time.sleep(interval)
        return predicate()

    return _wait_until
