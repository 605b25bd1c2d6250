"""
Pytest configuration and shared fixtures for motor-mongoose tests.

This module provides:
- Mock Motor collection and connection fixtures
- Real MongoDB fixtures (testcontainers) for integration tests
"""

import os
from typing import Any, AsyncGenerator, Dict
from unittest.mock import AsyncMock, MagicMock

import pytest
from motor.motor_asyncio import AsyncIOMotorCollection

from motor_mongoose.database.connection import ConnectionManager, connect
from motor_mongoose.observability import (
    clear_collection_context,
    clear_correlation_id,
    get_metrics_collector,
)

# ============================================================================
# MOCK MONGODB FIXTURES
# ============================================================================


def make_cursor(docs: list[dict[str, Any]] | None = None) -> MagicMock:
    """Cursor mock whose to_list() resolves to ``docs``."""
    cursor = MagicMock()
    cursor.to_list = AsyncMock(return_value=list(docs or []))
    return cursor


@pytest.fixture
def mock_mongo_collection() -> MagicMock:
    """Create a mock Motor collection."""
    collection = MagicMock(spec=AsyncIOMotorCollection)
    collection.name = "users"
    collection.find_one = AsyncMock(return_value=None)
    collection.find = MagicMock(return_value=make_cursor())
    collection.aggregate = MagicMock(return_value=make_cursor())
    collection.insert_one = AsyncMock(return_value=MagicMock(inserted_id="test_id"))
    collection.find_one_and_update = AsyncMock(return_value=None)
    collection.create_index = AsyncMock(return_value="field_1")
    return collection


@pytest.fixture
def mock_connection(mock_mongo_collection: MagicMock) -> MagicMock:
    """Create an initialized-looking ConnectionManager that serves the mock collection."""
    connection = MagicMock(spec=ConnectionManager)
    connection.operation_timeout = 10.0
    connection.get_collection = MagicMock(return_value=mock_mongo_collection)
    return connection


@pytest.fixture
def connection_config() -> Dict[str, Any]:
    """Provide default configuration for ConnectionManager."""
    return {
        "mongo_uri": "mongodb://localhost:27017",
        "db_name": "test_db",
        "max_pool_size": 10,
        "min_pool_size": 1,
    }


# ============================================================================
# ENVIRONMENT AND GLOBAL STATE
# ============================================================================


@pytest.fixture(autouse=True)
def reset_environment(monkeypatch):
    """Clear configuration env vars before each test."""
    for var in [
        "MONGO_URI",
        "DB_NAME",
        "MONGO_MAX_POOL_SIZE",
        "MONGO_MIN_POOL_SIZE",
        "MONGO_SERVER_SELECTION_TIMEOUT_MS",
        "MONGOOSE_OPERATION_TIMEOUT",
    ]:
        monkeypatch.delenv(var, raising=False)
    yield


@pytest.fixture(autouse=True)
def reset_metrics():
    """Start each test with an empty metrics collector."""
    get_metrics_collector().reset()
    yield
    get_metrics_collector().reset()


@pytest.fixture(autouse=True)
def reset_logging_context():
    """Drop any correlation ID or collection context left by a test."""
    yield
    clear_correlation_id()
    clear_collection_context()


# ============================================================================
# TESTCONTAINERS FIXTURES (Real MongoDB for Integration Tests)
# ============================================================================


@pytest.fixture(scope="session")
def mongodb_container():
    """
    Start a MongoDB container for integration tests.

    Session-scoped: the container starts once and is reused. Skipped when
    testcontainers is not installed or Docker is not reachable.
    """
    try:
        from testcontainers.mongodb import MongoDbContainer
    except ImportError:
        pytest.skip("testcontainers not installed. Install with: pip install -e '.[test]'")

    container = MongoDbContainer("mongo:7.0")
    try:
        container.start()
    except Exception as e:  # noqa: BLE001 - any Docker failure means "no MongoDB here"
        pytest.skip(f"Could not start MongoDB container: {e}")
    yield container
    container.stop()


@pytest.fixture
async def real_connection(mongodb_container) -> AsyncGenerator[ConnectionManager, None]:
    """
    Initialized ConnectionManager on a throwaway database.

    The database is dropped and the client closed after the test.
    """
    db_name = f"test_db_{os.getpid()}"
    connection = await connect(
        mongodb_container.get_connection_url(),
        db_name,
        max_pool_size=5,
        min_pool_size=1,
    )
    yield connection
    await connection.client.drop_database(db_name)
    await connection.shutdown()
