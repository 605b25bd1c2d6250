"""
Connection management for motor-mongoose.

Holds the single Motor client and selected database for a process. The
manager is passed explicitly to collection wrappers and the index manager
instead of living in module-level globals.

Usage:
    from motor_mongoose.database import connect

    connection = await connect("mongodb://localhost:27017", "app")
    users = connection.get_collection("users")
"""

import asyncio
import logging
import sys
import time

from motor.motor_asyncio import (
    AsyncIOMotorClient,
    AsyncIOMotorCollection,
    AsyncIOMotorDatabase,
)
from pymongo.errors import PyMongoError

from ..config import MongooseConfig
from ..constants import (
    APP_NAME,
    DEFAULT_CONNECT_TIMEOUT,
    DEFAULT_MAX_IDLE_TIME_MS,
    DEFAULT_MAX_POOL_SIZE,
    DEFAULT_MIN_POOL_SIZE,
    DEFAULT_OPERATION_TIMEOUT,
    DEFAULT_SERVER_SELECTION_TIMEOUT_MS,
)
from ..exceptions import InitializationError
from ..observability import get_logger as get_contextual_logger
from ..observability import record_operation

logger = logging.getLogger(__name__)
contextual_logger = get_contextual_logger(__name__)


class ConnectionManager:
    """
    Owns the MongoDB client and the selected database.

    Handles the startup handshake (client creation plus liveness ping),
    collection resolution and shutdown.
    """

    def __init__(
        self,
        mongo_uri: str,
        db_name: str,
        max_pool_size: int = DEFAULT_MAX_POOL_SIZE,
        min_pool_size: int = DEFAULT_MIN_POOL_SIZE,
        server_selection_timeout_ms: int = DEFAULT_SERVER_SELECTION_TIMEOUT_MS,
        connect_timeout: float = DEFAULT_CONNECT_TIMEOUT,
        operation_timeout: float = DEFAULT_OPERATION_TIMEOUT,
    ) -> None:
        """
        Args:
            mongo_uri: MongoDB connection URI
            db_name: Database name
            max_pool_size: Maximum MongoDB connection pool size
            min_pool_size: Minimum MongoDB connection pool size
            server_selection_timeout_ms: Driver server selection timeout
            connect_timeout: Bound on the connect + ping handshake, in seconds
            operation_timeout: Default bound for wrapper operations, in seconds
        """
        self.mongo_uri = mongo_uri
        self.db_name = db_name
        self.max_pool_size = max_pool_size
        self.min_pool_size = min_pool_size
        self.server_selection_timeout_ms = server_selection_timeout_ms
        self.connect_timeout = connect_timeout
        self.operation_timeout = operation_timeout

        self._mongo_client: AsyncIOMotorClient | None = None
        self._mongo_db: AsyncIOMotorDatabase | None = None
        self._initialized: bool = False

    @classmethod
    def from_config(cls, config: MongooseConfig) -> "ConnectionManager":
        """Build a manager from a validated MongooseConfig."""
        config.validate()
        return cls(
            mongo_uri=config.mongo_uri,
            db_name=config.db_name,
            max_pool_size=config.max_pool_size,
            min_pool_size=config.min_pool_size,
            server_selection_timeout_ms=config.server_selection_timeout_ms,
            operation_timeout=config.operation_timeout,
        )

    async def initialize(self) -> AsyncIOMotorClient:
        """
        Connect to MongoDB and verify the server answers a ping.

        Both steps share one ``connect_timeout`` budget. Calling this again on
        an initialized manager is a no-op.

        Returns:
            The live AsyncIOMotorClient

        Raises:
            InitializationError: If the client cannot be created or the ping fails
        """
        if self._initialized:
            logger.warning("ConnectionManager already initialized. Skipping re-initialization.")
            return self._mongo_client

        start_time = time.time()
        contextual_logger.info(
            "Initializing MongoDB connection",
            extra={
                "db_name": self.db_name,
                "max_pool_size": self.max_pool_size,
                "min_pool_size": self.min_pool_size,
            },
        )

        client: AsyncIOMotorClient | None = None
        try:
            client = AsyncIOMotorClient(
                self.mongo_uri,
                serverSelectionTimeoutMS=self.server_selection_timeout_ms,
                appname=APP_NAME,
                maxPoolSize=self.max_pool_size,
                minPoolSize=self.min_pool_size,
                maxIdleTimeMS=DEFAULT_MAX_IDLE_TIME_MS,
                tz_aware=True,
            )
            await asyncio.wait_for(client.admin.command("ping"), timeout=self.connect_timeout)
        except (PyMongoError, asyncio.TimeoutError, TypeError, ValueError) as e:
            duration_ms = (time.time() - start_time) * 1000
            record_operation("connection.initialize", duration_ms, success=False)
            contextual_logger.critical(
                "MongoDB connection failed",
                extra={
                    "error_type": type(e).__name__,
                    "error": str(e),
                    "duration_ms": round(duration_ms, 2),
                },
                exc_info=True,
            )
            if client is not None:
                client.close()
            stage = (
                "Could not initialize client" if client is None else "Could not ping the database"
            )
            raise InitializationError(
                f"{stage}: {e}",
                mongo_uri=self.mongo_uri,
                db_name=self.db_name,
                context={"error_type": type(e).__name__},
            ) from e

        self._mongo_client = client
        self._mongo_db = client[self.db_name]
        self._initialized = True

        duration_ms = (time.time() - start_time) * 1000
        record_operation("connection.initialize", duration_ms, success=True)
        contextual_logger.info(
            "Connected to MongoDB",
            extra={"db_name": self.db_name, "duration_ms": round(duration_ms, 2)},
        )
        return client

    async def shutdown(self) -> None:
        """Close the client. Safe to call more than once."""
        if not self._initialized:
            return

        if self._mongo_client is not None:
            self._mongo_client.close()

        self._initialized = False
        self._mongo_client = None
        self._mongo_db = None
        contextual_logger.info("MongoDB connection closed", extra={"db_name": self.db_name})

    def get_collection(self, name: str) -> AsyncIOMotorCollection:
        """
        Resolve a collection handle in the active database.

        Raises:
            RuntimeError: If initialize() has not completed
        """
        return self.database[name]

    @property
    def client(self) -> AsyncIOMotorClient:
        """
        The MongoDB client.

        Raises:
            RuntimeError: If connection is not initialized
        """
        if not self._initialized:
            raise RuntimeError("ConnectionManager not initialized. Call initialize() first.")
        return self._mongo_client

    @property
    def database(self) -> AsyncIOMotorDatabase:
        """
        The selected MongoDB database.

        Raises:
            RuntimeError: If connection is not initialized
        """
        if not self._initialized:
            raise RuntimeError("ConnectionManager not initialized. Call initialize() first.")
        return self._mongo_db

    @property
    def initialized(self) -> bool:
        return self._initialized


async def connect(mongo_uri: str, db_name: str, **kwargs) -> ConnectionManager:
    """
    Create a ConnectionManager and run its startup handshake.

    Args:
        mongo_uri: MongoDB connection URI
        db_name: Database name
        **kwargs: Forwarded to ConnectionManager

    Raises:
        InitializationError: If the connection or ping fails
    """
    manager = ConnectionManager(mongo_uri, db_name, **kwargs)
    await manager.initialize()
    return manager


async def connect_or_exit(
    mongo_uri: str, db_name: str, exit_code: int = 1, **kwargs
) -> ConnectionManager:
    """
    Like connect(), but terminates the process when the handshake fails.

    Meant for entry points only; library code raises InitializationError and
    leaves the decision to the caller.

    Example:
        async def main():
            connection = await connect_or_exit(MONGO_URI, DB_NAME)
    """
    try:
        return await connect(mongo_uri, db_name, **kwargs)
    except InitializationError as e:
        logger.critical(f"Could not connect to MongoDB: {e}")
        sys.exit(exit_code)
