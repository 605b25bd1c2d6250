"""
Configuration management for motor-mongoose.

Configuration is optional: ConnectionManager can still be built from direct
parameters. MongooseConfig fills anything not passed explicitly from the
environment.
"""

import os

from .constants import (
    DEFAULT_MAX_POOL_SIZE,
    DEFAULT_MIN_POOL_SIZE,
    DEFAULT_OPERATION_TIMEOUT,
    DEFAULT_SERVER_SELECTION_TIMEOUT_MS,
)
from .exceptions import ConfigurationError


class MongooseConfig:
    """
    Connection and operation settings.

    Example:
        # Using environment variables
        config = MongooseConfig()
        config.validate()
        manager = ConnectionManager.from_config(config)

        # Or using direct parameters
        config = MongooseConfig(mongo_uri="mongodb://localhost:27017", db_name="app")
    """

    def __init__(
        self,
        mongo_uri: str | None = None,
        db_name: str | None = None,
        max_pool_size: int | None = None,
        min_pool_size: int | None = None,
        server_selection_timeout_ms: int | None = None,
        operation_timeout: float | None = None,
    ):
        """
        Initialize configuration.

        Args:
            mongo_uri: MongoDB connection URI (defaults to MONGO_URI env var)
            db_name: Database name (defaults to DB_NAME env var)
            max_pool_size: Maximum connection pool size (defaults to 50 or MONGO_MAX_POOL_SIZE)
            min_pool_size: Minimum connection pool size (defaults to 10 or MONGO_MIN_POOL_SIZE)
            server_selection_timeout_ms: Server selection timeout in ms (defaults to 5000)
            operation_timeout: Per-operation bound in seconds (defaults to 10 or
                MONGOOSE_OPERATION_TIMEOUT)
        """
        self.mongo_uri = mongo_uri if mongo_uri is not None else os.getenv("MONGO_URI", "")
        self.db_name = db_name if db_name is not None else os.getenv("DB_NAME", "")
        self.max_pool_size = (
            max_pool_size
            if max_pool_size is not None
            else int(os.getenv("MONGO_MAX_POOL_SIZE", str(DEFAULT_MAX_POOL_SIZE)))
        )
        self.min_pool_size = (
            min_pool_size
            if min_pool_size is not None
            else int(os.getenv("MONGO_MIN_POOL_SIZE", str(DEFAULT_MIN_POOL_SIZE)))
        )
        self.server_selection_timeout_ms = (
            server_selection_timeout_ms
            if server_selection_timeout_ms is not None
            else int(
                os.getenv(
                    "MONGO_SERVER_SELECTION_TIMEOUT_MS", str(DEFAULT_SERVER_SELECTION_TIMEOUT_MS)
                )
            )
        )
        self.operation_timeout = (
            operation_timeout
            if operation_timeout is not None
            else float(os.getenv("MONGOOSE_OPERATION_TIMEOUT", str(DEFAULT_OPERATION_TIMEOUT)))
        )

    def validate(self) -> None:
        """
        Validate configuration values.

        Raises:
            ConfigurationError: If required configuration is missing or invalid
        """
        if not self.mongo_uri:
            raise ConfigurationError(
                "mongo_uri is required (set MONGO_URI environment variable or pass directly)",
                config_key="mongo_uri",
            )

        if not self.db_name:
            raise ConfigurationError(
                "db_name is required (set DB_NAME environment variable or pass directly)",
                config_key="db_name",
            )

        if self.max_pool_size < 1:
            raise ConfigurationError(
                f"max_pool_size must be >= 1, got {self.max_pool_size}",
                config_key="max_pool_size",
                config_value=self.max_pool_size,
            )

        if self.min_pool_size < 1:
            raise ConfigurationError(
                f"min_pool_size must be >= 1, got {self.min_pool_size}",
                config_key="min_pool_size",
                config_value=self.min_pool_size,
            )

        if self.min_pool_size > self.max_pool_size:
            raise ConfigurationError(
                f"min_pool_size ({self.min_pool_size}) cannot be greater than "
                f"max_pool_size ({self.max_pool_size})",
                config_key="min_pool_size",
                config_value=self.min_pool_size,
            )

        if self.server_selection_timeout_ms < 1000:
            raise ConfigurationError(
                f"server_selection_timeout_ms must be >= 1000, got "
                f"{self.server_selection_timeout_ms}",
                config_key="server_selection_timeout_ms",
                config_value=self.server_selection_timeout_ms,
            )

        if self.operation_timeout <= 0:
            raise ConfigurationError(
                f"operation_timeout must be > 0, got {self.operation_timeout}",
                config_key="operation_timeout",
                config_value=self.operation_timeout,
            )
