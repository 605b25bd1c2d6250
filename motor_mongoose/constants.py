"""
Constants for motor-mongoose.

Shared timeouts and defaults used across the package.
"""

from typing import Final

from bson import ObjectId

# ============================================================================
# TIMEOUT CONSTANTS (seconds)
# ============================================================================

DEFAULT_OPERATION_TIMEOUT: Final[float] = 10.0
"""Default bound for a single collection operation (seconds)."""

DEFAULT_CONNECT_TIMEOUT: Final[float] = 10.0
"""Bound for the connect + ping handshake at startup (seconds)."""

DEFAULT_INDEX_TIMEOUT: Final[float] = 5.0
"""Bound for a single index creation request (seconds)."""

# ============================================================================
# CONNECTION POOL CONSTANTS
# ============================================================================

DEFAULT_MAX_POOL_SIZE: Final[int] = 50
"""Default maximum MongoDB connection pool size."""

DEFAULT_MIN_POOL_SIZE: Final[int] = 10
"""Default minimum MongoDB connection pool size."""

DEFAULT_SERVER_SELECTION_TIMEOUT_MS: Final[int] = 5000
"""Default server selection timeout in milliseconds."""

DEFAULT_MAX_IDLE_TIME_MS: Final[int] = 45000
"""Default maximum idle time before closing connections (milliseconds)."""

APP_NAME: Final[str] = "motor-mongoose"
"""Application name reported to the server in the handshake."""

# ============================================================================
# DOCUMENT CONSTANTS
# ============================================================================

ID_FIELD: Final[str] = "_id"
"""Storage name of the document identifier."""

NIL_OBJECT_ID: Final[ObjectId] = ObjectId("0" * 24)
"""Zero-value identifier returned for malformed hex strings."""

NOT_FOUND_MESSAGE: Final[str] = "Cannot find document"
UPDATE_FAILED_MESSAGE: Final[str] = "Cannot update document"

# ============================================================================
# OBSERVABILITY CONSTANTS
# ============================================================================

DEFAULT_MAX_METRICS: Final[int] = 10000
"""Distinct metric keys kept before the least recently used one is evicted."""
