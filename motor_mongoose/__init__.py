"""
motor-mongoose

Mongoose-style typed collection helpers on top of Motor.
"""

from .config import MongooseConfig
from .constants import NIL_OBJECT_ID
from .database import ConnectionManager, connect, connect_or_exit
from .exceptions import (
    ConfigurationError,
    DocumentError,
    DocumentNotFoundError,
    DocumentUpdateError,
    InitializationError,
    MongooseError,
)
from .indexes import IndexManager, create_index
from .observability import (
    clear_correlation_id,
    get_metrics_collector,
    set_correlation_id,
)
from .repositories import CollectionWrapper, Document, Populate
from .utils import now, to_object_id

__version__ = "0.1.0"

__all__ = [
    # Connection
    "ConnectionManager",
    "MongooseConfig",
    "connect",
    "connect_or_exit",
    # Collections
    "CollectionWrapper",
    "Document",
    "Populate",
    # Indexes
    "IndexManager",
    "create_index",
    # Helpers
    "NIL_OBJECT_ID",
    "now",
    "to_object_id",
    # Observability
    "set_correlation_id",
    "clear_correlation_id",
    "get_metrics_collector",
    # Errors
    "MongooseError",
    "InitializationError",
    "ConfigurationError",
    "DocumentError",
    "DocumentNotFoundError",
    "DocumentUpdateError",
]
