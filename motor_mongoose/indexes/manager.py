"""
Single-field index creation.

Issues one ascending index per request against a named collection. Failures
are logged and reported as ``False``; nothing is raised to the caller.

This module is part of motor-mongoose.
"""

import asyncio
import logging
import time

from pymongo import ASCENDING
from pymongo.errors import PyMongoError

from ..constants import DEFAULT_INDEX_TIMEOUT
from ..database.connection import ConnectionManager
from ..observability import record_operation

logger = logging.getLogger(__name__)


class IndexManager:
    """
    Creates single ascending-field indexes on collections of one connection.

    Compound keys, descending order and partial filter expressions are not
    supported.

    Example:
        indexes = IndexManager(connection)
        await indexes.create_index("users", "email", unique=True)
    """

    def __init__(self, connection: ConnectionManager, timeout: float = DEFAULT_INDEX_TIMEOUT):
        self._connection = connection
        self.timeout = timeout

    async def create_index(
        self,
        collection_name: str,
        field: str,
        unique: bool = False,
        sparse: bool = False,
    ) -> bool:
        """
        Create an ascending index on ``field``.

        Args:
            collection_name: Target collection
            field: Field to index (dotted paths allowed)
            unique: Reject duplicate values
            sparse: Skip documents that lack the field

        Returns:
            True if the server accepted the index, False otherwise
        """
        start_time = time.time()
        collection = self._connection.get_collection(collection_name)
        try:
            name = await asyncio.wait_for(
                collection.create_index([(field, ASCENDING)], unique=unique, sparse=sparse),
                timeout=self.timeout,
            )
        except (PyMongoError, asyncio.TimeoutError) as e:
            duration_ms = (time.time() - start_time) * 1000
            record_operation("index.create", duration_ms, success=False, collection=collection_name)
            logger.error(
                f"Failed to create index on '{collection_name}.{field}' "
                f"(unique={unique}, sparse={sparse}): {e}"
            )
            return False

        duration_ms = (time.time() - start_time) * 1000
        record_operation("index.create", duration_ms, success=True, collection=collection_name)
        logger.info(f"Created index '{name}' on '{collection_name}.{field}'")
        return True


async def create_index(
    connection: ConnectionManager,
    collection_name: str,
    field: str,
    unique: bool = False,
    sparse: bool = False,
) -> bool:
    """Shortcut for ``IndexManager(connection).create_index(...)``."""
    return await IndexManager(connection).create_index(collection_name, field, unique, sparse)
