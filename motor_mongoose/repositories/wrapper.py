"""
Generic collection wrapper.

CollectionWrapper binds one MongoDB collection to one Document subclass and
offers mongoose-style helpers (find_one, find_by_id_and_update, new, ...).
Every call runs under its own timeout and returns decoded models.
"""

import asyncio
import logging
from collections.abc import Awaitable, Iterator, Mapping
from contextlib import contextmanager
from typing import Any, Generic, TypeVar

from bson import ObjectId
from bson.errors import BSONError
from motor.motor_asyncio import AsyncIOMotorCollection
from pydantic import ValidationError
from pymongo import ReturnDocument
from pymongo.errors import PyMongoError

from ..constants import ID_FIELD, NOT_FOUND_MESSAGE, UPDATE_FAILED_MESSAGE
from ..database.connection import ConnectionManager
from ..exceptions import DocumentNotFoundError, DocumentUpdateError
from ..observability import get_logger as get_contextual_logger
from ..observability import collection_context, track_operation
from ..utils.ids import to_object_id
from .document import Document
from .populate import Populate

logger = logging.getLogger(__name__)
contextual_logger = get_contextual_logger(__name__)

M = TypeVar("M", bound=Document)
T = TypeVar("T")

Query = Mapping[str, Any]


class CollectionWrapper(Generic[M]):
    """
    Typed handle over one collection.

    Build one per logical collection when the application starts; the wrapper
    holds no per-call state and can be shared between tasks.

    Single-document reads and updates raise DocumentNotFoundError or
    DocumentUpdateError with a generic message (the driver cause is logged and
    chained). Multi-document reads and inserts let driver, timeout and
    validation errors through unchanged.

    Example:
        class User(Document):
            name: str
            role: str

        users = CollectionWrapper(connection, "users", User)
        king = await users.find_one({"role": "King"})
        renamed = await users.find_by_id_and_update(str(king.id), {"$set": {"name": "Arthur"}})
    """

    def __init__(
        self,
        connection: ConnectionManager,
        name: str,
        document_class: type[M],
        timeout: float | None = None,
        return_document: ReturnDocument = ReturnDocument.AFTER,
    ):
        """
        Args:
            connection: Initialized connection manager
            name: Collection name
            document_class: Document subclass used to decode results
            timeout: Per-call bound in seconds (defaults to the connection's
                operation_timeout)
            return_document: Whether find-and-update returns the document
                before or after the update
        """
        self._name = name
        self._collection: AsyncIOMotorCollection = connection.get_collection(name)
        self._document_class = document_class
        self._timeout = timeout if timeout is not None else connection.operation_timeout
        self._return_document = return_document

    @property
    def name(self) -> str:
        return self._name

    @property
    def collection(self) -> AsyncIOMotorCollection:
        """The underlying Motor collection, for operations not wrapped here."""
        return self._collection

    async def _bounded(self, awaitable: Awaitable[T]) -> T:
        return await asyncio.wait_for(awaitable, timeout=self._timeout)

    def _decode(self, data: Mapping[str, Any]) -> M:
        return self._document_class.from_document(data)

    @contextmanager
    def _operation(self, operation: str) -> Iterator[None]:
        with collection_context(self._name, operation=operation):
            with track_operation(f"collection.{operation}", collection=self._name):
                yield

    async def find_one(self, query: Query) -> M:
        """
        Return the first document matching ``query``.

        Raises:
            DocumentNotFoundError: No match, decode failure or driver failure
        """
        with self._operation("find_one"):
            try:
                data = await self._bounded(self._collection.find_one(query))
                if data is not None:
                    return self._decode(data)
            except (PyMongoError, BSONError, asyncio.TimeoutError, ValidationError) as e:
                contextual_logger.debug(
                    f"find_one failed: {e}", extra={"error_type": type(e).__name__}
                )
                raise DocumentNotFoundError(
                    NOT_FOUND_MESSAGE, collection=self._name, query=query
                ) from e
            raise DocumentNotFoundError(NOT_FOUND_MESSAGE, collection=self._name, query=query)

    async def find_one_by_id(self, id: str) -> M:
        """
        Return the document whose ``_id`` is the given hex string.

        A malformed id becomes the zero ObjectId, which matches nothing.
        """
        return await self.find_one({ID_FIELD: to_object_id(id)})

    async def find_one_and_update(self, filter: Query, update: Query) -> M:
        """
        Atomically apply ``update`` to the first match of ``filter``.

        Returns the updated document (or the original one when the wrapper
        was built with ``ReturnDocument.BEFORE``).

        Raises:
            DocumentUpdateError: No match, decode failure or driver failure
        """
        with self._operation("find_one_and_update"):
            try:
                data = await self._bounded(
                    self._collection.find_one_and_update(
                        filter, update, return_document=self._return_document
                    )
                )
                if data is not None:
                    return self._decode(data)
            except (PyMongoError, BSONError, asyncio.TimeoutError, ValidationError) as e:
                contextual_logger.warning(
                    f"find_one_and_update failed: {e}",
                    extra={"error_type": type(e).__name__},
                )
                raise DocumentUpdateError(
                    UPDATE_FAILED_MESSAGE, collection=self._name, query=filter
                ) from e
            contextual_logger.warning("find_one_and_update matched no document")
            raise DocumentUpdateError(UPDATE_FAILED_MESSAGE, collection=self._name, query=filter)

    async def find_by_id_and_update(self, id: str, update: Query) -> M:
        """find_one_and_update on ``{"_id": to_object_id(id)}``."""
        return await self.find_one_and_update({ID_FIELD: to_object_id(id)}, update)

    async def new(self, document: M) -> ObjectId:
        """
        Insert ``document`` and return its identifier.

        The server-assigned id is also written back to ``document.id``.
        Driver errors are raised unchanged.
        """
        with self._operation("new"):
            result = await self._bounded(self._collection.insert_one(document.to_document()))
        document.id = result.inserted_id
        logger.debug(f"Inserted {self._document_class.__name__} with id={result.inserted_id}")
        return result.inserted_id

    async def find_many(self, query: Query | None = None) -> list[M]:
        """
        Return every document matching ``query`` (all documents if omitted).

        Results are fully materialized; there is no limit.
        """
        with self._operation("find_many"):
            cursor = self._collection.find(query if query is not None else {})
            docs = await self._bounded(cursor.to_list(length=None))
            return [self._decode(doc) for doc in docs]

    async def find_many_populate(self, match_query: Query, populate: Populate) -> list[M]:
        """
        Match documents, then attach foreign documents via one ``$lookup``.

        Each result carries, under ``populate.as_field``, an array of the
        ``populate.foreign_model`` documents whose ``_id`` is referenced by
        ``populate.local_field`` (an empty array when none match).

        Errors are logged and raised unchanged.
        """
        pipeline = [{"$match": match_query}, populate.to_lookup_stage()]
        with self._operation("find_many_populate"):
            try:
                cursor = self._collection.aggregate(pipeline)
                docs = await self._bounded(cursor.to_list(length=None))
                return [self._decode(doc) for doc in docs]
            except (PyMongoError, BSONError, asyncio.TimeoutError, ValidationError) as e:
                contextual_logger.error(
                    f"find_many_populate failed: {e}",
                    extra={
                        "foreign_model": populate.foreign_model,
                        "error_type": type(e).__name__,
                    },
                )
                raise
