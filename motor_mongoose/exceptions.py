"""
Custom exceptions for motor-mongoose.

All errors raised by this package derive from MongooseError, which is a
RuntimeError carrying an optional context dictionary.
"""

from typing import Any, Dict, Optional

from .utils.uri import redact_uri


class MongooseError(RuntimeError):
    """
    Base exception for motor-mongoose errors.

    Attributes:
        message: Error message
        context: Optional dictionary with additional context (collection,
                 query, etc.)
    """

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message)
        self.message = message
        self.context = context or {}

    def __str__(self) -> str:
        """Return formatted error message with context if available."""
        if self.context:
            context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            return f"{self.message} (context: {context_str})"
        return self.message


class InitializationError(MongooseError):
    """
    Raised when the startup connection or liveness ping fails.

    The library never terminates the process itself; the entry point decides
    whether to abort (see ``connect_or_exit``). Credentials in ``mongo_uri``
    are masked in ``context`` and therefore in ``str()``; the attribute keeps
    the URI as given.

    Attributes:
        message: Error message
        mongo_uri: MongoDB connection URI (if available)
        db_name: Database name (if available)
        context: Additional context information
    """

    def __init__(
        self,
        message: str,
        mongo_uri: Optional[str] = None,
        db_name: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        context = context or {}
        if mongo_uri:
            context["mongo_uri"] = redact_uri(mongo_uri)
        if db_name:
            context["db_name"] = db_name
        super().__init__(message, context=context)
        self.mongo_uri = mongo_uri
        self.db_name = db_name


class ConfigurationError(MongooseError):
    """
    Raised when configuration is invalid or missing.

    Attributes:
        message: Error message
        config_key: Configuration key that caused the error (if available)
        config_value: Configuration value that caused the error (if available)
        context: Additional context information
    """

    def __init__(
        self,
        message: str,
        config_key: Optional[str] = None,
        config_value: Optional[Any] = None,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        context = context or {}
        if config_key:
            context["config_key"] = config_key
        if config_value is not None:
            context["config_value"] = config_value
        super().__init__(message, context=context)
        self.config_key = config_key
        self.config_value = config_value


class DocumentError(MongooseError):
    """Base for single-document read and update failures."""

    def __init__(
        self,
        message: str,
        collection: Optional[str] = None,
        query: Optional[Any] = None,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        context = context or {}
        if collection:
            context["collection"] = collection
        if query is not None:
            context["query"] = query
        super().__init__(message, context=context)
        self.collection = collection
        self.query = query


class DocumentNotFoundError(DocumentError):
    """
    Raised when a single-document lookup matches nothing or cannot be decoded.

    The specific driver or decode cause is logged and kept as ``__cause__``;
    the message stays generic.
    """


class DocumentUpdateError(DocumentError):
    """Raised when a find-and-update matches nothing or cannot be decoded."""
