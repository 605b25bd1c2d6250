"""
Identifier and timestamp helpers.

Pure conversions between caller-friendly values and the types stored in
MongoDB documents.
"""

from datetime import datetime, timezone

from bson import ObjectId
from bson.errors import InvalidId

from ..constants import NIL_OBJECT_ID


def to_object_id(hex_string: str) -> ObjectId:
    """
    Parse a 24-character hex string into an ObjectId.

    Malformed input (wrong length, non-hex characters, non-string values)
    yields NIL_OBJECT_ID instead of raising, so a lookup by a bad id simply
    matches nothing.

    Example:
        >>> to_object_id("507f1f77bcf86cd799439011")
        ObjectId('507f1f77bcf86cd799439011')
        >>> to_object_id("not-an-id")
        ObjectId('000000000000000000000000')
    """
    # ObjectId(None) would mint a fresh id
    if not isinstance(hex_string, str):
        return NIL_OBJECT_ID
    try:
        return ObjectId(hex_string)
    except InvalidId:
        return NIL_OBJECT_ID


def now() -> datetime:
    """Current UTC time truncated to the millisecond resolution of BSON dates."""
    current = datetime.now(timezone.utc)
    return current.replace(microsecond=current.microsecond - current.microsecond % 1000)
