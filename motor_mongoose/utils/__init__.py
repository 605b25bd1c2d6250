"""
Utility functions for motor-mongoose.
"""

from .ids import now, to_object_id
from .uri import redact_uri

__all__ = ["now", "redact_uri", "to_object_id"]
