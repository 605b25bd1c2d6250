"""
Typed collection access.

Usage:
    from motor_mongoose.repositories import CollectionWrapper, Document, Populate

    class User(Document):
        name: str
        role: str

    users = CollectionWrapper(connection, "users", User)
    kings = await users.find_many({"role": "King"})
"""

from .document import Document
from .populate import Populate
from .wrapper import CollectionWrapper

__all__ = [
    "CollectionWrapper",
    "Document",
    "Populate",
]
