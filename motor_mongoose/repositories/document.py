"""
Base class for typed documents.

Subclass Document for each collection shape. The model supplies the
encode/decode pair used by CollectionWrapper: ``to_document()`` produces the
dictionary sent to MongoDB and ``from_document()`` validates what comes back.
"""

from typing import Any

from bson import ObjectId
from pydantic import BaseModel, ConfigDict, Field

from ..constants import ID_FIELD


class Document(BaseModel):
    """
    Pydantic model whose ``id`` attribute maps to the stored ``_id`` field.

    Example:
        class User(Document):
            name: str
            role: str = "member"

        user = User(name="Arthur", role="King")
    """

    model_config = ConfigDict(arbitrary_types_allowed=True, populate_by_name=True)

    id: ObjectId | None = Field(default=None, alias=ID_FIELD)

    def to_document(self) -> dict[str, Any]:
        """Encode for storage; an unset id is left out so the server assigns one."""
        data = self.model_dump(by_alias=True)
        if data.get(ID_FIELD) is None:
            data.pop(ID_FIELD, None)
        return data

    @classmethod
    def from_document(cls, data: dict[str, Any]) -> "Document":
        """Decode a raw MongoDB document, raising pydantic.ValidationError on mismatch."""
        return cls.model_validate(data)
