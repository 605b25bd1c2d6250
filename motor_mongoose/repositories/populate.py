"""
Populate options for single-stage ``$lookup`` joins.
"""

from dataclasses import dataclass
from typing import Any

from ..constants import ID_FIELD


@dataclass(frozen=True)
class Populate:
    """
    Left-outer join of ``foreign_model`` documents whose ``_id`` appears in
    ``local_field``, attached as an array under ``as_field``.

    Example:
        Populate(local_field="quizzes.ids", foreign_model="quiz_templates",
                 as_field="quizzes.data")
    """

    local_field: str
    foreign_model: str
    as_field: str

    def to_lookup_stage(self) -> dict[str, Any]:
        return {
            "$lookup": {
                "from": self.foreign_model,
                "localField": self.local_field,
                "foreignField": ID_FIELD,
                "as": self.as_field,
            }
        }
