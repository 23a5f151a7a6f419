"""
Data models for the unit-of-work seen by the change interceptor.

A ``PendingChange`` is the typed view of one entity touched since the last
commit. The interceptor only ever mutates ``operation`` and ``values``.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field

DELETED_FLAG = "is_deleted"
DELETED_AT = "deleted_at"


class ChangeOperation(str, Enum):
    """Pending operation recorded for an entity in the unit of work."""

    INSERT = "insert"
    UPDATE = "update"
    DELETE = "delete"
    UNCHANGED = "unchanged"


class PendingChange(BaseModel):
    """One entry of the pending-change set handed to the interceptor."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    entity: Any = Field(..., description="Tracked entity instance")
    operation: ChangeOperation = Field(..., description="Pending operation")
    values: Dict[str, Any] = Field(
        default_factory=dict, description="Attribute values forced at commit"
    )

    @property
    def entity_type(self) -> type:
        return type(self.entity)

    @property
    def entity_id(self) -> str:
        return str(getattr(self.entity, "id", "unknown"))

    @property
    def is_soft_delete(self) -> bool:
        """True once the entry carries a forced deletion marker."""
        return (
            self.operation == ChangeOperation.UPDATE
            and self.values.get(DELETED_FLAG) is True
        )

    def mark_deleted(self, at: Optional[datetime] = None) -> None:
        """
        Turn this entry into a soft-delete update.

        The original deletion timestamp is kept when the entity already
        carries one.

        Args:
            at: Timestamp recorded as ``deleted_at``; ``None`` when the
                entity type has no timestamp column
        """
        self.operation = ChangeOperation.UPDATE
        self.values[DELETED_FLAG] = True
        if at is not None and self.values.get(DELETED_AT) is None:
            existing = getattr(self.entity, DELETED_AT, None)
            self.values[DELETED_AT] = existing or at
