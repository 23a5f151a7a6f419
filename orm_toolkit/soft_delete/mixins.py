"""
SQLAlchemy mixins for soft delete functionality.

The mixin only declares the deletion marker columns. A class using it is
not soft-deletable until it is registered with a ``SoftDeleteRegistry``.
"""

from datetime import datetime
from typing import Any, Dict, Optional

from sqlalchemy import Boolean, DateTime, event
from sqlalchemy.orm import Mapped, mapped_column

from .models import DELETED_AT, DELETED_FLAG


class SoftDeleteMixin:
    """
    Mixin to add soft delete columns to SQLAlchemy models.

    Provides:
    - ``is_deleted`` marker, ``False`` from construction onwards
    - ``deleted_at`` timestamp set when the marker is first set

    Usage:
        class Person(Base, SoftDeleteMixin):
            __tablename__ = 'persons'
            id: Mapped[int] = mapped_column(primary_key=True)
            name: Mapped[str] = mapped_column(String(100))
    """

    is_deleted: Mapped[bool] = mapped_column(
        Boolean, default=False, nullable=False, index=True
    )
    deleted_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    def to_dict(self, include_deleted_fields: bool = True) -> Dict[str, Any]:
        """
        Convert model to dictionary representation.

        Args:
            include_deleted_fields: Whether to include soft delete fields

        Returns:
            Dictionary representation of the model
        """
        result: Dict[str, Any] = {}

        table = getattr(self, "__table__", None)
        if table is None:
            return result

        for column in table.columns:
            if hasattr(self, column.name):
                value = getattr(self, column.name)
                if isinstance(value, datetime):
                    value = value.isoformat()
                result[column.name] = value

        if not include_deleted_fields:
            result.pop(DELETED_FLAG, None)
            result.pop(DELETED_AT, None)

        return result


@event.listens_for(SoftDeleteMixin, "init", propagate=True)
def _default_not_deleted(target: Any, args: Any, kwargs: Dict[str, Any]) -> None:
    """Entities start life with the marker cleared."""
    kwargs.setdefault(DELETED_FLAG, False)
