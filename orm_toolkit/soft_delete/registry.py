"""
Registry of soft-deletable entity types.

Registration is explicit: a class carrying ``SoftDeleteMixin`` columns is
treated as an ordinary entity until it is registered here. Both the change
interceptor and the visibility filter consult the registry, so it is the
single place that decides which types get soft-delete semantics.
"""

import logging
from typing import Any, Dict, Iterator, List, Optional, Type, TypeVar

from pydantic import BaseModel, ConfigDict, Field
from sqlalchemy import inspect
from sqlalchemy.orm import with_loader_criteria
from sqlalchemy.sql.elements import ColumnElement

from .exceptions import RegistrationError
from .models import DELETED_AT, DELETED_FLAG

logger = logging.getLogger(__name__)

T = TypeVar("T")


class SoftDeleteRegistration(BaseModel):
    """Registration record for one soft-deletable type."""

    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    entity_type: type = Field(..., description="Registered mapped class")
    flag_attribute: str = Field(DELETED_FLAG, description="Deletion marker")
    timestamp_attribute: Optional[str] = Field(
        None, description="Deletion timestamp, if the type has one"
    )

    @property
    def name(self) -> str:
        return self.entity_type.__name__

    def visibility_predicate(self) -> ColumnElement[bool]:
        """SQL predicate selecting rows that are not soft-deleted."""
        return getattr(self.entity_type, self.flag_attribute).is_(False)


class SoftDeleteRegistry:
    """
    Explicit per-type registry of soft-deletable entities.

    Usage:
        registry = SoftDeleteRegistry()

        @registry.soft_deletable
        class Person(Base, SoftDeleteMixin):
            ...

        # or, at startup
        registry.register(Person)
    """

    def __init__(self) -> None:
        self._registrations: Dict[type, SoftDeleteRegistration] = {}

    def register(self, entity_type: Type[T]) -> Type[T]:
        """
        Register a mapped class as soft-deletable.

        Args:
            entity_type: Mapped class exposing an ``is_deleted`` column

        Returns:
            The class itself, so the method can be used as a decorator

        Raises:
            RegistrationError: If the class is not mapped or has no marker column
        """
        name = getattr(entity_type, "__name__", repr(entity_type))
        mapper = inspect(entity_type, raiseerr=False)
        if mapper is None or not hasattr(mapper, "column_attrs"):
            raise RegistrationError(name, "class is not mapped")

        columns = {attr.key for attr in mapper.column_attrs}
        if DELETED_FLAG not in columns:
            raise RegistrationError(name, f"missing '{DELETED_FLAG}' column")

        registration = SoftDeleteRegistration(
            entity_type=entity_type,
            flag_attribute=DELETED_FLAG,
            timestamp_attribute=DELETED_AT if DELETED_AT in columns else None,
        )
        self._registrations[entity_type] = registration
        logger.info(f"Registered {name} as soft-deletable")
        return entity_type

    soft_deletable = register

    def get(self, entity_type: type) -> Optional[SoftDeleteRegistration]:
        """Return the registration covering a type, walking its bases."""
        for klass in getattr(entity_type, "__mro__", ()):
            registration = self._registrations.get(klass)
            if registration is not None:
                return registration
        return None

    def is_registered(self, entity_type: type) -> bool:
        return self.get(entity_type) is not None

    def predicate_for(self, entity_type: type) -> Optional[ColumnElement[bool]]:
        """Visibility predicate for a type, or None for ordinary types."""
        registration = self.get(entity_type)
        if registration is None:
            return None
        return registration.visibility_predicate()

    def loader_criteria(self) -> List[Any]:
        """``with_loader_criteria`` options covering every registered type."""
        return [
            with_loader_criteria(
                registration.entity_type,
                registration.visibility_predicate(),
                include_aliases=True,
            )
            for registration in self._registrations.values()
        ]

    @property
    def registered_types(self) -> List[type]:
        return list(self._registrations)

    def __contains__(self, entity_type: object) -> bool:
        return isinstance(entity_type, type) and self.is_registered(entity_type)

    def __iter__(self) -> Iterator[SoftDeleteRegistration]:
        return iter(self._registrations.values())

    def __len__(self) -> int:
        return len(self._registrations)


# Global registry instance
_registry: Optional[SoftDeleteRegistry] = None


def get_registry() -> SoftDeleteRegistry:
    """Get or create the global soft delete registry."""
    global _registry
    if _registry is None:
        _registry = SoftDeleteRegistry()
    return _registry
