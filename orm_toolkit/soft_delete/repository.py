"""
Repository giving query access to one entity type.

Every statement built here goes through the registry, so a registered type
never returns soft-deleted rows unless the caller passes
``include_deleted=True`` at the call site.
"""

from typing import Any, Generic, List, Optional, Type, TypeVar

from sqlalchemy import Select, func, inspect, select
from sqlalchemy.orm import Session

from .exceptions import EntityNotFoundError
from .filters import VisibilityFilter
from .models import DELETED_FLAG
from .registry import SoftDeleteRegistry

T = TypeVar("T")


class SoftDeleteRepository(Generic[T]):
    """
    Collection and lookup queries for a single mapped class.

    Usage:
        persons = SoftDeleteRepository(session, Person, visibility)
        persons.all()                       # active rows only
        persons.get(1)                      # None once 1 is soft-deleted
        persons.all(include_deleted=True)   # administrative view
    """

    def __init__(
        self,
        session: Session,
        entity_type: Type[T],
        visibility: Optional[VisibilityFilter] = None,
    ):
        self.session = session
        self.entity_type = entity_type
        self.visibility = visibility or VisibilityFilter()

    @property
    def registry(self) -> SoftDeleteRegistry:
        return self.visibility.registry

    def _restrict(self, stmt: Select[Any], include_deleted: bool) -> Select[Any]:
        """Add the type's own predicate and the registry-wide loader criteria."""
        if not include_deleted:
            predicate = self.registry.predicate_for(self.entity_type)
            if predicate is not None:
                stmt = stmt.where(predicate)
        return self.visibility.apply(stmt, include_deleted=include_deleted)

    def query_active(self, *criteria: Any) -> Select[Any]:
        """Statement selecting visible rows matching all criteria."""
        return self._restrict(select(self.entity_type).where(*criteria), False)

    def query_all(self, *criteria: Any) -> Select[Any]:
        """Statement selecting rows including soft-deleted ones."""
        return self._restrict(select(self.entity_type).where(*criteria), True)

    def query_deleted(self, *criteria: Any) -> Select[Any]:
        """Statement selecting only soft-deleted rows."""
        flag = getattr(self.entity_type, DELETED_FLAG)
        return self.query_all(flag.is_(True), *criteria)

    def all(self, include_deleted: bool = False) -> List[T]:
        return self.filter(include_deleted=include_deleted)

    def filter(self, *criteria: Any, include_deleted: bool = False) -> List[T]:
        """
        Return entities matching all criteria.

        Args:
            *criteria: SQL expressions, combined with AND
            include_deleted: Also return soft-deleted entities

        Returns:
            Matching entities ordered by primary key
        """
        if include_deleted:
            stmt = self.query_all(*criteria)
        else:
            stmt = self.query_active(*criteria)
        stmt = stmt.order_by(*self._primary_key())
        return list(self.session.scalars(stmt))

    def deleted(self) -> List[T]:
        stmt = self.query_deleted().order_by(*self._primary_key())
        return list(self.session.scalars(stmt))

    def get(self, entity_id: Any, include_deleted: bool = False) -> Optional[T]:
        """
        Look up an entity by primary key.

        Always issues a SELECT, so an entity soft-deleted earlier in the
        same session is reported as not found.

        Args:
            entity_id: Primary key value
            include_deleted: Also find soft-deleted entities

        Returns:
            The entity, or None
        """
        (pk,) = self._primary_key()
        criterion = pk == entity_id
        if include_deleted:
            stmt = self.query_all(criterion)
        else:
            stmt = self.query_active(criterion)
        return self.session.scalars(stmt).first()

    def get_or_raise(self, entity_id: Any, include_deleted: bool = False) -> T:
        """
        Look up an entity by primary key or fail.

        Raises:
            EntityNotFoundError: No visible entity has this key
        """
        entity = self.get(entity_id, include_deleted=include_deleted)
        if entity is None:
            raise EntityNotFoundError(self.entity_type.__name__, str(entity_id))
        return entity

    def count(self, *criteria: Any, include_deleted: bool = False) -> int:
        """Count matching rows in the database."""
        stmt = select(func.count()).select_from(self.entity_type).where(*criteria)
        return self.session.scalar(self._restrict(stmt, include_deleted)) or 0

    def add(self, entity: T) -> T:
        self.session.add(entity)
        return entity

    def add_all(self, entities: List[T]) -> List[T]:
        self.session.add_all(entities)
        return entities

    def remove(self, entity: T) -> None:
        """Queue removal; registered types are soft-deleted at flush."""
        self.session.delete(entity)

    def _primary_key(self) -> List[Any]:
        mapper = inspect(self.entity_type)
        return [
            getattr(self.entity_type, mapper.get_property_by_column(column).key)
            for column in mapper.primary_key
        ]
