"""
Visibility filter - hides soft-deleted rows from reads.

The predicate ``is_deleted IS false`` is attached to the statement itself,
so the database evaluates it together with the caller's own criteria. That
covers collection queries, lookups by id, aggregates and relationship loads
alike. A single statement opts out with the include-deleted execution option.
"""

import logging
from typing import Any, Optional, TypeVar

from sqlalchemy import event
from sqlalchemy.orm import ORMExecuteState
from sqlalchemy.sql import Executable

from .registry import SoftDeleteRegistry, get_registry

logger = logging.getLogger(__name__)

FILTERED_OPTION = "soft_delete_filtered"

S = TypeVar("S", bound=Executable)


class VisibilityFilter:
    """
    Applies the registry's visibility predicates to SELECT statements.

    Attributes:
        registry (SoftDeleteRegistry): Registry providing the predicates.
        include_deleted_option (str): Execution option disabling the filter
            for one statement.
    """

    def __init__(
        self,
        registry: Optional[SoftDeleteRegistry] = None,
        include_deleted_option: str = "include_deleted",
    ):
        self.registry = registry if registry is not None else get_registry()
        self.include_deleted_option = include_deleted_option

    def apply(self, stmt: S, include_deleted: bool = False) -> S:
        """
        Attach the visibility predicates of every registered type.

        Types absent from the statement are ignored by SQLAlchemy, so the
        full set of criteria can be attached unconditionally.

        Args:
            stmt: SELECT statement to filter
            include_deleted: Skip the predicates and mark the statement unfiltered

        Returns:
            The augmented statement
        """
        if include_deleted:
            return stmt.execution_options(**{self.include_deleted_option: True})

        criteria = self.registry.loader_criteria()
        if criteria:
            stmt = stmt.options(*criteria)
        return stmt.execution_options(**{FILTERED_OPTION: True})

    def is_bypassed(self, orm_execute_state: ORMExecuteState) -> bool:
        """True when the statement explicitly asked for deleted rows."""
        return bool(
            orm_execute_state.execution_options.get(self.include_deleted_option)
        )

    def on_execute(self, orm_execute_state: ORMExecuteState) -> None:
        """``do_orm_execute`` listener filtering ad-hoc SELECT statements."""
        # relationship loads included, the parent may never have been queried
        if not orm_execute_state.is_select or orm_execute_state.is_column_load:
            return

        if orm_execute_state.execution_options.get(FILTERED_OPTION):
            return

        if self.is_bypassed(orm_execute_state):
            mapper = orm_execute_state.bind_mapper
            logger.debug(
                f"Visibility filter bypassed for "
                f"{mapper.class_.__name__ if mapper else 'statement'}"
            )
            return

        orm_execute_state.statement = self.apply(orm_execute_state.statement)

    def install(self, target: Any) -> None:
        """
        Register the filter on a ``sessionmaker`` or ``Session``.

        Args:
            target: Session factory, Session class or Session instance
        """
        event.listen(target, "do_orm_execute", self.on_execute)
