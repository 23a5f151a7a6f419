"""
Change interceptor - turns removals into soft deletes.

Runs inside ``Session.flush`` (``before_flush``), after the caller has queued
its operations and before SQLAlchemy emits any SQL. Every ``Delete`` of a
registered type becomes an ``Update`` setting the deletion marker.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional

from sqlalchemy import event, update
from sqlalchemy.orm import ORMExecuteState, Session

from .models import ChangeOperation, PendingChange
from .registry import SoftDeleteRegistry, get_registry

logger = logging.getLogger(__name__)


class ChangeInterceptor:
    """
    Rewrites pending deletes of soft-deletable entities into updates.

    The rewrite itself (``rewrite``) is pure: it works on ``PendingChange``
    entries and never touches the session. ``collect`` and ``apply`` bind it
    to a SQLAlchemy unit of work, and ``install`` wires both into the flush.

    Attributes:
        registry (SoftDeleteRegistry): Registry deciding which types are covered.
        include_deleted_option (str): Execution option that lets a bulk
            ``DELETE`` statement through as a physical delete.
    """

    def __init__(
        self,
        registry: Optional[SoftDeleteRegistry] = None,
        include_deleted_option: str = "include_deleted",
    ):
        self.registry = registry if registry is not None else get_registry()
        self.include_deleted_option = include_deleted_option

    def collect(self, session: Session) -> List[PendingChange]:
        """
        Build the pending-change set for the session's current unit of work.

        Args:
            session: Session about to flush

        Returns:
            One entry per new, dirty or deleted entity
        """
        changes = [
            PendingChange(entity=obj, operation=ChangeOperation.INSERT)
            for obj in session.new
        ]

        for obj in session.dirty:
            operation = (
                ChangeOperation.UPDATE
                if session.is_modified(obj)
                else ChangeOperation.UNCHANGED
            )
            changes.append(PendingChange(entity=obj, operation=operation))

        changes.extend(
            PendingChange(entity=obj, operation=ChangeOperation.DELETE)
            for obj in session.deleted
        )
        return changes

    def rewrite(
        self, changes: Iterable[PendingChange], now: Optional[datetime] = None
    ) -> List[PendingChange]:
        """
        Rewrite deletes of registered types into soft-delete updates.

        Only entries with ``operation == DELETE`` on a registered type are
        touched; everything else passes through unmodified, which makes a
        second run over the same batch a no-op.

        Args:
            changes: Pending-change set
            now: Deletion timestamp, defaults to the current UTC time

        Returns:
            The entries that were rewritten
        """
        now = now or datetime.now(timezone.utc)
        rewritten = []

        for change in changes:
            if change.operation != ChangeOperation.DELETE:
                continue

            registration = self.registry.get(change.entity_type)
            if registration is None:
                continue

            change.mark_deleted(now if registration.timestamp_attribute else None)
            rewritten.append(change)
            logger.debug(
                f"Soft delete {registration.name} {change.entity_id} "
                f"instead of removing it"
            )

        return rewritten

    def apply(self, session: Session, rewritten: Iterable[PendingChange]) -> None:
        """
        Push rewritten entries back into the session.

        The forced values are set on the entity, then the entity is moved out
        of the session's deleted set and re-attached as persistent so the
        flush emits an UPDATE instead of a DELETE.
        """
        for change in rewritten:
            entity = change.entity
            for key, value in change.values.items():
                setattr(entity, key, value)

            session.expunge(entity)
            session.add(entity)

    def before_flush(
        self, session: Session, flush_context: Any, instances: Optional[Any]
    ) -> None:
        """``before_flush`` listener running collect, rewrite and apply."""
        rewritten = self.rewrite(self.collect(session))
        if rewritten:
            self.apply(session, rewritten)
            logger.info(f"Rewrote {len(rewritten)} delete(s) into soft deletes")

    def rewrite_bulk_delete(self, orm_execute_state: ORMExecuteState) -> Any:
        """
        ``do_orm_execute`` listener turning ORM bulk DELETE into bulk UPDATE.

        Statements carrying the include-deleted execution option run as
        genuine deletes.
        """
        if not orm_execute_state.is_delete:
            return None

        options = orm_execute_state.execution_options
        if options.get(self.include_deleted_option):
            return None

        mapper = orm_execute_state.bind_mapper
        registration = self.registry.get(mapper.class_) if mapper else None
        if registration is None:
            return None

        entity = registration.entity_type
        values: Dict[str, Any] = {registration.flag_attribute: True}
        if registration.timestamp_attribute:
            values[registration.timestamp_attribute] = datetime.now(timezone.utc)

        # rows already marked keep their original timestamp
        stmt = (
            update(entity)
            .where(registration.visibility_predicate())
            .values(**values)
        )
        whereclause = orm_execute_state.statement.whereclause
        if whereclause is not None:
            stmt = stmt.where(whereclause)

        logger.info(f"Rewrote bulk delete on {registration.name} into soft delete")
        return orm_execute_state.session.execute(stmt, orm_execute_state.parameters)

    def install(self, target: Any) -> None:
        """
        Register the interceptor on a ``sessionmaker`` or ``Session``.

        Args:
            target: Session factory, Session class or Session instance
        """
        event.listen(target, "before_flush", self.before_flush)
        event.listen(target, "do_orm_execute", self.rewrite_bulk_delete)
