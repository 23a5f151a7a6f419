"""
Database wiring - engine, session factory and soft delete hooks.

Sessions produced here run the change interceptor on every flush and pass
ad-hoc SELECT statements through the visibility filter.
"""

import logging
from contextlib import contextmanager
from typing import Iterator, Optional, Type, TypeVar

from sqlalchemy import Engine, MetaData, create_engine
from sqlalchemy.orm import Session, sessionmaker

from .config import ToolkitConfig, get_config
from .soft_delete import (
    ChangeInterceptor,
    SoftDeleteRegistry,
    SoftDeleteRepository,
    VisibilityFilter,
    get_registry,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


class Database:
    """Engine and session factory with soft delete semantics installed.

    Attributes:
        config (ToolkitConfig): Configuration in effect.
        registry (SoftDeleteRegistry): Registry of soft-deletable types.
        engine (Engine): SQLAlchemy engine.
        interceptor (ChangeInterceptor): Rewrites removals at flush time.
        visibility (VisibilityFilter): Hides soft-deleted rows from reads.
        session_factory (sessionmaker): Factory for hooked sessions.

    Example:
        >>> db = Database(ToolkitConfig(database_url="sqlite://"))
        >>> db.registry.register(Person)
        >>> db.create_all(Base.metadata)
        >>> with db.session() as session:
        ...     persons = db.repository(session, Person)
        ...     persons.add(Person(name="p1"))
    """

    def __init__(
        self,
        config: Optional[ToolkitConfig] = None,
        registry: Optional[SoftDeleteRegistry] = None,
        engine: Optional[Engine] = None,
    ):
        self.config = config or get_config()
        self.registry = registry if registry is not None else get_registry()
        self.engine = engine or create_engine(
            self.config.database_url, **self.config.get_engine_options()
        )

        option = self.config.include_deleted_option
        self.interceptor = ChangeInterceptor(self.registry, option)
        self.visibility = VisibilityFilter(self.registry, option)
        self.session_factory = sessionmaker(bind=self.engine)

        if self.config.soft_delete_enabled:
            self.interceptor.install(self.session_factory)
            self.visibility.install(self.session_factory)
        else:
            logger.warning("Soft delete hooks disabled; removals are physical")

    def create_all(self, metadata: MetaData) -> None:
        """Create all tables of the given metadata."""
        metadata.create_all(self.engine)

    @contextmanager
    def session(self) -> Iterator[Session]:
        """
        Open a session, rolling back if the block raises.

        The caller commits explicitly; storage errors propagate unchanged.
        """
        session = self.session_factory()
        try:
            yield session
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def repository(
        self, session: Session, entity_type: Type[T]
    ) -> SoftDeleteRepository[T]:
        """Create a repository for one entity type bound to ``session``."""
        return SoftDeleteRepository(session, entity_type, self.visibility)

    def dispose(self) -> None:
        self.engine.dispose()
