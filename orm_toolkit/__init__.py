"""
ORM Learning Toolkit - soft deletion for SQLAlchemy models.

Entities opt into soft deletion by carrying ``SoftDeleteMixin`` columns and
being registered with a ``SoftDeleteRegistry``. Sessions built by
``Database`` then rewrite every removal of such an entity into an update
that sets ``is_deleted``, and every read hides marked rows.

Quick Start
-----------
>>> from orm_toolkit import Database, SoftDeleteMixin, ToolkitConfig
>>>
>>> db = Database(ToolkitConfig(database_url="sqlite:///persons.db"))
>>> db.registry.register(Person)
>>> db.create_all(Base.metadata)
>>>
>>> with db.session() as session:
...     persons = db.repository(session, Person)
...     persons.remove(persons.get(1))
...     session.commit()
...     persons.get(1)                          # None
...     persons.get(1, include_deleted=True)    # still stored, is_deleted=True

Plain SQLAlchemy statements are filtered too; pass the execution option
``include_deleted=True`` for administrative access to deleted rows.
"""

__version__ = "1.0.0"

from .config import ToolkitConfig, configure, get_config, set_config
from .db import Database
from .soft_delete import (
    ChangeInterceptor,
    ChangeOperation,
    PendingChange,
    SoftDeleteMixin,
    SoftDeleteRegistry,
    SoftDeleteRepository,
    VisibilityFilter,
)

__all__ = [
    # Soft Delete
    "SoftDeleteMixin",
    "SoftDeleteRegistry",
    "SoftDeleteRepository",
    "ChangeInterceptor",
    "VisibilityFilter",
    "ChangeOperation",
    "PendingChange",
    # Database
    "Database",
    # Configuration
    "ToolkitConfig",
    "get_config",
    "set_config",
    "configure",
]
