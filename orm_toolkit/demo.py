"""
Walkthrough of the soft delete subsystem on a ``Person`` table.

Three persons are created, the first one is removed, and both the default
and the unfiltered view of the table are returned.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field
from sqlalchemy import String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from .db import Database
from .soft_delete import SoftDeleteMixin


class Base(DeclarativeBase):
    pass


class Person(Base, SoftDeleteMixin):
    """Person record; soft-deletable once registered."""

    __tablename__ = "persons"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(100))
    age: Mapped[Optional[int]] = mapped_column(nullable=True)

    def __repr__(self) -> str:
        return f"Person(id={self.id!r}, name={self.name!r})"


class DemoResult(BaseModel):
    """Views of the ``persons`` table after the walkthrough."""

    removed_id: int = Field(..., description="ID of the removed person")
    visible: List[Dict[str, Any]] = Field(default_factory=list)
    unfiltered: List[Dict[str, Any]] = Field(default_factory=list)


def run_demo(db: Database, names: Optional[List[str]] = None) -> DemoResult:
    """
    Create persons, remove the first one and read the table back.

    Args:
        db: Database to run against; ``Person`` is registered on its registry
        names: Person names to create, defaults to p1, p2, p3

    Returns:
        The default (filtered) and unfiltered views
    """
    names = names or ["p1", "p2", "p3"]

    db.registry.register(Person)
    db.create_all(Base.metadata)

    with db.session() as session:
        persons = db.repository(session, Person)
        persons.add_all([Person(name=name, age=10) for name in names])
        session.commit()

        first = persons.filter(Person.name == names[0])[0]
        persons.remove(first)
        session.commit()

        return DemoResult(
            removed_id=first.id,
            visible=[p.to_dict(include_deleted_fields=False) for p in persons.all()],
            unfiltered=[p.to_dict() for p in persons.all(include_deleted=True)],
        )
