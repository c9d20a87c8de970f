"""
SQLAlchemy ORM models.

The schema consists of a single table, hobbits, with an auto-assigned
integer primary key and a name.
"""

from __future__ import annotations

from sqlalchemy import String, Integer
from sqlalchemy.orm import (
    DeclarativeBase,
    Mapped,
    mapped_column,
)


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""

    pass


class Hobbit(Base):
    """A hobbit, identified by an auto-assigned integer id."""

    __tablename__ = "hobbits"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    # Names are not required to be unique
    name: Mapped[str] = mapped_column(String(128), nullable=False)

    def __repr__(self) -> str:
        return f"<Hobbit(id={self.id}, name={self.name!r})>"
