"""
Repository implementations.

These classes implement the repository protocols using SQLAlchemy ORM.
"""

from __future__ import annotations

from typing import List, Optional

from sqlalchemy import select, func, asc
from sqlalchemy.orm import Session

from .models import Hobbit
from .protocols import HobbitEntity


def _to_entity(hobbit: Hobbit) -> HobbitEntity:
    return HobbitEntity(id=hobbit.id, name=hobbit.name)


class HobbitRepository:
    """SQLAlchemy implementation of HobbitRepositoryProtocol."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def list_all(self) -> List[HobbitEntity]:
        """Return all hobbits, ordered by id.

        Clients rely on the order of the list, and a relational
        database does not guarantee any order without ORDER BY.
        """
        stmt = select(Hobbit).order_by(asc(Hobbit.id))
        return [_to_entity(h) for h in self._session.execute(stmt).scalars()]

    def get_by_id(self, hobbit_id: int) -> Optional[HobbitEntity]:
        """Fetch a hobbit by its id."""
        hobbit = self._session.get(Hobbit, hobbit_id)
        return _to_entity(hobbit) if hobbit else None

    def create(self, name: str) -> HobbitEntity:
        """Insert a new hobbit. The id is assigned by the database on flush."""
        if not name:
            raise ValueError("Hobbit name must not be empty")
        hobbit = Hobbit(name=name)
        self._session.add(hobbit)
        self._session.flush()
        return _to_entity(hobbit)

    def count(self) -> int:
        """Return the number of hobbits."""
        stmt = select(func.count()).select_from(Hobbit)
        return self._session.execute(stmt).scalar_one()
