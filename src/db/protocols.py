"""
Protocol definitions for the database layer.

This module defines the interface contracts that the database backend
and its repositories implement. Using Protocol classes enables structural
subtyping, so test doubles don't need to inherit from these classes.
"""

from __future__ import annotations

from typing import (
    Protocol,
    Optional,
    List,
    Dict,
    Any,
    Sequence,
    Mapping,
    runtime_checkable,
)
from dataclasses import dataclass, asdict


# =============================================================================
# Data Transfer Objects
# =============================================================================


@dataclass(frozen=True)
class HobbitEntity:
    """A hobbit row as seen by application code."""

    id: int
    name: str

    def to_dict(self) -> Dict[str, Any]:
        """Return a JSON-serializable dictionary."""
        return asdict(self)


# =============================================================================
# Repository Protocols
# =============================================================================


@runtime_checkable
class HobbitRepositoryProtocol(Protocol):
    """Repository for the hobbits table."""

    def list_all(self) -> List[HobbitEntity]:
        """Return all hobbits, ordered by id."""
        ...

    def get_by_id(self, hobbit_id: int) -> Optional[HobbitEntity]:
        """Fetch a hobbit by its id, or None if not found."""
        ...

    def create(self, name: str) -> HobbitEntity:
        """Insert a new hobbit and return it with its assigned id."""
        ...

    def count(self) -> int:
        """Return the number of rows in the table."""
        ...


# =============================================================================
# Backend Protocol
# =============================================================================


@runtime_checkable
class DatabaseBackendProtocol(Protocol):
    """The main database backend interface."""

    @property
    def hobbits(self) -> HobbitRepositoryProtocol: ...

    @property
    def dialect_name(self) -> str: ...

    def commit(self) -> None: ...

    def rollback(self) -> None: ...

    def close(self) -> None: ...

    def create_tables(self) -> None: ...

    def drop_tables(self) -> None: ...

    def truncate_table(self, table_name: str) -> None:
        """Delete all rows of a table and reset its identity counter."""
        ...

    def bulk_insert(
        self, table_name: str, rows: Sequence[Mapping[str, Any]]
    ) -> None:
        """Insert rows into a table, in the given order."""
        ...
