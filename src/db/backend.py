"""
Database Backend implementation.

This module provides the main DatabaseBackend class that implements
DatabaseBackendProtocol using SQLAlchemy ORM.
"""

from __future__ import annotations

from typing import Optional, Any, Mapping, Sequence, TYPE_CHECKING

from sqlalchemy import Table, insert, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from .connection import DatabaseSession, create_db_engine
from .models import Base
from .repositories import HobbitRepository

if TYPE_CHECKING:
    from .protocols import HobbitRepositoryProtocol


class DatabaseBackend:
    """SQLAlchemy implementation of DatabaseBackendProtocol.

    Usage:
        from db.backend import DatabaseBackend

        db = DatabaseBackend(database_url="postgresql://...")

        hobbits = db.hobbits.list_all()

        db.hobbits.create("bilbo")
        db.commit()

    A backend either owns its engine (when created from a database URL)
    or borrows a session factory shared with other backends (when created
    by the SessionManager). Only an owned engine is disposed on close().
    """

    def __init__(
        self,
        database_url: Optional[str] = None,
        session_factory: Optional[sessionmaker[Session]] = None,
    ) -> None:
        """Initialize the backend.

        Args:
            database_url: SQLAlchemy connection URL. If not provided, reads
                          from the DATABASE_URL environment variable.
            session_factory: A shared sessionmaker. If provided,
                             database_url is ignored.
        """
        self._db_session: Optional[DatabaseSession] = None
        if session_factory is None:
            # Create engine and session manager
            self._db_session = DatabaseSession(create_db_engine(database_url))
            session_factory = self._db_session.session_factory

        # This session will be used by all repositories
        self._session: Session = session_factory()

        self._hobbits = HobbitRepository(self._session)

    @property
    def hobbits(self) -> "HobbitRepositoryProtocol":
        """Access the Hobbit repository."""
        return self._hobbits

    @property
    def engine(self) -> Engine:
        """The engine that the session is bound to."""
        bind = self._session.get_bind()
        return bind if isinstance(bind, Engine) else bind.engine

    @property
    def dialect_name(self) -> str:
        """Name of the SQL dialect in use, e.g. 'postgresql' or 'sqlite'."""
        return self.engine.dialect.name

    def commit(self) -> None:
        """Commit the current transaction, making all changes permanent."""
        self._session.commit()

    def rollback(self) -> None:
        """Roll back the current transaction, discarding all changes."""
        self._session.rollback()

    def close(self) -> None:
        """Close the session, and the engine if this backend owns it."""
        self._session.close()
        if self._db_session is not None:
            self._db_session.close()

    def create_tables(self) -> None:
        """Create all database tables.

        This should only be called during initial setup or testing.
        """
        Base.metadata.create_all(self.engine)

    def drop_tables(self) -> None:
        """Drop all database tables.

        WARNING: This deletes all data! Only use for testing.
        """
        Base.metadata.drop_all(self.engine)

    def _table(self, table_name: str) -> Table:
        table = Base.metadata.tables.get(table_name)
        if table is None:
            raise ValueError(f"Unknown table: {table_name}")
        return table

    def truncate_table(self, table_name: str) -> None:
        """Delete all rows from a table and reset its identity counter,
        so that the next inserted row gets id 1.

        The statement runs within the current transaction.
        """
        self._table(table_name)
        quoted = self.engine.dialect.identifier_preparer.quote(table_name)
        dialect = self.dialect_name
        if dialect == "postgresql":
            self._session.execute(text(f"TRUNCATE TABLE {quoted} RESTART IDENTITY"))
        elif dialect == "sqlite":
            # SQLite has no TRUNCATE; AUTOINCREMENT counters live in sqlite_sequence
            self._session.execute(text(f"DELETE FROM {quoted}"))
            has_sequence = self._session.execute(
                text(
                    "SELECT name FROM sqlite_master "
                    "WHERE type = 'table' AND name = 'sqlite_sequence'"
                )
            ).first()
            if has_sequence is not None:
                self._session.execute(
                    text("DELETE FROM sqlite_sequence WHERE name = :name"),
                    {"name": table_name},
                )
        else:
            self._session.execute(text(f"TRUNCATE TABLE {quoted}"))

    def bulk_insert(
        self, table_name: str, rows: Sequence[Mapping[str, Any]]
    ) -> None:
        """Insert rows into a table in a single statement, preserving order."""
        table = self._table(table_name)
        if not rows:
            return
        self._session.execute(insert(table), [dict(row) for row in rows])
