"""
Database connection management using SQLAlchemy.

This module provides database engine creation and the session factory
bound to it. PostgreSQL is the production target; SQLite
is supported for local development and for the test suite.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import sessionmaker, Session

from .config import get_config


def create_db_engine(
    database_url: Optional[str] = None,
    pool_size: Optional[int] = None,
    max_overflow: Optional[int] = None,
    pool_timeout: Optional[int] = None,
    pool_recycle: Optional[int] = None,
    echo: Optional[bool] = None,
) -> Engine:
    """Create a SQLAlchemy engine with connection pooling.

    All parameters default to values from DatabaseConfig if not provided.
    Pool settings are not applied to SQLite, which uses SQLAlchemy's
    default pool for its file and memory databases.

    Args:
        database_url: SQLAlchemy connection URL.
        pool_size: Number of connections to keep in the pool.
        max_overflow: Maximum overflow connections beyond pool_size.
        pool_timeout: Seconds to wait for a connection from the pool.
        pool_recycle: Seconds after which to recycle connections.
        echo: If True, log all SQL statements.

    Returns:
        SQLAlchemy Engine instance.
    """
    config = get_config()
    url = database_url or config.get_database_url()
    backend_name = make_url(url).get_backend_name()

    kwargs: Dict[str, Any] = {
        "echo": echo if echo is not None else config.echo_sql,
    }
    if backend_name != "sqlite":
        kwargs.update(
            pool_size=pool_size if pool_size is not None else config.pool_size,
            max_overflow=max_overflow if max_overflow is not None else config.max_overflow,
            pool_timeout=pool_timeout if pool_timeout is not None else config.pool_timeout,
            pool_recycle=pool_recycle if pool_recycle is not None else config.pool_recycle,
        )
    if backend_name == "postgresql":
        # Ensure all connections use UTC timezone
        kwargs["connect_args"] = {"options": "-c timezone=utc"}

    engine = create_engine(url, **kwargs)

    if backend_name == "postgresql":
        # Set timezone on each connection checkout
        @event.listens_for(engine, "connect")
        def set_timezone(dbapi_connection, connection_record):
            cursor = dbapi_connection.cursor()
            cursor.execute("SET TIME ZONE 'UTC'")
            cursor.close()

    return engine


class DatabaseSession:
    """Owns an engine and the sessionmaker bound to it.

    Usage:
        db_session = DatabaseSession(engine)
        session = db_session.session_factory()
        ...
        db_session.close()  # Disposes of the connection pool
    """

    def __init__(self, engine: Engine) -> None:
        """Initialize with a SQLAlchemy engine."""
        self._engine = engine
        self._session_factory = sessionmaker(
            bind=engine,
            expire_on_commit=False,  # Don't expire objects after commit
        )

    @property
    def engine(self) -> Engine:
        """Get the underlying SQLAlchemy engine."""
        return self._engine

    @property
    def session_factory(self) -> sessionmaker[Session]:
        """Get the sessionmaker bound to this engine."""
        return self._session_factory

    def close(self) -> None:
        """Close the database engine and all connections."""
        self._engine.dispose()
