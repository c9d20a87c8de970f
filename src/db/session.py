"""
Request-scoped database session management.

This module provides a unified interface for managing database sessions
across the application. It handles:

- Request-scoped sessions with automatic cleanup
- Transaction boundaries aligned with the API request lifecycle

Transaction Model:
- Each API request operates within an implicit transaction
- create()/bulk_insert() operations flush to the database but don't commit
- Commit happens automatically at successful request completion
- Rollback happens on any exception
"""

from __future__ import annotations

import logging
from typing import Optional, Any, TYPE_CHECKING, Iterator
from contextlib import contextmanager
from threading import local

from sqlalchemy.orm import Session, sessionmaker

from .config import get_config
from .connection import DatabaseSession, create_db_engine

if TYPE_CHECKING:
    from .protocols import DatabaseBackendProtocol

# Thread-local storage for request-scoped backend instances
_thread_local = local()

# Logger for this module
_log = logging.getLogger(__name__)


class SessionManager:
    """Manages database sessions and backend lifecycle.

    Usage:
        # Initialize once at application startup
        session_manager = SessionManager(database_url="...")

        # In WSGI middleware or Flask hooks
        with session_manager.request_context():
            # All database operations here use the request-scoped session
            backend = session_manager.get_backend()
            hobbits = backend.hobbits.list_all()

            # On successful completion, changes are committed
            # On exception, changes are rolled back
    """

    def __init__(self, database_url: Optional[str] = None) -> None:
        """Initialize the session manager.

        Creates the shared engine (and its connection pool) and
        sessionmaker once. Each request creates a lightweight Session
        from the shared sessionmaker, which checks out a pooled connection.

        Args:
            database_url: SQLAlchemy connection URL. If not provided,
                          reads from the DATABASE_URL environment variable.
        """
        self._database_url = get_config().get_database_url() if database_url is None else database_url
        self._db_session = DatabaseSession(create_db_engine(self._database_url))

    @property
    def database_url(self) -> str:
        """Get the configured database URL."""
        return self._database_url

    @property
    def session_factory(self) -> sessionmaker[Session]:
        """Get the shared sessionmaker."""
        return self._db_session.session_factory

    def _create_backend(self) -> "DatabaseBackendProtocol":
        """Create a new backend instance for the current request."""
        from .backend import DatabaseBackend

        return DatabaseBackend(session_factory=self.session_factory)

    def get_backend(self) -> "DatabaseBackendProtocol":
        """Get the request-scoped backend instance.

        Returns the backend instance for the current request/thread.
        Creates one if it doesn't exist.
        """
        backend: Optional["DatabaseBackendProtocol"] = getattr(
            _thread_local, "backend", None
        )
        if backend is None:
            backend = self._create_backend()
            _thread_local.backend = backend
        return backend

    def _cleanup_backend(self) -> None:
        """Clean up the request-scoped backend."""
        backend: Optional["DatabaseBackendProtocol"] = getattr(
            _thread_local, "backend", None
        )
        if backend is not None:
            try:
                backend.close()
            except Exception as e:
                _log.warning(f"Error closing backend: {e}")
            finally:
                _thread_local.backend = None

    @contextmanager
    def request_context(self) -> Iterator["DatabaseBackendProtocol"]:
        """Context manager for request-scoped database operations.

        This wraps the entire request lifecycle:
        1. Creates a backend/session for this request
        2. Yields the backend for use
        3. Commits on successful completion
        4. Rolls back on any exception
        5. Cleans up the session
        """
        backend = self.get_backend()
        success = False
        try:
            yield backend
            success = True
        except Exception:
            try:
                backend.rollback()
            except Exception as e:
                _log.warning(f"Error during rollback: {e}")
            raise
        finally:
            if success:
                try:
                    backend.commit()
                except Exception as e:
                    _log.error(f"Error during commit: {e}")
                    try:
                        backend.rollback()
                    except Exception as rollback_error:
                        _log.warning(f"Error during rollback: {rollback_error}")
                    raise
            self._cleanup_backend()

    def close(self) -> None:
        """Dispose of the shared engine and its connection pool."""
        self._db_session.close()


# Global session manager instance
_session_manager: Optional[SessionManager] = None


def init_session_manager(database_url: Optional[str] = None) -> SessionManager:
    """Initialize the global session manager.

    Call this once at application startup, before handling any requests.
    If the database URL is not provided, it is read from the environment
    via DatabaseConfig.

    Returns:
        The initialized SessionManager instance.
    """
    global _session_manager
    if _session_manager is not None:
        _session_manager.close()
    _session_manager = SessionManager(database_url=database_url)
    _log.info(
        "Database session manager initialized, dialect: "
        f"{_session_manager._db_session.engine.dialect.name}"
    )
    return _session_manager


def get_session_manager() -> SessionManager:
    """Get the global session manager.

    Raises:
        RuntimeError: If init_session_manager() hasn't been called.
    """
    if _session_manager is None:
        raise RuntimeError(
            "Session manager not initialized. "
            "Call init_session_manager() at application startup."
        )
    return _session_manager


def close_session_manager() -> None:
    """Close and forget the global session manager, if any."""
    global _session_manager
    if _session_manager is not None:
        _session_manager.close()
        _session_manager = None


def get_db() -> "DatabaseBackendProtocol":
    """Get the database backend for the current request.

    This is the primary entry point for application code to access
    the database.

    Example:
        from db import get_db

        def hobbits_api():
            db = get_db()
            return jsonify([h.to_dict() for h in db.hobbits.list_all()])
    """
    return get_session_manager().get_backend()


def db_wsgi_middleware(wsgi_app: Any) -> Any:
    """WSGI middleware that wraps each request in a database context.

    The session manager is looked up per request, so the middleware
    can be installed before init_session_manager() is called.
    """

    def middleware(environ: Any, start_response: Any) -> Any:
        with get_session_manager().request_context():
            return wsgi_app(environ, start_response)

    return middleware

