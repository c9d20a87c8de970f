"""
Testing utilities for the database layer.

This module wraps the fixture lifecycle (acquire a backend, seed it,
hand it to the tests, release it) behind a context manager, so that
the connection is released on every exit path, including failures.
"""

from __future__ import annotations

from typing import Iterator, Optional, TYPE_CHECKING
from contextlib import contextmanager
import logging

from .backend import DatabaseBackend
from .errors import ResourceTeardownError
from .seeds import reset_fixture

if TYPE_CHECKING:
    from .protocols import DatabaseBackendProtocol


_log = logging.getLogger(__name__)


def close_backend(backend: "DatabaseBackendProtocol") -> None:
    """Close a backend, reporting any failure as a ResourceTeardownError."""
    try:
        backend.close()
    except Exception as e:
        _log.error(f"Error releasing database connection: {e}")
        raise ResourceTeardownError(f"Unable to release database connection: {e}") from e


@contextmanager
def fixture_database(
    database_url: Optional[str] = None,
    create_tables: bool = True,
    drop_tables: bool = False,
) -> Iterator["DatabaseBackendProtocol"]:
    """Acquire a backend for a test session.

    Optionally creates the schema on entry and drops it on exit.
    The backend is always closed on exit.

    Example:
        with fixture_database(url) as db:
            reset_fixture(db)
            assert db.hobbits.count() == 4
    """
    backend = DatabaseBackend(database_url=database_url)
    try:
        if create_tables:
            backend.create_tables()
        yield backend
        if drop_tables:
            backend.rollback()
            backend.drop_tables()
    finally:
        close_backend(backend)


@contextmanager
def seeded_database(
    database_url: Optional[str] = None,
    create_tables: bool = True,
) -> Iterator["DatabaseBackendProtocol"]:
    """Acquire a backend, seed it and yield it; release it on exit.

    Raises:
        FixtureSetupError: if seeding fails. The backend is still closed.
        ResourceTeardownError: if closing the backend fails.
    """
    with fixture_database(database_url, create_tables=create_tables) as backend:
        reset_fixture(backend)
        yield backend
