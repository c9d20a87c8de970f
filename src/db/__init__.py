"""
Database layer for the hobbits API.

This package wraps SQLAlchemy behind a small backend interface, with
request-scoped sessions for the web server and a seed loader that
resets the tables to a known state.

Request-Scoped Sessions:
    # In application startup (main.py):
    from db import init_session_manager
    init_session_manager(database_url="...")

    # In WSGI/middleware:
    from db import db_wsgi_middleware
    app.wsgi_app = db_wsgi_middleware(app.wsgi_app)

    # In application code:
    from db import get_db
    db = get_db()
    hobbits = db.hobbits.list_all()

Seeding:
    from db import reset_fixture
    reset_fixture()  # Truncates and repopulates the seeded tables
"""

from __future__ import annotations

from .backend import DatabaseBackend
from .errors import FixtureSetupError, ResourceTeardownError
from .protocols import HobbitEntity, DatabaseBackendProtocol
from .seeds import HOBBITS_SEED, reset_fixture
from .session import (
    SessionManager,
    init_session_manager,
    get_session_manager,
    close_session_manager,
    get_db,
    db_wsgi_middleware,
)


__all__ = [
    # Backend
    "DatabaseBackend",
    "DatabaseBackendProtocol",
    "HobbitEntity",
    # Session management
    "SessionManager",
    "init_session_manager",
    "get_session_manager",
    "close_session_manager",
    "get_db",
    "db_wsgi_middleware",
    # Seeding
    "HOBBITS_SEED",
    "reset_fixture",
    "FixtureSetupError",
    "ResourceTeardownError",
]
