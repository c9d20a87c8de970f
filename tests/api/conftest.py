"""
Pytest configuration and fixtures for API tests.

This module provides a Flask test client for the hobbits API. The
database is reset to its seeded state before every test, and the
connections are released when the test session ends.

Usage:
    # Run all API tests
    pytest tests/api/ -v
"""

from __future__ import annotations

from typing import Iterator, TYPE_CHECKING

import pytest
from flask import Flask
from flask.testing import FlaskClient

from db.seeds import reset_fixture
from db.session import close_session_manager

if TYPE_CHECKING:
    from db.protocols import DatabaseBackendProtocol


# =============================================================================
# Pytest Configuration
# =============================================================================


def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers for API tests."""
    config.addinivalue_line(
        "markers",
        "api: HTTP API test",
    )


# =============================================================================
# Flask App Fixture
# =============================================================================


@pytest.fixture(scope="session")
def app(backend: "DatabaseBackendProtocol") -> Iterator[Flask]:
    """Flask test app on the test database.

    Depends on the session backend so that the schema exists before
    the first request, and is torn down before the schema is dropped.
    The DATABASE_URL environment variable is set by tests/conftest.py,
    before main.py is imported here.
    """
    from main import app as flask_app

    flask_app.config["TESTING"] = True

    yield flask_app

    close_session_manager()


@pytest.fixture
def client(app: Flask) -> FlaskClient:
    """Flask test client."""
    return app.test_client()


@pytest.fixture(autouse=True)
def seeded(app: Flask, backend: "DatabaseBackendProtocol") -> None:
    """Reset the database to its seeded state before each test."""
    # An open transaction on the harness connection blocks TRUNCATE
    backend.rollback()
    reset_fixture()
