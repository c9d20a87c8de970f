"""
Exceptions raised by the fixture lifecycle.
"""

from __future__ import annotations


class FixtureSetupError(Exception):
    """Seeding the database failed: the connection is unavailable,
    the table does not exist, or the seed data does not fit the schema.
    Tests that depend on the fixture must not run."""

    pass


class ResourceTeardownError(Exception):
    """Releasing the database connection failed at the end of a
    test session. Results of tests that already ran remain valid."""

    pass
