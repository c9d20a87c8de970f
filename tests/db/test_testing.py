"""
Tests for the fixture lifecycle helpers.
"""

from __future__ import annotations

from pathlib import Path
from typing import List

import pytest

from db import testing
from db.errors import FixtureSetupError, ResourceTeardownError
from db.seeds import reset_fixture
from db.testing import close_backend, fixture_database, seeded_database


class _FailingCloseBackend:
    """Stands in for a backend whose connection cannot be released"""

    def close(self) -> None:
        raise ConnectionError("connection reset")


def _track_close(monkeypatch: pytest.MonkeyPatch) -> List[object]:
    closed: List[object] = []
    original = testing.close_backend

    def tracking_close(backend: object) -> None:
        closed.append(backend)
        original(backend)  # type: ignore[arg-type]

    monkeypatch.setattr(testing, "close_backend", tracking_close)
    return closed


def test_close_backend_raises_teardown_error() -> None:
    with pytest.raises(ResourceTeardownError):
        close_backend(_FailingCloseBackend())  # type: ignore[arg-type]


def test_seeded_database(tmp_path: Path) -> None:
    url = f"sqlite:///{tmp_path / 'seeded.db3'}"
    with seeded_database(url) as db:
        assert [h.name for h in db.hobbits.list_all()] == [
            "sam",
            "frodo",
            "pippin",
            "merry",
        ]


def test_seeded_database_releases_on_failure(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    closed = _track_close(monkeypatch)
    url = f"sqlite:///{tmp_path / 'failing.db3'}"
    with pytest.raises(RuntimeError):
        with seeded_database(url):
            raise RuntimeError("test failed")
    assert len(closed) == 1


def test_seeded_database_setup_failure(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    """Without a schema, seeding fails and the backend is still released."""
    closed = _track_close(monkeypatch)
    url = f"sqlite:///{tmp_path / 'noschema.db3'}"
    with pytest.raises(FixtureSetupError):
        with seeded_database(url, create_tables=False):
            pytest.fail("Tests must not run when seeding fails")
    assert len(closed) == 1


def test_fixture_database_drops_tables(tmp_path: Path) -> None:
    url = f"sqlite:///{tmp_path / 'dropped.db3'}"
    with fixture_database(url, drop_tables=True) as db:
        db.hobbits.create("bilbo")
    with fixture_database(url, create_tables=False) as db:
        with pytest.raises(FixtureSetupError):
            reset_fixture(db)
