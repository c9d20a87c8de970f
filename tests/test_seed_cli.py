"""
Tests for the seed runner command line utility.
"""

from __future__ import annotations

from pathlib import Path

from db.backend import DatabaseBackend
from seed import main, parse_args


def _names(url: str) -> list[str]:
    db = DatabaseBackend(database_url=url)
    try:
        return [h.name for h in db.hobbits.list_all()]
    finally:
        db.close()


def test_parse_args_defaults() -> None:
    args = parse_args([])
    assert args.database_url is None
    assert not args.create_tables
    assert not args.drop_tables


def test_seed_with_create_tables(tmp_path: Path) -> None:
    url = f"sqlite:///{tmp_path / 'cli.db3'}"
    assert main(["--database-url", url, "--create-tables"]) == 0
    assert _names(url) == ["sam", "frodo", "pippin", "merry"]


def test_seed_twice(tmp_path: Path) -> None:
    url = f"sqlite:///{tmp_path / 'twice.db3'}"
    assert main(["--database-url", url, "--create-tables"]) == 0
    assert main(["--database-url", url]) == 0
    assert _names(url) == ["sam", "frodo", "pippin", "merry"]


def test_seed_with_drop_tables(tmp_path: Path) -> None:
    url = f"sqlite:///{tmp_path / 'drop.db3'}"
    assert main(["--database-url", url, "--drop-tables"]) == 0
    assert _names(url) == ["sam", "frodo", "pippin", "merry"]


def test_seed_without_schema_fails(tmp_path: Path) -> None:
    url = f"sqlite:///{tmp_path / 'noschema.db3'}"
    assert main(["--database-url", url]) == 1
