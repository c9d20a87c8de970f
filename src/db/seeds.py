"""
Seed loader.

Resets tables to a known fixed state, for development and for tests.
Seed data lives in JSON files in the seed_data directory, applied in
file name order. Each file names a table and lists its rows:

    {
        "table": "hobbits",
        "rows": [{"name": "sam"}, {"name": "frodo"}]
    }

Applying a seed file truncates its table (also resetting the identity
counter) and then inserts the rows in the order given, so the first row
gets id 1, the second id 2, and so on. Applying the seeds twice in a row
yields the same state as applying them once.

There is no locking: seeding races with any other writer to the same
tables, including a second test process sharing the database.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence, TYPE_CHECKING

import json
import logging
from dataclasses import dataclass
from pathlib import Path

from sqlalchemy.exc import SQLAlchemyError

from .errors import FixtureSetupError

if TYPE_CHECKING:
    from .protocols import DatabaseBackendProtocol


SEED_DIR = Path(__file__).parent / "seed_data"

# The hobbit names in seed order; must match seed_data/001-hobbits.json
HOBBITS_SEED: Sequence[str] = ("sam", "frodo", "pippin", "merry")

_log = logging.getLogger(__name__)


@dataclass(frozen=True)
class SeedFile:
    """The contents of one seed file"""

    name: str
    table: str
    rows: List[Dict[str, Any]]


def _parse_seed_file(path: Path) -> SeedFile:
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError) as e:
        raise FixtureSetupError(f"Unable to read seed file {path.name}: {e}") from e
    table = data.get("table") if isinstance(data, dict) else None
    rows = data.get("rows") if isinstance(data, dict) else None
    if not isinstance(table, str) or not table:
        raise FixtureSetupError(f"Seed file {path.name} does not name a table")
    if not isinstance(rows, list) or not all(isinstance(r, dict) for r in rows):
        raise FixtureSetupError(
            f"Seed file {path.name} must contain a list of row objects"
        )
    # A multi-row insert takes its columns from the first row
    for i, row in enumerate(rows[1:], start=1):
        if set(row) != set(rows[0]):
            raise FixtureSetupError(
                f"Seed file {path.name}: row {i} has columns {sorted(row)}, "
                f"expected {sorted(rows[0])}"
            )
    return SeedFile(name=path.name, table=table, rows=rows)


def load_seed_files(seed_dir: Optional[Path] = None) -> List[SeedFile]:
    """Load all seed files from the seed directory, sorted by file name"""
    directory = SEED_DIR if seed_dir is None else seed_dir
    if not directory.is_dir():
        raise FixtureSetupError(f"Seed directory not found: {directory}")
    return [_parse_seed_file(p) for p in sorted(directory.glob("*.json"))]


def apply_seed(db: "DatabaseBackendProtocol", seed: SeedFile) -> None:
    """Truncate the seed's table and insert its rows, within the
    current transaction. Does not commit."""
    db.truncate_table(seed.table)
    db.bulk_insert(seed.table, seed.rows)
    _log.info(f"Seeded table {seed.table} with {len(seed.rows)} rows from {seed.name}")


def _run_seeds(db: "DatabaseBackendProtocol", seeds: Sequence[SeedFile]) -> None:
    try:
        for seed in seeds:
            apply_seed(db, seed)
        db.commit()
    except (SQLAlchemyError, ValueError) as e:
        try:
            db.rollback()
        except SQLAlchemyError as rollback_error:
            _log.warning(f"Error during rollback after failed seed: {rollback_error}")
        raise FixtureSetupError(f"Unable to seed the database: {e}") from e


def reset_fixture(
    db: Optional["DatabaseBackendProtocol"] = None,
    seed_dir: Optional[Path] = None,
) -> None:
    """Reset the seeded tables to their fixed known state.

    With no backend given, runs within a request context of the global
    session manager. Otherwise uses the given backend and commits on it.

    Raises:
        FixtureSetupError: if the seed files cannot be read, or if the
            database is unavailable or lacks the seeded tables. Nothing
            is committed in that case.
    """
    seeds = load_seed_files(seed_dir)
    if db is not None:
        _run_seeds(db, seeds)
        return

    from .session import get_session_manager

    try:
        manager = get_session_manager()
    except RuntimeError as e:
        raise FixtureSetupError(str(e)) from e
    try:
        with manager.request_context() as backend:
            _run_seeds(backend, seeds)
    except SQLAlchemyError as e:
        # Raised by the commit at the end of the request context
        raise FixtureSetupError(f"Unable to seed the database: {e}") from e
