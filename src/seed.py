"""

    Seed runner for the hobbits API

    Copyright (C) 2024 Miðeind ehf.
    Original author: Vilhjálmur Þorsteinsson

    The Creative Commons Attribution-NonCommercial 4.0
    International Public License (CC-BY-NC 4.0) applies to this software.
    For further information, see https://github.com/mideind/Netskrafl

    This utility resets the database to its seeded state: every table
    that has a seed file is truncated and repopulated.

    IMPORTANT: This deletes all existing rows in the seeded tables.

    Usage:
        python src/seed.py [--database-url URL] [--create-tables] [--drop-tables]

    Options:
        --database-url URL  Database to seed, defaults to DATABASE_URL
        --create-tables     Create missing tables before seeding
        --drop-tables       Drop all tables first (implies --create-tables)

"""

from __future__ import annotations

from typing import List, Optional

import argparse
import logging
import sys

from sqlalchemy.exc import SQLAlchemyError

from db.errors import FixtureSetupError, ResourceTeardownError
from db.seeds import load_seed_files
from db.testing import fixture_database
from db import reset_fixture


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Reset the database tables to their seeded state",
    )
    parser.add_argument(
        "--database-url",
        default=None,
        help="SQLAlchemy database URL (defaults to the DATABASE_URL environment variable)",
    )
    parser.add_argument(
        "--create-tables",
        action="store_true",
        help="Create missing tables before seeding",
    )
    parser.add_argument(
        "--drop-tables",
        action="store_true",
        help="Drop all tables before seeding (implies --create-tables)",
    )
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    """Run the seeds; return a process exit code"""
    logging.basicConfig(
        level=logging.INFO,
        format="[%(asctime)s] %(levelname)s in %(module)s: %(message)s",
    )
    args = parse_args(argv)
    create = args.create_tables or args.drop_tables
    try:
        seeds = load_seed_files()
        with fixture_database(args.database_url, create_tables=False) as db:
            if args.drop_tables:
                logging.info("Dropping all tables")
                db.drop_tables()
            if create:
                db.create_tables()
            reset_fixture(db)
    except FixtureSetupError as e:
        logging.error(f"Seeding failed: {e}")
        return 1
    except SQLAlchemyError as e:
        logging.error(f"Unable to prepare the database schema: {e}")
        return 1
    except ResourceTeardownError as e:
        logging.error(f"Seeding done, but closing the database failed: {e}")
        return 1
    logging.info(f"Applied {len(seeds)} seed file(s)")
    return 0


if __name__ == "__main__":
    sys.exit(main())
