#!/usr/bin/env python3
"""
Tactical Board - Database Setup Script
Creates the tables used to store tactical plans
"""

import sys
import argparse
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from loguru import logger
from sqlalchemy import inspect, text
from sqlalchemy.exc import SQLAlchemyError

from config import settings


def check_connection(engine) -> bool:
    """Check that the configured database accepts connections"""
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        return True
    except SQLAlchemyError as e:
        logger.error(f"Database connection failed: {e}")
        return False


def create_tables(engine):
    """Create all plan tables"""
    from tactical_board.database.models import init_database

    logger.info("Creating database tables...")
    init_database(engine)
    logger.info("Tables created successfully")


def drop_tables(engine):
    """Drop all plan tables (USE WITH CAUTION)"""
    from tactical_board.database.models import drop_database

    logger.warning("Dropping all database tables...")
    drop_database(engine)
    logger.warning("Tables dropped")


def main():
    parser = argparse.ArgumentParser(
        description="Setup Tactical Board database"
    )
    parser.add_argument(
        "--reset",
        action="store_true",
        help="Drop and recreate all tables (WARNING: deletes all saved plans)"
    )
    parser.add_argument(
        "--check",
        action="store_true",
        help="Only check database connection"
    )
    parser.add_argument(
        "-y", "--yes",
        action="store_true",
        help="Don't ask for confirmation on --reset"
    )

    args = parser.parse_args()

    from tactical_board.database.models import get_engine

    engine = get_engine()

    print("=" * 60)
    print("Tactical Board - Database Setup")
    print("=" * 60)
    print(f"Database: {engine.url.render_as_string(hide_password=True)}")
    print("=" * 60)

    settings.get_data_dir()

    print("\n[1/2] Checking database connection...")
    if not check_connection(engine):
        print("\n[FAIL] Failed to connect to the database!")
        print("\nCheck DATABASE_URL in .env, or unset it to use the local SQLite file.")
        sys.exit(1)

    print("[OK] Database connection successful")

    if args.check:
        print("\nConnection check complete.")
        return

    if args.reset:
        if not args.yes:
            confirm = input("\n[WARNING]  This will delete all saved plans. Continue? [y/N] ")
            if confirm.lower() != 'y':
                print("Aborted.")
                return

        print("\n[2/2] Dropping and recreating tables...")
        try:
            drop_tables(engine)
        except SQLAlchemyError as e:
            logger.debug(f"Drop tables error (may be expected): {e}")
    else:
        print("\n[2/2] Creating tables...")

    try:
        create_tables(engine)
    except SQLAlchemyError as e:
        print(f"[FAIL] Failed to create tables: {e}")
        sys.exit(1)

    tables = inspect(engine).get_table_names()
    print(f"[OK] Tables ready: {', '.join(sorted(tables))}")

    print("\n" + "=" * 60)
    print("[OK] Database setup complete!")
    print("=" * 60)
    print("\nYou can now run a simulation with:")
    print("  python scripts/run_simulation.py --home 4-4-2 --away 4-3-3 --save")


if __name__ == "__main__":
    main()
