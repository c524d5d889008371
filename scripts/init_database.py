#!/usr/bin/env python
"""
Database initialization script for the movie rankings service.

This script performs a database setup:
1. Creates database schema (tables, indexes, constraints)
2. Optionally seeds the sample group (4 users, 5 movies, their rankings)
3. Optionally imports an export file through the regular import path
4. Verifies the schema and prints record counts

Usage:
    # Create tables only
    python scripts/init_database.py

    # Fresh database with sample data
    python scripts/init_database.py --reset --seed

    # Restore from an export file
    python scripts/init_database.py --import-file movie-rankings-export-2024-12-31.json
"""

import sys
import json
import argparse
import logging
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from movie_rankings.api.config import get_database_url
from movie_rankings.core.data.transfer import import_data
from movie_rankings.database import crud, init_database, seed_database, verify_schema
from movie_rankings.utils.logging_config import configure_script_logging

logger = logging.getLogger("init_database")


def print_section(title):
    """Print a formatted section header."""
    print(f"\n{'='*60}")
    print(f"{title}")
    print('='*60)


def load_export_file(path: Path) -> dict:
    """
    Read an export file.

    Returns:
        Export document as a dictionary
    """
    with open(path, 'r', encoding='utf-8') as f:
        return json.load(f)


def print_counts(db_manager):
    """Print the number of users, movies and rankings."""
    with db_manager.session_scope() as session:
        print(f"  Users:    {crud.count_users(session)}")
        print(f"  Movies:   {crud.count_movies(session)}")
        print(f"  Rankings: {crud.count_rankings(session)}")


def main():
    """Main entry point for database initialization."""

    parser = argparse.ArgumentParser(
        description="Initialize the movie rankings database",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Fresh database with sample data
  python scripts/init_database.py --reset --seed

  # Import an export file into the existing database
  python scripts/init_database.py --import-file export.json --overwrite
        """
    )

    parser.add_argument(
        '--reset',
        action='store_true',
        help='Drop and recreate database tables (WARNING: deletes all data)'
    )
    parser.add_argument(
        '--seed',
        action='store_true',
        help='Insert the sample users, movies and rankings'
    )
    parser.add_argument(
        '--import-file',
        type=str,
        help='Path to a JSON export file to import'
    )
    parser.add_argument(
        '--overwrite',
        action='store_true',
        help='Update existing records when importing'
    )
    parser.add_argument(
        '--database-url',
        type=str,
        default=None,
        help='SQLAlchemy database URL (default: DATABASE_URL or sqlite:///data/movie_rankings.db)'
    )
    parser.add_argument(
        '--debug',
        action='store_true',
        help='Enable debug logging'
    )

    args = parser.parse_args()
    configure_script_logging(debug=args.debug)
    database_url = args.database_url or get_database_url()

    print_section("Movie Rankings Database Initialization")
    print(f"\nDatabase: {database_url}")
    print(f"Mode: {'Reset' if args.reset else 'Keep existing'}")

    try:
        db_manager = init_database(database_url=database_url, reset=args.reset)

        if args.seed:
            print_section("Seeding Sample Data")
            with db_manager.session_scope() as session:
                if crud.count_users(session) or crud.count_movies(session):
                    print("[SKIP] Database already has data; use --reset to reseed")
                else:
                    created = seed_database(session)
                    print(f"Created {created['users']} users, {created['movies']} movies, "
                          f"{created['rankings']} rankings")

        if args.import_file:
            print_section("Importing Export File")
            payload = load_export_file(Path(args.import_file))
            with db_manager.session_scope() as session:
                result = import_data(session, payload, overwrite=args.overwrite)
            for entity, tally in result['results'].items():
                print(f"  {entity}: {tally['imported']} imported, {tally['skipped']} skipped, "
                      f"{len(tally['errors'])} errors")
                for error in tally['errors']:
                    print(f"    - {error}")

        success = verify_schema(db_manager)

        print_section("Summary")
        print_counts(db_manager)
        db_manager.close()
        sys.exit(0 if success else 1)

    except (OSError, ValueError) as e:
        logger.error("Initialization failed: %s", e, exc_info=True)
        print(f"\n[ERROR] Initialization failed: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
