"""
Database initialization, schema verification and sample data.

This module provides functions to initialize the database schema and
populate it with the sample group used for local development.
"""

import logging
import random
from typing import Dict, Optional

from sqlalchemy import inspect
from sqlalchemy.orm import Session

from movie_rankings.database.connection import DatabaseManager, DEFAULT_DATABASE_URL
from movie_rankings.database import crud

logger = logging.getLogger(__name__)

EXPECTED_TABLES = {'users', 'movies', 'rankings'}

SAMPLE_USERS = [
    {'username': 'john_doe', 'display_name': 'John Doe'},
    {'username': 'jane_smith', 'display_name': 'Jane Smith'},
    {'username': 'bob_wilson', 'display_name': 'Bob Wilson'},
    {'username': 'alice_jones', 'display_name': 'Alice Jones'},
]

SAMPLE_MOVIES = [
    {
        'title': 'The Shawshank Redemption',
        'year': 1994,
        'description': 'Two imprisoned men bond over a number of years, finding solace '
                       'and eventual redemption through acts of common decency.',
        'watched_year': 2024,
        'added_by': 'john_doe',
    },
    {
        'title': 'The Godfather',
        'year': 1972,
        'description': 'The aging patriarch of an organized crime dynasty transfers '
                       'control to his reluctant son.',
        'watched_year': 2024,
        'added_by': 'jane_smith',
    },
    {
        'title': 'The Dark Knight',
        'year': 2008,
        'description': 'When the menace known as the Joker wreaks havoc on Gotham City, '
                       'Batman must accept one of the greatest psychological and physical '
                       'tests of his ability to fight injustice.',
        'watched_year': 2023,
        'added_by': 'bob_wilson',
    },
    {
        'title': 'Pulp Fiction',
        'year': 1994,
        'description': 'The lives of two mob hitmen, a boxer, a gangster and his wife '
                       'intertwine in four tales of violence and redemption.',
        'watched_year': 2023,
        'added_by': 'alice_jones',
    },
    {
        'title': 'Forrest Gump',
        'year': 1994,
        'description': 'The presidencies of Kennedy and Johnson, the events of Vietnam, '
                       'Watergate, and other historical events unfold through the '
                       'perspective of an Alabama man with an IQ of 75.',
        'watched_year': 2024,
        'added_by': 'john_doe',
    },
]

# Inclusive rating range used for the sample rankings of each watched year
SAMPLE_RATING_RANGES = {
    2024: (7, 10),
    2023: (6, 9),
}


def init_database(
    database_url: str = DEFAULT_DATABASE_URL,
    reset: bool = False,
    echo: bool = False,
) -> DatabaseManager:
    """
    Initialize the database and create all tables.

    Args:
        database_url: SQLAlchemy database URL
        reset: If True, drop existing tables before creating new ones
        echo: If True, log all SQL statements

    Returns:
        DatabaseManager instance
    """
    db_manager = DatabaseManager(database_url=database_url, echo=echo)

    if reset:
        logger.info("Resetting database (dropping all tables)...")
        db_manager.reset_database()
        logger.info("Database reset complete.")
    else:
        logger.info("Creating database tables...")
        db_manager.create_tables()
        logger.info("Database tables created.")

    return db_manager


def verify_schema(db_manager: DatabaseManager) -> bool:
    """
    Verify that all tables exist in the database.

    Args:
        db_manager: DatabaseManager instance

    Returns:
        True if all tables exist, False otherwise
    """
    inspector = inspect(db_manager.engine)
    existing_tables = set(inspector.get_table_names())

    missing_tables = EXPECTED_TABLES - existing_tables
    if missing_tables:
        logger.error("Missing tables: %s", sorted(missing_tables))
        return False

    logger.info("All tables exist: %s", sorted(existing_tables))
    return True


def seed_database(session: Session, seed: Optional[int] = 42) -> Dict[str, int]:
    """
    Populate an empty database with the sample group.

    Every sample user ranks every sample movie in the movie's watched year.
    Ratings are drawn from a seeded generator so repeated runs produce the
    same data.

    Args:
        session: Database session
        seed: Random seed for ratings (None for a fresh draw)

    Returns:
        Counts of created users, movies and rankings
    """
    rng = random.Random(seed)

    users = [crud.create_user(session, **fields) for fields in SAMPLE_USERS]
    logger.info("Created %d users", len(users))

    movies = [crud.create_movie(session, **fields) for fields in SAMPLE_MOVIES]
    logger.info("Created %d movies", len(movies))

    ranking_count = 0
    for year in sorted(SAMPLE_RATING_RANGES, reverse=True):
        low, high = SAMPLE_RATING_RANGES[year]
        for user in users:
            for movie in movies:
                if movie.watched_year != year:
                    continue
                crud.create_ranking(
                    session,
                    user_id=user.id,
                    movie_id=movie.id,
                    rating=rng.randint(low, high),
                    ranking_year=year,
                )
                ranking_count += 1
    logger.info("Created %d rankings", ranking_count)

    return {'users': len(users), 'movies': len(movies), 'rankings': ranking_count}
