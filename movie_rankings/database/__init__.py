"""
Database module for the movie rankings service.

This module provides database models, connection management, filters and CRUD
operations using SQLAlchemy ORM.
"""

from movie_rankings.database.models import Base, User, Movie, Ranking
from movie_rankings.database.connection import DatabaseManager, create_db_engine, DEFAULT_DATABASE_URL
from movie_rankings.database.filters import UserFilter, MovieFilter, RankingFilter
from movie_rankings.database.init_db import init_database, verify_schema, seed_database
from movie_rankings.database import crud

__all__ = [
    # Models
    'Base',
    'User',
    'Movie',
    'Ranking',
    # Connection
    'DatabaseManager',
    'create_db_engine',
    'DEFAULT_DATABASE_URL',
    # Filters
    'UserFilter',
    'MovieFilter',
    'RankingFilter',
    # Initialization
    'init_database',
    'verify_schema',
    'seed_database',
    # CRUD module
    'crud',
]
