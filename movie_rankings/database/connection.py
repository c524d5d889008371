"""
Engine and session management.

``create_app`` builds one DatabaseManager per application and keeps it on
``app.state``; request handlers get their sessions from it through
``session_scope``. Nothing here holds a module-level connection.
"""

import logging
import os
from contextlib import contextmanager
from typing import Generator
from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool

from movie_rankings.database.models import Base

logger = logging.getLogger(__name__)

DEFAULT_DATABASE_URL = "sqlite:///data/movie_rankings.db"


def _sqlite_pragmas(dbapi_conn, connection_record):
    # SQLite ships with foreign key enforcement off
    cursor = dbapi_conn.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def create_db_engine(database_url: str = DEFAULT_DATABASE_URL, echo: bool = False) -> Engine:
    """
    Build an engine for ``database_url``.

    SQLite gets a single shared connection, so an in-memory database lives as
    long as the engine, and foreign keys are switched on for every
    connection. Other backends use a pre-pinged connection pool.
    """
    if make_url(database_url).get_backend_name() != "sqlite":
        return create_engine(database_url, echo=echo, pool_pre_ping=True)

    engine = create_engine(
        database_url,
        echo=echo,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    event.listen(engine, "connect", _sqlite_pragmas)
    return engine


class DatabaseManager:
    """
    Owns the engine and the session factory for one database.

    Args:
        database_url: SQLAlchemy database URL
        echo: Log every SQL statement
    """

    def __init__(self, database_url: str = DEFAULT_DATABASE_URL, echo: bool = False):
        self.database_url = database_url
        self.engine = create_db_engine(database_url, echo=echo)
        # Objects stay readable after commit so routes can serialize them
        self.SessionLocal = sessionmaker(
            bind=self.engine,
            autoflush=False,
            expire_on_commit=False,
        )

    def _sqlite_file(self):
        url = make_url(self.database_url)
        if url.get_backend_name() != "sqlite" or url.database in (None, "", ":memory:"):
            return None
        return url.database

    def create_tables(self):
        """Create missing tables; existing tables are left as they are."""
        path = self._sqlite_file()
        if path and os.path.dirname(path):
            os.makedirs(os.path.dirname(path), exist_ok=True)
        Base.metadata.create_all(bind=self.engine)

    def drop_tables(self):
        """Drop every table. All data is lost."""
        Base.metadata.drop_all(bind=self.engine)

    def reset_database(self):
        """Drop and recreate every table. All data is lost."""
        self.drop_tables()
        self.create_tables()

    def check_connection(self) -> bool:
        """True when a trivial query succeeds."""
        try:
            with self.engine.connect() as conn:
                conn.execute(text("SELECT 1"))
        except SQLAlchemyError as e:
            logger.error("Database connection check failed: %s", e)
            return False
        return True

    @contextmanager
    def session_scope(self) -> Generator[Session, None, None]:
        """
        Session that commits when the block finishes and rolls back if it raises.

        Usage:
            with db_manager.session_scope() as session:
                crud.create_user(session, username="alice")
        """
        session = self.SessionLocal()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def close(self):
        """Dispose of the engine's connections."""
        self.engine.dispose()
