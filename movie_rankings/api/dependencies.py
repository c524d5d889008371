"""
FastAPI dependency injection for database session and TMDB client.
"""

import logging
from typing import Generator, Optional

from fastapi import Header, Request
from sqlalchemy.orm import Session

from movie_rankings.api.config import get_tmdb_api_key, get_tmdb_base_url, get_tmdb_timeout
from movie_rankings.core.metadata.tmdb import TMDBClient
from movie_rankings.core.stats import StatisticsService

logger = logging.getLogger(__name__)


def get_db(request: Request) -> Generator[Session, None, None]:
    """Yield a database session from the application's DatabaseManager."""
    with request.app.state.db_manager.session_scope() as session:
        yield session


def get_statistics_service(request: Request) -> Generator[StatisticsService, None, None]:
    """Yield a StatisticsService bound to its own session."""
    with request.app.state.db_manager.session_scope() as session:
        yield StatisticsService(session)


def get_current_user_id(x_user_id: Optional[int] = Header(None, alias="X-User-Id")) -> Optional[int]:
    """User id the caller identifies as, if any."""
    return x_user_id


# Singleton TMDB client
_tmdb_client: TMDBClient | None = None


def get_tmdb_client() -> TMDBClient:
    """Get or create singleton TMDBClient."""
    global _tmdb_client
    if _tmdb_client is None:
        _tmdb_client = TMDBClient(
            api_key=get_tmdb_api_key(),
            base_url=get_tmdb_base_url(),
            timeout=get_tmdb_timeout(),
        )
        if not _tmdb_client.configured:
            logger.warning("TMDB_API_KEY not set; metadata lookups will fail")
    return _tmdb_client
