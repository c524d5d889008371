"""
System API endpoints (health, endpoint listing).
"""

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from movie_rankings import __version__
from movie_rankings.api.dependencies import get_db
from movie_rankings.api.limiter import limiter
from movie_rankings.database import crud

logger = logging.getLogger(__name__)

router = APIRouter(tags=["system"])

ENDPOINTS = {
    "users": {
        "base": "/api/users",
        "operations": ["GET", "POST"],
        "byId": "/api/users/{id}",
        "operationsById": ["GET", "PUT", "DELETE"],
        "stats": "/api/users/{id}/stats",
    },
    "movies": {
        "base": "/api/movies",
        "operations": ["GET", "POST"],
        "byId": "/api/movies/{id}",
        "operationsById": ["GET", "PUT", "DELETE"],
        "stats": "/api/movies/stats",
        "unrated": "/api/movies/unrated/{year}",
        "bulkUpdate": "/api/movies/bulk-update",
    },
    "rankings": {
        "base": "/api/rankings",
        "operations": ["GET", "POST"],
        "byId": "/api/rankings/{id}",
        "operationsById": ["GET", "PUT", "DELETE"],
        "byYear": "/api/rankings/year/{year}",
        "yearlyStats": "/api/rankings/stats/years",
        "userMovie": "/api/rankings/user/{userId}/movie/{movieId}",
        "userMovieYear": "/api/rankings/user/{userId}/movie/{movieId}/year/{year}",
    },
    "data": {
        "export": "/api/data/export",
        "import": "/api/data/import",
        "stats": "/api/data/stats",
    },
    "stats": {
        "overall": "/api/stats/overall",
        "year": "/api/stats/year/{year}",
        "watchedYear": "/api/stats/watched-year/{year}",
        "user": "/api/stats/user/{id}",
        "movie": "/api/stats/movie/{id}",
        "ratingDistribution": "/api/stats/rating-distribution",
        "topMovies": "/api/stats/top-movies",
        "topUsers": "/api/stats/top-users",
    },
    "tmdb": {
        "search": "/api/tmdb/search",
        "movie": "/api/tmdb/movie/{tmdbId}",
        "match": "/api/tmdb/match",
        "import": "/api/tmdb/import",
    },
    "health": "/health",
}


@router.get("/health")
@limiter.exempt
def health_check(request: Request, db: Session = Depends(get_db)):
    """Health check: database reachable and record counts."""
    timestamp = datetime.now(timezone.utc).isoformat()
    if not request.app.state.db_manager.check_connection():
        return JSONResponse(
            status_code=503,
            content={"status": "unhealthy", "timestamp": timestamp, "database": "disconnected"},
        )
    try:
        counts = {
            "users": crud.count_users(db),
            "movies": crud.count_movies(db),
            "rankings": crud.count_rankings(db),
        }
    except SQLAlchemyError as e:
        logger.error("Health check failed: %s", e)
        return JSONResponse(
            status_code=503,
            content={"status": "unhealthy", "timestamp": timestamp, "database": "error"},
        )
    return {
        "status": "ok",
        "timestamp": timestamp,
        "database": "connected",
        "counts": counts,
    }


@router.get("/api")
def api_info():
    """Self-describing list of endpoints."""
    return {
        "message": "Movie Rankings API",
        "version": __version__,
        "endpoints": ENDPOINTS,
    }
