"""
FastAPI application entry point for the Movie Rankings API.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi.middleware import SlowAPIMiddleware

from movie_rankings import __version__
from movie_rankings.api.config import (
    get_api_host, get_api_port, get_cors_origins, get_database_url,
    get_environment, get_log_file, get_log_level,
)
from movie_rankings.api.errors import register_exception_handlers
from movie_rankings.api.limiter import limiter
from movie_rankings.api.routers import users, movies, rankings, data, stats, tmdb, system
from movie_rankings.database.connection import DatabaseManager

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    db_manager: DatabaseManager = app.state.db_manager
    db_manager.create_tables()
    logger.info("Movie Rankings API started (environment=%s)", get_environment())
    yield
    db_manager.close()


def create_app(database_url: str | None = None, rate_limit_enabled: bool | None = None) -> FastAPI:
    """
    Build the application.

    Args:
        database_url: SQLAlchemy URL (defaults to DATABASE_URL)
        rate_limit_enabled: Override RATE_LIMIT_ENABLED

    Returns:
        Configured FastAPI app; tables are created on startup
    """
    app = FastAPI(
        title="Movie Rankings API",
        description="REST API for tracking a group's yearly movie rankings",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.db_manager = DatabaseManager(database_url or get_database_url())

    if rate_limit_enabled is not None:
        limiter.enabled = rate_limit_enabled
    app.state.limiter = limiter
    app.add_middleware(SlowAPIMiddleware)

    origins = get_cors_origins()
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials="*" not in origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    app.include_router(users.router)
    app.include_router(movies.router)
    app.include_router(rankings.router)
    app.include_router(data.router)
    app.include_router(stats.router)
    app.include_router(tmdb.router)
    app.include_router(system.router)

    @app.get("/")
    def root():
        """Root endpoint."""
        return {
            "message": "Movie Rankings API",
            "docs": "/docs",
            "api": "/api",
            "health": "/health",
        }

    return app


app = create_app()


def run():
    """Run the API with uvicorn using environment configuration."""
    import uvicorn

    from movie_rankings.utils.logging_config import configure_api_logging

    configure_api_logging(level=get_log_level(), log_file=get_log_file())
    uvicorn.run(app, host=get_api_host(), port=get_api_port())


if __name__ == "__main__":
    run()
