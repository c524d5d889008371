"""
API configuration loaded from environment or defaults.
"""

import os

from movie_rankings.database.connection import DEFAULT_DATABASE_URL


def get_database_url() -> str:
    """Get SQLAlchemy database URL from env or default."""
    return os.getenv("DATABASE_URL", "") or DEFAULT_DATABASE_URL


def get_log_level() -> str:
    """Get log level from env or default."""
    return os.getenv("LOG_LEVEL", "INFO").upper()


def get_log_file() -> str | None:
    """Get optional log file name (written under logs/)."""
    return os.getenv("LOG_FILE") or None


def get_api_host() -> str:
    """Get API host for binding."""
    return os.getenv("API_HOST", "0.0.0.0")


def get_api_port() -> int:
    """Get API port."""
    return int(os.getenv("API_PORT", "8000"))


def get_environment() -> str:
    """Get deployment environment name."""
    return os.getenv("ENVIRONMENT", "development").lower()


def is_production() -> bool:
    return get_environment() == "production"


def get_cors_origins() -> list[str]:
    """Get allowed CORS origins (comma-separated, '*' allowed)."""
    raw = os.getenv("CORS_ORIGINS", "http://localhost:3000")
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


def get_rate_limit() -> str:
    """Get per-client rate limit in limits notation."""
    default = "10000/15minutes" if get_environment() == "development" else "100/15minutes"
    return os.getenv("RATE_LIMIT", default)


def is_rate_limit_enabled() -> bool:
    """Whether request rate limiting is on."""
    return os.getenv("RATE_LIMIT_ENABLED", "true").lower() not in ("0", "false", "no", "off")


def get_tmdb_api_key() -> str | None:
    """Get TMDB API key."""
    return os.getenv("TMDB_API_KEY") or None


def get_tmdb_base_url() -> str:
    """Get TMDB API root URL."""
    return os.getenv("TMDB_BASE_URL", "https://api.themoviedb.org/3")


def get_tmdb_timeout() -> float:
    """Get TMDB request timeout in seconds."""
    return float(os.getenv("TMDB_TIMEOUT", "10"))


def get_bulk_batch_size() -> int:
    """Get number of movies per bulk update batch."""
    return int(os.getenv("BULK_UPDATE_BATCH_SIZE", "10"))


def get_bulk_delay() -> float:
    """Get pause between bulk update batches in seconds."""
    return float(os.getenv("BULK_UPDATE_DELAY", "0.1"))
