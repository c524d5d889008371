"""
Tests for environment-driven configuration.
"""

from movie_rankings.api import config
from movie_rankings.database.connection import DEFAULT_DATABASE_URL


def test_defaults(monkeypatch):
    for name in ("DATABASE_URL", "ENVIRONMENT", "RATE_LIMIT", "CORS_ORIGINS", "TMDB_API_KEY"):
        monkeypatch.delenv(name, raising=False)
    assert config.get_database_url() == DEFAULT_DATABASE_URL
    assert config.is_production() is False
    assert config.get_rate_limit() == "10000/15minutes"
    assert config.get_cors_origins() == ["http://localhost:3000"]
    assert config.get_tmdb_api_key() is None


def test_production_rate_limit(monkeypatch):
    monkeypatch.delenv("RATE_LIMIT", raising=False)
    monkeypatch.setenv("ENVIRONMENT", "Production")
    assert config.is_production() is True
    assert config.get_rate_limit() == "100/15minutes"


def test_cors_origins_list(monkeypatch):
    monkeypatch.setenv("CORS_ORIGINS", "http://a.test, http://b.test,")
    assert config.get_cors_origins() == ["http://a.test", "http://b.test"]


def test_rate_limit_switch(monkeypatch):
    monkeypatch.setenv("RATE_LIMIT_ENABLED", "off")
    assert config.is_rate_limit_enabled() is False
    monkeypatch.setenv("RATE_LIMIT_ENABLED", "true")
    assert config.is_rate_limit_enabled() is True
