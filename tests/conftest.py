"""
Shared fixtures: in-memory database sessions and an API test client.
"""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

from movie_rankings.api.main import create_app
from movie_rankings.database.connection import create_db_engine
from movie_rankings.database.models import Base


@pytest.fixture
def engine():
    """Create an in-memory SQLite engine for testing."""
    engine = create_db_engine("sqlite://")
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session(engine):
    """Create a new database session for testing."""
    Session = sessionmaker(bind=engine, expire_on_commit=False)
    session = Session()
    yield session
    session.close()


@pytest.fixture
def client():
    """TestClient for a fresh app backed by its own in-memory database."""
    app = create_app(database_url="sqlite://", rate_limit_enabled=False)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def make_user(client):
    """Create a user through the API and return its JSON."""
    def _make(username, **fields):
        r = client.post("/api/users", json={"username": username, **fields})
        assert r.status_code == 201, r.text
        return r.json()
    return _make


@pytest.fixture
def make_movie(client):
    """Create a movie through the API and return its JSON."""
    def _make(title, year=1995, watched_year=2024, **fields):
        payload = {
            "title": title,
            "year": year,
            "watchedYear": watched_year,
            "addedBy": "tester",
            **fields,
        }
        r = client.post("/api/movies", json=payload)
        assert r.status_code == 201, r.text
        return r.json()
    return _make


@pytest.fixture
def make_ranking(client):
    """Create a ranking through the API and return its JSON."""
    def _make(user_id, movie_id, rating, ranking_year=2024, **fields):
        payload = {
            "userId": user_id,
            "movieId": movie_id,
            "rating": rating,
            "rankingYear": ranking_year,
            **fields,
        }
        r = client.post("/api/rankings", json=payload)
        assert r.status_code == 201, r.text
        return r.json()
    return _make
