"""
API tests for root, health and endpoint listing.
"""

from movie_rankings import __version__


def test_root(client):
    r = client.get("/")
    assert r.status_code == 200
    assert r.json()["health"] == "/health"


def test_health(client, make_user):
    make_user("alice")
    r = client.get("/health")
    assert r.status_code == 200
    data = r.json()
    assert data["status"] == "ok"
    assert data["database"] == "connected"
    assert data["counts"] == {"users": 1, "movies": 0, "rankings": 0}
    assert "timestamp" in data


def test_api_listing(client):
    data = client.get("/api").json()
    assert data["version"] == __version__
    assert data["endpoints"]["rankings"]["byYear"] == "/api/rankings/year/{year}"


def test_unknown_route(client):
    r = client.get("/api/nothing-here")
    assert r.status_code == 404
    assert r.json() == {"error": "Not Found"}
