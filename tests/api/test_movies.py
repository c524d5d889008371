"""
API tests for movie endpoints.
"""

import pytest


class TestMovieEndpoints:
    """Tests for /api/movies CRUD."""

    def test_create_movie(self, client):
        payload = {
            "title": "Heat",
            "year": 1995,
            "watchedYear": 2024,
            "addedBy": "alice",
            "posterUrl": "https://image.tmdb.org/t/p/w500/heat.jpg",
        }
        r = client.post("/api/movies", json=payload)
        assert r.status_code == 201
        data = r.json()
        assert data["title"] == "Heat"
        assert data["watchedYear"] == 2024
        assert data["posterUrl"].endswith("heat.jpg")

    def test_create_movie_validation(self, client):
        base = {"title": "Heat", "year": 1995, "watchedYear": 2024, "addedBy": "alice"}
        assert client.post("/api/movies", json={**base, "year": 1800}).status_code == 400
        assert client.post("/api/movies", json={**base, "watchedYear": 1999}).status_code == 400
        assert client.post("/api/movies", json={**base, "posterUrl": "not a url"}).status_code == 400
        assert client.post("/api/movies", json={**base, "title": ""}).status_code == 400

    def test_duplicate_movie_ignores_case(self, client, make_movie):
        existing = make_movie("Heat")
        r = client.post(
            "/api/movies",
            json={"title": "heat", "year": 1995, "watchedYear": 2023, "addedBy": "bob"},
        )
        assert r.status_code == 409
        assert r.json()["error"] == "Movie already exists"
        assert r.json()["existingMovie"]["id"] == existing["id"]

    def test_list_movies_with_averages(self, client, make_user, make_movie, make_ranking):
        """GET /api/movies reports one-decimal averages and ranking counts."""
        alice = make_user("alice")
        bob = make_user("bob")
        carol = make_user("carol")
        heat = make_movie("Heat")
        make_movie("Alien", year=1979, watched_year=2023)
        for user, rating in ((alice, 9), (bob, 8), (carol, 8)):
            make_ranking(user["id"], heat["id"], rating)

        r = client.get("/api/movies")
        assert r.status_code == 200
        data = r.json()
        assert data["pagination"]["total"] == 2
        by_title = {m["title"]: m for m in data["data"]}
        assert by_title["Heat"]["averageRating"] == 8.3
        assert by_title["Heat"]["totalRankings"] == 3
        assert by_title["Alien"]["averageRating"] == 0
        assert [m["title"] for m in data["data"]] == ["Alien", "Heat"]

    def test_list_movies_filters_and_sort(self, client, make_movie):
        make_movie("Alien", year=1979, watched_year=2023)
        make_movie("Aliens", year=1986, watched_year=2024)
        make_movie("Ronin", year=1998, watched_year=2024)

        r = client.get("/api/movies", params={"watchedYear": 2024, "sortBy": "year", "sortOrder": "desc"})
        assert [m["title"] for m in r.json()["data"]] == ["Ronin", "Aliens"]

        r = client.get("/api/movies", params={"search": "alien"})
        assert r.json()["pagination"]["total"] == 2

    def test_list_movies_invalid_sort(self, client):
        assert client.get("/api/movies", params={"sortBy": "rating"}).status_code == 400

    def test_get_movie_detail(self, client, make_user, make_movie, make_ranking):
        alice = make_user("alice")
        heat = make_movie("Heat")
        make_ranking(alice["id"], heat["id"], 9, ranking_year=2024)
        make_ranking(alice["id"], heat["id"], 6, ranking_year=2023)

        r = client.get(f"/api/movies/{heat['id']}")
        assert r.status_code == 200
        data = r.json()
        assert data["averageRating"] == 7.5
        assert data["totalRankings"] == 2
        assert data["rankings"][0]["user"]["username"] == "alice"
        years = {entry["year"]: entry for entry in data["yearlyStats"]}
        assert years[2024]["averageRating"] == 9.0
        assert years[2023]["rankingCount"] == 1

    def test_get_movie_not_found(self, client):
        r = client.get("/api/movies/99999")
        assert r.status_code == 404
        assert r.json() == {"error": "Movie not found"}

    def test_update_movie(self, client, make_movie):
        movie = make_movie("Heat")
        r = client.put(f"/api/movies/{movie['id']}", json={"description": "Crime epic"})
        assert r.status_code == 200
        assert r.json()["description"] == "Crime epic"
        assert r.json()["title"] == "Heat"

    @pytest.mark.parametrize("field", ["title", "year", "watchedYear"])
    def test_update_rejects_null(self, client, make_movie, field):
        movie = make_movie("Heat")
        r = client.put(f"/api/movies/{movie['id']}", json={field: None})
        assert r.status_code == 400
        assert r.json()["details"][0]["path"] == field
        assert client.get(f"/api/movies/{movie['id']}").json()["title"] == "Heat"

    def test_update_clears_description(self, client, make_movie):
        movie = make_movie("Heat", description="Crime epic")
        r = client.put(f"/api/movies/{movie['id']}", json={"description": None, "posterUrl": None})
        assert r.status_code == 200
        assert r.json()["description"] is None
        assert r.json()["posterUrl"] is None

    def test_update_to_existing_title_and_year(self, client, make_movie):
        """Renaming onto another movie's title and year is a conflict."""
        heat = make_movie("Heat", year=1995)
        ronin = make_movie("Ronin", year=1998)

        r = client.put(f"/api/movies/{ronin['id']}", json={"title": "HEAT", "year": 1995})
        assert r.status_code == 409
        assert r.json()["error"] == "Movie already exists"
        assert r.json()["existingMovie"]["id"] == heat["id"]
        assert client.get(f"/api/movies/{ronin['id']}").json()["title"] == "Ronin"

    def test_update_title_case_of_same_movie(self, client, make_movie):
        movie = make_movie("heat")
        r = client.put(f"/api/movies/{movie['id']}", json={"title": "Heat"})
        assert r.status_code == 200
        assert r.json()["title"] == "Heat"

    def test_delete_movie(self, client, make_movie):
        movie = make_movie("Heat")
        assert client.delete(f"/api/movies/{movie['id']}").status_code == 204
        assert client.get(f"/api/movies/{movie['id']}").status_code == 404

    def test_delete_movie_with_rankings(self, client, make_user, make_movie, make_ranking):
        movie = make_movie("Heat")
        make_ranking(make_user("alice")["id"], movie["id"], 9)

        r = client.delete(f"/api/movies/{movie['id']}")
        assert r.status_code == 400
        assert r.json()["error"] == "Cannot delete movie with rankings"


class TestMovieStatsEndpoints:
    """Tests for catalog statistics and unrated movies."""

    def test_catalog_stats(self, client, make_user, make_movie, make_ranking):
        alice = make_user("alice")
        heat = make_movie("Heat", watched_year=2024)
        alien = make_movie("Alien", year=1979, watched_year=2022)
        make_movie("Ronin", year=1998, watched_year=2024)
        make_ranking(alice["id"], heat["id"], 9)
        make_ranking(alice["id"], alien["id"], 6, ranking_year=2022)

        r = client.get("/api/movies/stats")
        assert r.status_code == 200
        data = r.json()
        assert data["overall"] == {
            "totalMovies": 3,
            "averageWatchedYear": 2023,
            "oldestWatchedYear": 2022,
            "newestWatchedYear": 2024,
            "uniqueWatchedYears": 2,
            "averageRating": 7.5,
        }
        assert data["byWatchedYear"] == [{"year": 2024, "count": 2}, {"year": 2022, "count": 1}]

    def test_unrated_movies(self, client, make_user, make_movie, make_ranking):
        """GET /api/movies/unrated/{year} lists what the caller has not ranked that year."""
        alice = make_user("alice")
        heat = make_movie("Heat", watched_year=2024)
        make_movie("Alien", year=1979, watched_year=2024)
        make_movie("Ronin", year=1998, watched_year=2023)
        make_ranking(alice["id"], heat["id"], 9, ranking_year=2024)

        r = client.get("/api/movies/unrated/2024", headers={"X-User-Id": str(alice["id"])})
        assert r.status_code == 200
        data = r.json()
        assert data["totalMovies"] == 2
        assert data["unratedCount"] == 1
        assert [m["title"] for m in data["movies"]] == ["Alien"]

    def test_unrated_movies_without_user(self, client, make_movie):
        make_movie("Heat", watched_year=2024)
        data = client.get("/api/movies/unrated/2024").json()
        assert data["totalMovies"] == 1
        assert data["movies"] == []


class TestBulkUpdateEndpoint:
    """Tests for POST /api/movies/bulk-update."""

    def test_bulk_update(self, client, make_movie, monkeypatch):
        monkeypatch.setenv("BULK_UPDATE_DELAY", "0")
        ids = [make_movie(f"Movie {i}")["id"] for i in range(3)]

        r = client.post("/api/movies/bulk-update", json={
            "movieIds": ids,
            "metadata": {"description": "Restored print"},
        })
        assert r.status_code == 200
        data = r.json()
        assert data["success"] is True
        assert data["totalRequested"] == 3
        assert data["totalUpdated"] == 3
        assert data["errors"] == []
        assert client.get(f"/api/movies/{ids[0]}").json()["description"] == "Restored print"

    def test_bulk_update_reports_failed_batch(self, client, make_movie, monkeypatch):
        monkeypatch.setenv("BULK_UPDATE_DELAY", "0")
        monkeypatch.setenv("BULK_UPDATE_BATCH_SIZE", "2")
        ids = [make_movie(f"Movie {i}")["id"] for i in range(2)]

        r = client.post("/api/movies/bulk-update", json={
            "movieIds": ids + [99999],
            "metadata": {"year": 2001},
        })
        assert r.status_code == 200
        data = r.json()
        assert data["success"] is False
        assert data["totalUpdated"] == 2
        assert len(data["results"]) == 2
        assert data["errors"][0]["batch"] == 2
        assert data["errors"][0]["movieIds"] == [99999]

    def test_bulk_update_requires_metadata(self, client, make_movie):
        movie = make_movie("Heat")
        r = client.post("/api/movies/bulk-update", json={"movieIds": [movie["id"]], "metadata": {}})
        assert r.status_code == 400

    def test_bulk_update_requires_ids(self, client):
        r = client.post("/api/movies/bulk-update", json={"movieIds": [], "metadata": {"year": 2001}})
        assert r.status_code == 400

    def test_bulk_update_rejects_null_year(self, client, make_movie):
        movie = make_movie("Heat")
        r = client.post("/api/movies/bulk-update", json={"movieIds": [movie["id"]], "metadata": {"year": None}})
        assert r.status_code == 400
        assert r.json()["details"][0]["path"] == "metadata.year"
        assert client.get(f"/api/movies/{movie['id']}").json()["year"] == 1995
