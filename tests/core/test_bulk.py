"""
Tests for batched bulk metadata updates.
"""

import pytest

from movie_rankings.core.data import bulk
from movie_rankings.database import crud


@pytest.fixture
def movies(session):
    return [
        crud.create_movie(session, title=f"Movie {i}", year=2000, watched_year=2024, added_by="test")
        for i in range(24)
    ]


class TestChunk:

    def test_chunks(self):
        assert bulk.chunk([1, 2, 3, 4, 5], 2) == [[1, 2], [3, 4], [5]]

    def test_invalid_size(self):
        with pytest.raises(ValueError):
            bulk.chunk([1], 0)


class TestBulkUpdate:

    def test_all_batches_succeed(self, session, movies):
        ids = [m.id for m in movies[:15]]
        result = bulk.bulk_update_movies(session, ids, {"description": "Updated"}, delay=0)
        assert result["success"] is True
        assert result["total_requested"] == 15
        assert result["total_updated"] == 15
        assert [r["batch"] for r in result["results"]] == [1, 2]
        assert crud.get_movie(session, ids[14]).description == "Updated"

    def test_failing_batch_is_isolated(self, session, movies):
        ids = [m.id for m in movies] + [9999]
        result = bulk.bulk_update_movies(session, ids, {"year": 2001}, delay=0)

        assert result["success"] is False
        assert result["total_requested"] == 25
        assert len(result["results"]) == 3
        assert [r["updated"] for r in result["results"]] == [10, 10, 0]
        assert len(result["errors"]) == 1
        assert result["errors"][0]["batch"] == 3
        assert "9999" in result["errors"][0]["error"]

        session.expire_all()
        assert all(crud.get_movie(session, movie_id).year == 2001 for movie_id in ids[:20])
        assert all(crud.get_movie(session, movie_id).year == 2000 for movie_id in ids[20:24])

    def test_sleeps_between_batches_only(self, session, movies):
        pauses = []
        bulk.bulk_update_movies(
            session, [m.id for m in movies], {"description": "x"}, delay=0.1, sleep=pauses.append,
        )
        assert pauses == [0.1, 0.1]

    def test_duplicate_ids_counted_once(self, session, movies):
        movie_id = movies[0].id
        result = bulk.bulk_update_movies(session, [movie_id, movie_id], {"description": "x"}, delay=0)
        assert result["total_requested"] == 1
        assert result["total_updated"] == 1
