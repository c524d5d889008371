"""
Unit tests for the statistics engine.

Rankings are plain namespaces carrying the same attributes as the ORM rows,
so no database is involved.
"""

from types import SimpleNamespace

import pytest

from movie_rankings.core.stats import aggregations as agg


def make_user(user_id, username=None):
    username = username or f"user{user_id}"
    return SimpleNamespace(id=user_id, username=username, display_name=username.title())


def make_movie(movie_id, title=None, year=2000, watched_year=2024):
    return SimpleNamespace(
        id=movie_id,
        title=title or f"Movie {movie_id}",
        year=year,
        watched_year=watched_year,
        poster_url=None,
    )


def make_ranking(user, movie, rating, ranking_year=2024):
    return SimpleNamespace(
        user_id=user.id,
        movie_id=movie.id,
        rating=rating,
        ranking_year=ranking_year,
        user=user,
        movie=movie,
    )


class TestAverage:

    def test_empty_is_zero(self):
        assert agg.average([]) == 0

    def test_mean(self):
        assert agg.average([9, 9, 9, 8]) == 8.75

    def test_generator_input(self):
        assert agg.average(r for r in (2, 4)) == 3


class TestRoundDisplay:
    """Display rounding is half-up to one decimal."""

    @pytest.mark.parametrize("value,expected", [
        (8.75, 8.8),
        (8.25, 8.3),
        (26 / 3, 8.7),
        (7.0, 7.0),
        (0, 0.0),
    ])
    def test_rounding(self, value, expected):
        assert agg.round_display(value) == expected

    def test_none_passes_through(self):
        assert agg.round_display(None) is None

    def test_round_half_up_integer(self):
        assert agg.round_half_up(2.5) == 3
        assert agg.round_half_up(2.49) == 2


class TestRatingDistribution:

    def test_all_buckets_present(self):
        distribution = agg.rating_distribution([10, 10, 1])
        assert list(distribution.keys()) == list(range(1, 11))
        assert distribution[10] == 2
        assert distribution[1] == 1
        assert all(distribution[k] == 0 for k in range(2, 10))

    def test_empty(self):
        assert sum(agg.rating_distribution([]).values()) == 0

    def test_out_of_range_dropped_and_fractions_rounded(self):
        distribution = agg.rating_distribution([0, 11, 7.5, 3.2])
        assert distribution[8] == 1
        assert distribution[3] == 1
        assert sum(distribution.values()) == 2

    def test_entries_ascending(self):
        entries = agg.distribution_entries(agg.rating_distribution([5]))
        assert [e["rating"] for e in entries] == list(range(1, 11))
        assert entries[4] == {"rating": 5, "count": 1}


class TestTopMovies:

    def setup_method(self):
        self.alice = make_user(1, "alice")
        self.bob = make_user(2, "bob")
        self.first = make_movie(1, "First")
        self.middle = make_movie(2, "Middle")
        self.last = make_movie(3, "Last")
        self.rankings = [
            make_ranking(self.alice, self.first, 9),
            make_ranking(self.bob, self.first, 9),
            make_ranking(self.alice, self.middle, 7),
            make_ranking(self.bob, self.middle, 8),
            make_ranking(self.alice, self.last, 10),
            make_ranking(self.bob, self.last, 8),
        ]

    def test_sorted_by_average_descending(self):
        top = agg.top_movies(self.rankings)
        assert [m["average_rating"] for m in top] == [9.0, 9.0, 7.5]
        assert top[2]["title"] == "Middle"

    def test_ties_keep_first_seen_order(self):
        top = agg.top_movies(self.rankings)
        assert [m["id"] for m in top[:2]] == [1, 3]

    def test_stable_across_calls(self):
        first = agg.top_movies(self.rankings)
        second = agg.top_movies(self.rankings)
        assert first == second

    def test_limit(self):
        assert len(agg.top_movies(self.rankings, limit=2)) == 2

    def test_entry_fields(self):
        entry = agg.top_movies(self.rankings)[0]
        assert entry["total_rankings"] == 2
        assert entry["watched_year"] == 2024
        assert "poster_url" in entry

    def test_sorts_on_unrounded_average(self):
        # 8.66.. and 8.7 both display as 8.7 but 8.7 sorts first
        low = make_movie(10, "Low")
        high = make_movie(11, "High")
        rankings = [
            make_ranking(self.alice, low, 9),
            make_ranking(self.bob, low, 9),
            make_ranking(make_user(3), low, 8),
        ] + [make_ranking(make_user(i), high, r) for i, r in enumerate([9, 9, 9, 9, 9, 9, 9, 8, 8, 8], 20)]
        top = agg.top_movies(rankings)
        assert [m["title"] for m in top] == ["High", "Low"]
        assert top[0]["average_rating"] == top[1]["average_rating"] == 8.7


class TestTopUsers:

    def test_sorted_by_count(self):
        alice, bob = make_user(1), make_user(2)
        movies = [make_movie(i) for i in range(1, 4)]
        rankings = [make_ranking(alice, movies[0], 5)] + [make_ranking(bob, m, 8) for m in movies]
        top = agg.top_users(rankings)
        assert [u["id"] for u in top] == [2, 1]
        assert top[0]["total_rankings"] == 3
        assert top[0]["average_rating"] == 8.0
        assert top[0]["display_name"] == "User2"


class TestYearlyRollup:

    def test_rollup(self):
        alice, bob = make_user(1), make_user(2)
        m1, m2 = make_movie(1), make_movie(2)
        rankings = [
            make_ranking(alice, m1, 9),
            make_ranking(bob, m1, 9),
            make_ranking(alice, m2, 9),
            make_ranking(bob, m2, 8),
        ]
        rollup = agg.yearly_rollup(2024, rankings)
        assert rollup["year"] == 2024
        assert rollup["total_rankings"] == 4
        assert rollup["average_rating"] == 8.8
        assert rollup["unique_users"] == 2
        assert rollup["unique_movies"] == 2
        assert len(rollup["top_movies"]) == 2
        assert len(rollup["top_users"]) == 2

    def test_empty_year(self):
        rollup = agg.yearly_rollup(2020, [])
        assert rollup["average_rating"] == 0
        assert rollup["top_movies"] == []

    def test_without_leaderboards(self):
        rollup = agg.yearly_rollup(2024, [], top_n=None)
        assert "top_movies" not in rollup


class TestYearGroupings:
    """Ranking year and watched year are separate groupings."""

    def setup_method(self):
        user = make_user(1)
        watched_2023 = make_movie(1, watched_year=2023)
        watched_2024 = make_movie(2, watched_year=2024)
        self.rankings = [
            make_ranking(user, watched_2023, 8, ranking_year=2024),
            make_ranking(user, watched_2024, 6, ranking_year=2024),
        ]

    def test_group_by_ranking_year(self):
        assert list(agg.group_by_ranking_year(self.rankings)) == [2024]

    def test_group_by_watched_year(self):
        assert sorted(agg.group_by_watched_year(self.rankings)) == [2023, 2024]

    def test_watched_year_summaries(self):
        summary = agg.watched_year_summaries(self.rankings)
        assert [s["year"] for s in summary["yearly_stats"]] == [2024, 2023]
        assert summary["year_range"] == {"min": 2023, "max": 2024}
        assert summary["yearly_stats"][1]["average_rating"] == 8.0

    def test_watched_year_summaries_empty(self):
        summary = agg.watched_year_summaries([], current_year=2030)
        assert summary == {"year_range": {"min": 2030, "max": 2030}, "yearly_stats": []}


class TestMovieAndUserSummaries:

    def setup_method(self):
        self.alice = make_user(1, "alice")
        self.bob = make_user(2, "bob")
        self.movie = make_movie(1, "Heat", year=1995)
        self.other = make_movie(2, "Ronin", year=1998)

    def test_movie_breakdown_by_ranking_year(self):
        rankings = [
            make_ranking(self.alice, self.movie, 8, ranking_year=2023),
            make_ranking(self.alice, self.movie, 10, ranking_year=2024),
            make_ranking(self.bob, self.movie, 7, ranking_year=2024),
        ]
        breakdown = agg.movie_breakdown(rankings)
        assert breakdown == [
            {"year": 2024, "average_rating": 8.5, "ranking_count": 2},
            {"year": 2023, "average_rating": 8.0, "ranking_count": 1},
        ]

    def test_movie_summary_empty_average_is_zero(self):
        summary = agg.movie_summary([])
        assert summary["average_rating"] == 0
        assert summary["total_rankings"] == 0
        assert len(summary["rating_distribution"]) == 10

    def test_user_summary_empty_average_is_none(self):
        summary = agg.user_summary([])
        assert summary["average_rating"] is None
        assert summary["years_active"] == []
        assert summary["top_rankings"] == []

    def test_user_summary(self):
        rankings = [
            make_ranking(self.alice, self.movie, 6, ranking_year=2023),
            make_ranking(self.alice, self.other, 9, ranking_year=2023),
            make_ranking(self.alice, self.movie, 7, ranking_year=2024),
        ]
        summary = agg.user_summary(rankings)
        assert summary["total_rankings"] == 3
        assert summary["average_rating"] == 7.3
        assert summary["years_active"] == [2024, 2023]
        assert [(r["ranking_year"], r["rating"]) for r in summary["top_rankings"]] == [
            (2024, 7), (2023, 9), (2023, 6),
        ]
        assert summary["top_rankings"][1]["title"] == "Ronin"


class TestCatalogSummary:

    def test_catalog(self):
        user = make_user(1)
        movies = [
            make_movie(1, watched_year=2023),
            make_movie(2, watched_year=2024),
            make_movie(3, watched_year=2024),
        ]
        rankings = [
            make_ranking(user, movies[0], 8),
            make_ranking(make_user(2), movies[0], 9),
            make_ranking(user, movies[1], 6),
        ]
        summary = agg.catalog_summary(movies, rankings)
        overall = summary["overall"]
        assert overall["total_movies"] == 3
        assert overall["average_watched_year"] == 2024
        assert overall["oldest_watched_year"] == 2023
        assert overall["newest_watched_year"] == 2024
        assert overall["unique_watched_years"] == 2
        # mean of per-movie averages 8.5 and 6.0; the unranked movie is ignored
        assert overall["average_rating"] == 7.3
        assert summary["by_watched_year"] == [{"year": 2024, "count": 2}, {"year": 2023, "count": 1}]

    def test_empty_catalog(self):
        overall = agg.catalog_summary([], [])["overall"]
        assert overall["total_movies"] == 0
        assert overall["average_watched_year"] == 0
        assert overall["average_rating"] == 0


class TestUnratedMovies:

    def setup_method(self):
        self.alice = make_user(1)
        self.a = make_movie(1, "A", watched_year=2024)
        self.b = make_movie(2, "B", watched_year=2024)
        self.c = make_movie(3, "C", watched_year=2024)
        self.old = make_movie(4, "Old", watched_year=2023)
        self.movies = [self.a, self.b, self.c, self.old]

    def test_excludes_movies_rated_in_year(self):
        rankings = [make_ranking(self.alice, self.a, 8, ranking_year=2024)]
        unrated = agg.unrated_movies(self.movies, rankings, self.alice.id, 2024)
        assert [m.title for m in unrated] == ["B", "C"]

    def test_rating_in_other_year_does_not_count(self):
        rankings = [make_ranking(self.alice, self.a, 8, ranking_year=2023)]
        unrated = agg.unrated_movies(self.movies, rankings, self.alice.id, 2024)
        assert [m.title for m in unrated] == ["A", "B", "C"]

    def test_other_users_rankings_ignored(self):
        rankings = [make_ranking(make_user(2), self.a, 8, ranking_year=2024)]
        unrated = agg.unrated_movies(self.movies, rankings, self.alice.id, 2024)
        assert len(unrated) == 3

    def test_no_user_is_empty(self):
        assert agg.unrated_movies(self.movies, [], None, 2024) == []


class TestOverallSummary:

    def test_groups_by_ranking_year(self):
        user = make_user(1)
        rankings = [
            make_ranking(user, make_movie(1), 10, ranking_year=2023),
            make_ranking(user, make_movie(2), 10, ranking_year=2024),
            make_ranking(user, make_movie(3), 1, ranking_year=2024),
        ]
        summary = agg.overall_summary(rankings)
        assert summary["years"] == [2024, 2023]
        assert summary["average_rating"] == 7.0
        assert summary["yearly_stats"][0]["total_rankings"] == 2
        assert summary["rating_distribution"][9] == {"rating": 10, "count": 2}

    def test_empty(self):
        summary = agg.overall_summary([])
        assert summary["average_rating"] == 0
        assert summary["years"] == []
