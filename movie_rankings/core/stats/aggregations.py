"""
Aggregate statistics over rankings.

Every function here is pure: it receives rankings (and where needed movies)
already loaded from the database and returns plain dictionaries with
snake_case keys. Rankings are expected to expose ``user_id``, ``movie_id``,
``rating``, ``ranking_year`` and the loaded ``user`` / ``movie`` relations.

Two groupings of "year" exist and are kept apart:

- by ranking year: the year a rating counts toward (``Ranking.ranking_year``)
- by watched year: the year the group watched the movie (``Movie.watched_year``)
"""

import math
from collections import OrderedDict
from datetime import date
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence

RATING_MIN = 1
RATING_MAX = 10
DEFAULT_TOP_N = 10

_ONE_DECIMAL = Decimal("0.1")


def average(ratings: Iterable[float]) -> float:
    """
    Mean of the ratings, or 0 for an empty collection.

    >>> average([9, 9, 9, 8])
    8.75
    >>> average([])
    0.0
    """
    values = list(ratings)
    if not values:
        return 0.0
    return sum(values) / len(values)


def round_display(value: Optional[float]) -> Optional[float]:
    """
    Round to one decimal place, half away from zero, on the exact binary value.

    8.75 becomes 8.8 and 8.25 becomes 8.3. None passes through unchanged.
    """
    if value is None:
        return None
    return float(Decimal(value).quantize(_ONE_DECIMAL, rounding=ROUND_HALF_UP))


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves upward."""
    return int(math.floor(value + 0.5))


def rating_distribution(ratings: Iterable[float]) -> Dict[int, int]:
    """
    Count ratings per integer bucket 1..10.

    Each rating is rounded to the nearest integer first; values that land
    outside 1..10 are dropped. All ten buckets are always present, in
    ascending order.
    """
    distribution = OrderedDict((rating, 0) for rating in range(RATING_MIN, RATING_MAX + 1))
    for rating in ratings:
        bucket = round_half_up(rating)
        if RATING_MIN <= bucket <= RATING_MAX:
            distribution[bucket] += 1
    return distribution


def distribution_entries(distribution: Dict[int, int]) -> List[Dict[str, int]]:
    """Flatten a distribution into ``[{rating, count}, ...]`` ascending by rating."""
    return [{'rating': rating, 'count': count} for rating, count in sorted(distribution.items())]


def _group(rankings: Iterable[Any], key: Callable[[Any], Any]) -> "OrderedDict[Any, List[Any]]":
    groups: "OrderedDict[Any, List[Any]]" = OrderedDict()
    for ranking in rankings:
        groups.setdefault(key(ranking), []).append(ranking)
    return groups


def group_by_ranking_year(rankings: Iterable[Any]) -> "OrderedDict[int, List[Any]]":
    """Group rankings by the year each rating counts toward."""
    return _group(rankings, lambda r: r.ranking_year)


def group_by_watched_year(rankings: Iterable[Any]) -> "OrderedDict[int, List[Any]]":
    """Group rankings by the watched year of the ranked movie."""
    return _group(rankings, lambda r: r.movie.watched_year)


def _ratings(rankings: Iterable[Any]) -> List[int]:
    return [r.rating for r in rankings]


def top_movies(rankings: Sequence[Any], limit: int = DEFAULT_TOP_N) -> List[Dict[str, Any]]:
    """
    Movies ordered by average rating, highest first.

    Sorting uses the unrounded average. Movies with equal averages keep the
    order in which they first appear in ``rankings``, so unchanged input
    always produces the same order.
    """
    scored = []
    for movie_rankings in _group(rankings, lambda r: r.movie_id).values():
        ratings = _ratings(movie_rankings)
        scored.append((average(ratings), movie_rankings[0].movie, len(ratings)))
    scored.sort(key=lambda item: item[0], reverse=True)

    return [
        {
            'id': movie.id,
            'title': movie.title,
            'year': movie.year,
            'watched_year': movie.watched_year,
            'poster_url': movie.poster_url,
            'average_rating': round_display(avg),
            'total_rankings': count,
        }
        for avg, movie, count in scored[:limit]
    ]


def top_users(rankings: Sequence[Any], limit: int = DEFAULT_TOP_N) -> List[Dict[str, Any]]:
    """Users ordered by number of rankings, most active first (stable on ties)."""
    grouped = [
        (user_rankings[0].user, _ratings(user_rankings))
        for user_rankings in _group(rankings, lambda r: r.user_id).values()
    ]
    grouped.sort(key=lambda item: len(item[1]), reverse=True)

    return [
        {
            'id': user.id,
            'username': user.username,
            'display_name': user.display_name,
            'total_rankings': len(ratings),
            'average_rating': round_display(average(ratings)),
        }
        for user, ratings in grouped[:limit]
    ]


def yearly_rollup(
    year: int,
    rankings: Sequence[Any],
    top_n: Optional[int] = DEFAULT_TOP_N,
) -> Dict[str, Any]:
    """
    Roll up the rankings of one year.

    The caller chooses which rankings belong to ``year`` (by ranking year or
    by watched year). With ``top_n=None`` the top movie and user lists are
    left out.
    """
    rollup = {
        'year': year,
        'total_rankings': len(rankings),
        'average_rating': round_display(average(_ratings(rankings))),
        'unique_users': len({r.user_id for r in rankings}),
        'unique_movies': len({r.movie_id for r in rankings}),
    }
    if top_n is not None:
        rollup['top_movies'] = top_movies(rankings, top_n)
        rollup['top_users'] = top_users(rankings, top_n)
    return rollup


def watched_year_summaries(rankings: Sequence[Any], current_year: Optional[int] = None) -> Dict[str, Any]:
    """
    One rollup per watched year that has rankings, newest first.

    ``year_range`` spans the years present; with no rankings both ends are the
    current year.
    """
    groups = group_by_watched_year(rankings)
    yearly_stats = [
        yearly_rollup(year, year_rankings, top_n=None)
        for year, year_rankings in sorted(groups.items(), key=lambda item: item[0], reverse=True)
    ]
    if groups:
        year_range = {'min': min(groups), 'max': max(groups)}
    else:
        fallback = current_year or date.today().year
        year_range = {'min': fallback, 'max': fallback}
    return {'year_range': year_range, 'yearly_stats': yearly_stats}


def movie_breakdown(rankings: Sequence[Any]) -> List[Dict[str, Any]]:
    """Average and count per ranking year, newest year first."""
    groups = group_by_ranking_year(rankings)
    return [
        {
            'year': year,
            'average_rating': round_display(average(_ratings(year_rankings))),
            'ranking_count': len(year_rankings),
        }
        for year, year_rankings in sorted(groups.items(), key=lambda item: item[0], reverse=True)
    ]


def summarize_ratings(rankings: Sequence[Any]) -> Dict[str, Any]:
    """Count, average, minimum and maximum rating."""
    ratings = _ratings(rankings)
    return {
        'total_rankings': len(ratings),
        'average_rating': round_display(average(ratings)),
        'min_rating': min(ratings) if ratings else None,
        'max_rating': max(ratings) if ratings else None,
    }


def movie_summary(rankings: Sequence[Any]) -> Dict[str, Any]:
    """Statistics for a single movie's rankings."""
    ratings = _ratings(rankings)
    ordered = sorted(rankings, key=lambda r: (r.ranking_year, r.rating), reverse=True)
    return {
        'total_rankings': len(ratings),
        'average_rating': round_display(average(ratings)),
        'rating_distribution': distribution_entries(rating_distribution(ratings)),
        'yearly_stats': movie_breakdown(rankings),
        'user_rankings': [
            {
                'user_id': r.user_id,
                'username': r.user.username,
                'display_name': r.user.display_name,
                'rating': r.rating,
                'ranking_year': r.ranking_year,
            }
            for r in ordered
        ],
    }


def user_summary(rankings: Sequence[Any], top_n: int = DEFAULT_TOP_N) -> Dict[str, Any]:
    """
    Statistics for a single user's rankings.

    Unlike movie and overall averages, a user without rankings has an
    ``average_rating`` of None rather than 0.
    """
    ratings = _ratings(rankings)
    ordered = sorted(rankings, key=lambda r: (r.ranking_year, r.rating), reverse=True)
    return {
        'total_rankings': len(ratings),
        'average_rating': round_display(average(ratings)) if ratings else None,
        'years_active': sorted({r.ranking_year for r in rankings}, reverse=True),
        'top_rankings': [
            {
                'movie_id': r.movie_id,
                'title': r.movie.title,
                'year': r.movie.year,
                'rating': r.rating,
                'ranking_year': r.ranking_year,
            }
            for r in ordered[:top_n]
        ],
        'rating_distribution': distribution_entries(rating_distribution(ratings)),
        'yearly_stats': movie_breakdown(rankings),
    }


def overall_summary(rankings: Sequence[Any], top_n: int = DEFAULT_TOP_N) -> Dict[str, Any]:
    """
    Statistics across all rankings, with one rollup per ranking year.
    """
    ratings = _ratings(rankings)
    groups = group_by_ranking_year(rankings)
    years = sorted(groups, reverse=True)
    return {
        'total_rankings': len(ratings),
        'average_rating': round_display(average(ratings)),
        'years': years,
        'yearly_stats': [yearly_rollup(year, groups[year], top_n) for year in years],
        'rating_distribution': distribution_entries(rating_distribution(ratings)),
    }


def catalog_summary(movies: Sequence[Any], rankings: Sequence[Any]) -> Dict[str, Any]:
    """
    Statistics over the movie catalog.

    ``average_rating`` is the mean of per-movie averages over movies that
    have at least one ranking.
    """
    watched_years = [m.watched_year for m in movies]
    per_movie = [
        average(_ratings(movie_rankings))
        for movie_rankings in _group(rankings, lambda r: r.movie_id).values()
    ]
    counts = _group(movies, lambda m: m.watched_year)

    return {
        'overall': {
            'total_movies': len(movies),
            'average_watched_year': round_half_up(average(watched_years)) if watched_years else 0,
            'oldest_watched_year': min(watched_years) if watched_years else 0,
            'newest_watched_year': max(watched_years) if watched_years else 0,
            'unique_watched_years': len(counts),
            'average_rating': round_display(average(per_movie)),
        },
        'by_watched_year': [
            {'year': year, 'count': len(year_movies)}
            for year, year_movies in sorted(counts.items(), key=lambda item: item[0], reverse=True)
        ],
    }


def unrated_movies(
    movies: Sequence[Any],
    rankings: Sequence[Any],
    user_id: Optional[int],
    year: int,
) -> List[Any]:
    """
    Movies watched in ``year`` that the user has not ranked for ``year``.

    A ranking of the same movie in a different ranking year does not count.
    Without a user the result is empty.
    """
    if user_id is None:
        return []
    rated = {
        r.movie_id for r in rankings
        if r.user_id == user_id and r.ranking_year == year
    }
    return [m for m in movies if m.watched_year == year and m.id not in rated]
