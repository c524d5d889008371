"""
Statistics service.

Loads rankings and movies through the CRUD layer and hands them to the
aggregation functions. The service never aggregates in SQL, so every
statistic has exactly one implementation.
"""

import logging
from typing import Any, Dict, Optional

from sqlalchemy.orm import Session

from movie_rankings.core.stats import aggregations
from movie_rankings.database import crud
from movie_rankings.database.filters import MovieFilter, RankingFilter
from movie_rankings.exceptions import NotFoundError

logger = logging.getLogger(__name__)


class StatisticsService:
    """
    Read-only statistics over one database session.

    Args:
        session: SQLAlchemy session used for every query
    """

    def __init__(self, session: Session):
        self.session = session

    def overall_stats(self, top_n: int = aggregations.DEFAULT_TOP_N) -> Dict[str, Any]:
        """Totals, overall average, and one rollup per ranking year."""
        rankings = crud.get_all_rankings(self.session)
        summary = aggregations.overall_summary(rankings, top_n)
        summary['total_movies'] = crud.count_movies(self.session)
        summary['total_users'] = crud.count_users(self.session)
        return summary

    def yearly_stats_by_ranking_year(self, year: int, top_n: int = aggregations.DEFAULT_TOP_N) -> Dict[str, Any]:
        """Rollup of the rankings that count toward ``year``."""
        rankings = crud.get_all_rankings(self.session, RankingFilter(ranking_year=year))
        rollup = aggregations.yearly_rollup(year, rankings, top_n)
        rollup['movie_count'] = crud.count_movies(self.session, MovieFilter(watched_year=year))
        return rollup

    def yearly_stats_by_watched_year(self, year: int, top_n: int = aggregations.DEFAULT_TOP_N) -> Dict[str, Any]:
        """Rollup of the rankings of movies watched in ``year``."""
        rankings = crud.get_all_rankings(self.session, RankingFilter(watched_year=year))
        rollup = aggregations.yearly_rollup(year, rankings, top_n)
        rollup['movie_count'] = crud.count_movies(self.session, MovieFilter(watched_year=year))
        return rollup

    def watched_year_overview(self) -> Dict[str, Any]:
        """One summary per watched year that has rankings."""
        return aggregations.watched_year_summaries(crud.get_all_rankings(self.session))

    def rankings_by_watched_year(self, year: int, page: int = 1, limit: int = 20) -> Dict[str, Any]:
        """
        A page of rankings for movies watched in ``year`` plus year statistics.

        Returns:
            Dictionary with ``rankings`` (the page), ``total``, ``stats``,
            ``top_movies`` and ``active_users``
        """
        filters = RankingFilter(watched_year=year)
        page_rankings, total = crud.list_rankings(self.session, filters, page=page, limit=limit)
        all_rankings = crud.get_all_rankings(self.session, filters)
        return {
            'year': year,
            'rankings': page_rankings,
            'total': total,
            'stats': aggregations.summarize_ratings(all_rankings),
            'top_movies': aggregations.top_movies(all_rankings),
            'active_users': aggregations.top_users(all_rankings),
        }

    def user_stats(self, user_id: int) -> Dict[str, Any]:
        """
        Statistics for one user.

        Raises:
            NotFoundError: If the user does not exist
        """
        user = crud.get_user(self.session, user_id)
        if not user:
            raise NotFoundError("User not found")
        rankings = crud.get_all_rankings(self.session, RankingFilter(user_id=user_id))
        stats = aggregations.user_summary(rankings)
        stats.update(user_id=user.id, username=user.username, display_name=user.display_name)
        return stats

    def movie_stats(self, movie_id: int) -> Dict[str, Any]:
        """
        Statistics for one movie.

        Raises:
            NotFoundError: If the movie does not exist
        """
        movie = crud.get_movie(self.session, movie_id)
        if not movie:
            raise NotFoundError("Movie not found")
        rankings = crud.get_all_rankings(self.session, RankingFilter(movie_id=movie_id))
        stats = aggregations.movie_summary(rankings)
        stats.update(movie_id=movie.id, title=movie.title, year=movie.year)
        return stats

    def catalog_stats(self) -> Dict[str, Any]:
        """Statistics over the whole movie catalog."""
        movies = crud.get_all_movies(self.session)
        rankings = crud.get_all_rankings(self.session)
        return aggregations.catalog_summary(movies, rankings)

    def rating_distribution(self, year: Optional[int] = None) -> list:
        """Distribution of all ratings, optionally for one ranking year."""
        rankings = crud.get_all_rankings(self.session, RankingFilter(ranking_year=year))
        ratings = [r.rating for r in rankings]
        return aggregations.distribution_entries(aggregations.rating_distribution(ratings))

    def top_movies(self, limit: int = aggregations.DEFAULT_TOP_N, year: Optional[int] = None) -> list:
        """Highest rated movies, optionally within one ranking year."""
        rankings = crud.get_all_rankings(self.session, RankingFilter(ranking_year=year))
        return aggregations.top_movies(rankings, limit)

    def top_users(self, limit: int = aggregations.DEFAULT_TOP_N, year: Optional[int] = None) -> list:
        """Most active users, optionally within one ranking year."""
        rankings = crud.get_all_rankings(self.session, RankingFilter(ranking_year=year))
        return aggregations.top_users(rankings, limit)

    def unrated_movies(self, year: int, user_id: Optional[int]) -> Dict[str, Any]:
        """
        Movies watched in ``year`` that the user has not ranked for that year.

        Without a user, ``movies`` is empty but ``total_movies`` still counts
        the year's catalog.
        """
        movies = crud.list_movies_by_watched_year(self.session, year)
        rankings = []
        if user_id is not None:
            rankings = crud.get_all_rankings(
                self.session, RankingFilter(user_id=user_id, ranking_year=year)
            )
        unrated = aggregations.unrated_movies(movies, rankings, user_id, year)
        return {
            'year': year,
            'total_movies': len(movies),
            'unrated_count': len(unrated),
            'movies': unrated,
        }
