"""
Statistics API endpoints.

Every response here is computed by the statistics engine from ranking rows.
"""

from fastapi import APIRouter, Depends, Query

from movie_rankings.api.dependencies import get_statistics_service
from movie_rankings.api.models.stats import (
    DistributionEntry, MovieStats, OverallStats, TopMovie, TopUser, UserStats, YearlyStats,
)
from movie_rankings.core.stats import StatisticsService

router = APIRouter(prefix="/api/stats", tags=["stats"])


@router.get("/overall", response_model=OverallStats)
def get_overall_stats(stats: StatisticsService = Depends(get_statistics_service)):
    """Totals, overall average and one rollup per ranking year."""
    return stats.overall_stats()


@router.get("/year/{year}", response_model=YearlyStats)
def get_yearly_stats(year: int, stats: StatisticsService = Depends(get_statistics_service)):
    """Rollup of the rankings that count toward a ranking year."""
    return stats.yearly_stats_by_ranking_year(year)


@router.get("/watched-year/{year}", response_model=YearlyStats)
def get_watched_year_stats(year: int, stats: StatisticsService = Depends(get_statistics_service)):
    """Rollup of the rankings of movies watched in a year."""
    return stats.yearly_stats_by_watched_year(year)


@router.get("/user/{user_id}", response_model=UserStats)
def get_user_stats(user_id: int, stats: StatisticsService = Depends(get_statistics_service)):
    """Statistics for one user."""
    return stats.user_stats(user_id)


@router.get("/movie/{movie_id}", response_model=MovieStats)
def get_movie_stats(movie_id: int, stats: StatisticsService = Depends(get_statistics_service)):
    """Statistics for one movie."""
    return stats.movie_stats(movie_id)


@router.get("/rating-distribution", response_model=list[DistributionEntry])
def get_rating_distribution(
    year: int | None = Query(None),
    stats: StatisticsService = Depends(get_statistics_service),
):
    """Number of ratings per value 1..10."""
    return stats.rating_distribution(year)


@router.get("/top-movies", response_model=list[TopMovie])
def get_top_movies(
    limit: int = Query(10, ge=1, le=100),
    year: int | None = Query(None),
    stats: StatisticsService = Depends(get_statistics_service),
):
    """Highest rated movies, optionally within a ranking year."""
    return stats.top_movies(limit=limit, year=year)


@router.get("/top-users", response_model=list[TopUser])
def get_top_users(
    limit: int = Query(10, ge=1, le=100),
    year: int | None = Query(None),
    stats: StatisticsService = Depends(get_statistics_service),
):
    """Most active users, optionally within a ranking year."""
    return stats.top_users(limit=limit, year=year)
