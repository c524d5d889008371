"""
Pydantic schemas for statistics responses.
"""

from movie_rankings.utils.schema import CamelModel


class DistributionEntry(CamelModel):
    rating: int
    count: int


class YearBreakdown(CamelModel):
    """Average and count for one ranking year."""

    year: int
    average_rating: float
    ranking_count: int


class TopMovie(CamelModel):
    id: int
    title: str
    year: int
    watched_year: int
    poster_url: str | None = None
    average_rating: float
    total_rankings: int


class TopUser(CamelModel):
    id: int
    username: str
    display_name: str
    total_rankings: int
    average_rating: float


class YearSummary(CamelModel):
    year: int
    total_rankings: int
    average_rating: float
    unique_users: int
    unique_movies: int


class YearlyStats(YearSummary):
    """Year rollup with leaderboards."""

    movie_count: int | None = None
    top_movies: list[TopMovie] = []
    top_users: list[TopUser] = []


class OverallStats(CamelModel):
    total_movies: int
    total_users: int
    total_rankings: int
    average_rating: float
    years: list[int]
    yearly_stats: list[YearlyStats]
    rating_distribution: list[DistributionEntry]


class RatingSummary(CamelModel):
    total_rankings: int
    average_rating: float
    min_rating: int | None = None
    max_rating: int | None = None


class YearRange(CamelModel):
    min: int
    max: int


class WatchedYearOverview(CamelModel):
    """Per watched year summaries, newest first."""

    year_range: YearRange
    yearly_stats: list[YearSummary]


class UserTopRanking(CamelModel):
    movie_id: int
    title: str
    year: int
    rating: int
    ranking_year: int


class UserStats(CamelModel):
    """
    Statistics for one user.

    ``average_rating`` is null for a user without rankings.
    """

    user_id: int
    username: str
    display_name: str
    total_rankings: int
    average_rating: float | None = None
    years_active: list[int]
    top_rankings: list[UserTopRanking]
    rating_distribution: list[DistributionEntry]
    yearly_stats: list[YearBreakdown]


class MovieUserRanking(CamelModel):
    user_id: int
    username: str
    display_name: str
    rating: int
    ranking_year: int


class MovieStats(CamelModel):
    movie_id: int
    title: str
    year: int
    total_rankings: int
    average_rating: float
    rating_distribution: list[DistributionEntry]
    yearly_stats: list[YearBreakdown]
    user_rankings: list[MovieUserRanking]


class CatalogOverview(CamelModel):
    total_movies: int
    average_watched_year: int
    oldest_watched_year: int
    newest_watched_year: int
    unique_watched_years: int
    average_rating: float


class YearCount(CamelModel):
    year: int
    count: int


class CatalogStats(CamelModel):
    overall: CatalogOverview
    by_watched_year: list[YearCount]
