"""
Pydantic schemas for API request/response validation.
"""

from movie_rankings.api.models.common import Pagination, UserSummary, MovieSummary
from movie_rankings.api.models.user import UserCreate, UserUpdate, UserResponse, UserList, UserDetail
from movie_rankings.api.models.movie import (
    MovieCreate, MovieUpdate, MovieResponse, MovieList, MovieDetail,
    UnratedMovies, BulkUpdateRequest, BulkUpdateResponse,
)
from movie_rankings.api.models.ranking import (
    RankingCreate, RankingUpdate, RankingResponse, RankingList, RankingsByWatchedYear,
)
from movie_rankings.api.models.stats import (
    OverallStats, YearlyStats, UserStats, MovieStats, CatalogStats, WatchedYearOverview,
)

__all__ = [
    "Pagination",
    "UserSummary",
    "MovieSummary",
    "UserCreate",
    "UserUpdate",
    "UserResponse",
    "UserList",
    "UserDetail",
    "MovieCreate",
    "MovieUpdate",
    "MovieResponse",
    "MovieList",
    "MovieDetail",
    "UnratedMovies",
    "BulkUpdateRequest",
    "BulkUpdateResponse",
    "RankingCreate",
    "RankingUpdate",
    "RankingResponse",
    "RankingList",
    "RankingsByWatchedYear",
    "OverallStats",
    "YearlyStats",
    "UserStats",
    "MovieStats",
    "CatalogStats",
    "WatchedYearOverview",
]
