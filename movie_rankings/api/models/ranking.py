"""
Pydantic schemas for Ranking API.
"""

from datetime import datetime

from pydantic import Field, field_validator

from movie_rankings.api.models.common import Pagination, UserSummary, MovieSummary, check_not_null, check_year
from movie_rankings.api.models.stats import RatingSummary, TopMovie, TopUser
from movie_rankings.utils.schema import CamelModel


def check_ranking_year(value: int | None) -> int | None:
    return check_year(value, 2000)


class RankingCreate(CamelModel):
    """Request body for rating a movie."""

    user_id: int
    movie_id: int
    rating: int = Field(..., ge=1, le=10, strict=True)
    ranking_year: int
    description: str | None = Field(None, max_length=500)

    @field_validator("ranking_year")
    @classmethod
    def validate_ranking_year(cls, value):
        return check_ranking_year(value)


class RankingUpdate(CamelModel):
    """Request body for changing a rating (all fields optional)."""

    rating: int | None = Field(None, ge=1, le=10, strict=True)
    ranking_year: int | None = None
    description: str | None = Field(None, max_length=500)

    @field_validator("rating", "ranking_year", mode="before")
    @classmethod
    def reject_null(cls, value):
        return check_not_null(value)

    @field_validator("ranking_year")
    @classmethod
    def validate_ranking_year(cls, value):
        return check_ranking_year(value)


class RankingResponse(CamelModel):
    """Response model for ranking."""

    id: int
    user_id: int
    movie_id: int
    rating: int
    ranking_year: int
    description: str | None = None
    ranked_at: datetime
    updated_at: datetime
    user: UserSummary
    movie: MovieSummary


class RankingList(CamelModel):
    data: list[RankingResponse]
    pagination: Pagination


class RankingsByWatchedYear(CamelModel):
    """Rankings of movies watched in one year, with that year's statistics."""

    year: int
    stats: RatingSummary
    data: list[RankingResponse]
    pagination: Pagination
    top_movies: list[TopMovie]
    active_users: list[TopUser]
