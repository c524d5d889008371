"""
Pydantic schemas for Movie API.
"""

from datetime import datetime

from pydantic import Field, field_validator, model_validator

from movie_rankings.api.models.common import Pagination, UserSummary, check_not_null, check_url, check_year
from movie_rankings.api.models.stats import YearBreakdown
from movie_rankings.utils.schema import CamelModel


def check_release_year(value: int | None) -> int | None:
    return check_year(value, 1900, years_ahead=5)


def check_watched_year(value: int | None) -> int | None:
    return check_year(value, 2000)


class MovieCreate(CamelModel):
    """Request body for adding a movie."""

    title: str = Field(..., min_length=1, max_length=200)
    year: int
    description: str | None = Field(None, max_length=1000)
    poster_url: str | None = None
    watched_year: int
    added_by: str = Field(..., min_length=1, max_length=100)

    @field_validator("year")
    @classmethod
    def validate_year(cls, value):
        return check_release_year(value)

    @field_validator("watched_year")
    @classmethod
    def validate_watched_year(cls, value):
        return check_watched_year(value)

    @field_validator("poster_url")
    @classmethod
    def validate_poster_url(cls, value):
        return check_url(value)


class MovieUpdate(CamelModel):
    """Request body for updating a movie (all fields optional)."""

    title: str | None = Field(None, min_length=1, max_length=200)
    year: int | None = None
    description: str | None = Field(None, max_length=1000)
    poster_url: str | None = None
    watched_year: int | None = None

    @field_validator("title", "year", "watched_year", mode="before")
    @classmethod
    def reject_null(cls, value):
        return check_not_null(value)

    @field_validator("year")
    @classmethod
    def validate_year(cls, value):
        return check_release_year(value)

    @field_validator("watched_year")
    @classmethod
    def validate_watched_year(cls, value):
        return check_watched_year(value)

    @field_validator("poster_url")
    @classmethod
    def validate_poster_url(cls, value):
        return check_url(value)


class MovieResponse(CamelModel):
    """Response model for movie."""

    id: int
    title: str
    year: int
    description: str | None = None
    poster_url: str | None = None
    watched_year: int
    added_by: str
    created_at: datetime


class MovieListItem(MovieResponse):
    average_rating: float = 0
    total_rankings: int = 0


class MovieList(CamelModel):
    data: list[MovieListItem]
    pagination: Pagination


class MovieRankingItem(CamelModel):
    id: int
    user_id: int
    rating: int
    ranking_year: int
    description: str | None = None
    ranked_at: datetime
    user: UserSummary


class MovieDetail(MovieListItem):
    """Movie with its rankings and per ranking year averages."""

    rankings: list[MovieRankingItem] = []
    yearly_stats: list[YearBreakdown] = []


class UnratedMovie(CamelModel):
    id: int
    title: str
    year: int
    poster_url: str | None = None
    watched_year: int


class UnratedMovies(CamelModel):
    year: int
    total_movies: int
    unrated_count: int
    movies: list[UnratedMovie]


class BulkMetadata(CamelModel):
    """Fields applied to every movie of a bulk update; at least one is required."""

    description: str | None = Field(None, max_length=1000)
    poster_url: str | None = None
    year: int | None = None

    @field_validator("year", mode="before")
    @classmethod
    def reject_null(cls, value):
        return check_not_null(value)

    @field_validator("year")
    @classmethod
    def validate_year(cls, value):
        return check_release_year(value)

    @field_validator("poster_url")
    @classmethod
    def validate_poster_url(cls, value):
        return check_url(value)

    @model_validator(mode="after")
    def require_one_field(self):
        if not self.model_fields_set & {"description", "poster_url", "year"}:
            raise ValueError("At least one metadata field must be provided")
        return self


class BulkUpdateRequest(CamelModel):
    movie_ids: list[int] = Field(..., min_length=1)
    metadata: BulkMetadata


class BulkBatchResult(CamelModel):
    batch: int
    movie_ids: list[int]
    updated: int
    error: str | None = None


class BulkUpdateResponse(CamelModel):
    success: bool
    total_requested: int
    total_updated: int
    results: list[BulkBatchResult]
    errors: list[BulkBatchResult]
