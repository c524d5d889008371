"""
Pydantic schemas for User API.
"""

from datetime import datetime
from urllib.parse import urlparse

from pydantic import Field, field_validator

from movie_rankings.api.models.common import Pagination, MovieSummary, USERNAME_PATTERN, check_not_null
from movie_rankings.utils.schema import CamelModel

AVATAR_ALLOWED_DOMAINS = (
    "api.dicebear.com",
    "avatars.githubusercontent.com",
    "gravatar.com",
    "i.imgur.com",
    "images.unsplash.com",
    "picsum.photos",
    "cloudinary.com",
    "res.cloudinary.com",
)


def is_allowed_avatar_url(url: str) -> bool:
    """True for an http(s) URL whose host is an allowed image host or a subdomain of one."""
    parsed = urlparse(url)
    if parsed.scheme not in ("http", "https") or not parsed.hostname:
        return False
    host = parsed.hostname.lower()
    return any(host == domain or host.endswith("." + domain) for domain in AVATAR_ALLOWED_DOMAINS)


def check_avatar_url(value: str | None) -> str | None:
    if value is None or value == "":
        return value
    if not is_allowed_avatar_url(value):
        raise ValueError("Avatar URL must be an http(s) URL from an allowed image host")
    return value


class UserCreate(CamelModel):
    """Request body for creating a user."""

    username: str = Field(..., min_length=3, max_length=50, pattern=USERNAME_PATTERN)
    display_name: str | None = Field(None, min_length=1, max_length=100)
    avatar_url: str | None = None

    @field_validator("avatar_url")
    @classmethod
    def validate_avatar_url(cls, value):
        return check_avatar_url(value)


class UserUpdate(CamelModel):
    """Request body for updating a user (all fields optional)."""

    username: str | None = Field(None, min_length=3, max_length=50, pattern=USERNAME_PATTERN)
    display_name: str | None = Field(None, min_length=1, max_length=100)
    avatar_url: str | None = None
    is_active: bool | None = None

    @field_validator("username", "display_name", "is_active", mode="before")
    @classmethod
    def reject_null(cls, value):
        return check_not_null(value)

    @field_validator("avatar_url")
    @classmethod
    def validate_avatar_url(cls, value):
        return check_avatar_url(value)


class UserResponse(CamelModel):
    """Response model for user."""

    id: int
    username: str
    display_name: str
    avatar_url: str | None = None
    is_active: bool
    created_at: datetime


class UserListItem(UserResponse):
    total_rankings: int = 0


class UserList(CamelModel):
    data: list[UserListItem]
    pagination: Pagination


class UserRecentRanking(CamelModel):
    id: int
    movie_id: int
    rating: int
    ranking_year: int
    description: str | None = None
    ranked_at: datetime
    movie: MovieSummary


class UserDetail(UserResponse):
    """User with ranking count and most recent rankings."""

    total_rankings: int = 0
    rankings: list[UserRecentRanking] = []
