"""
Shared Pydantic schemas and field checks.
"""

import math
from datetime import date
from urllib.parse import urlparse

from movie_rankings.utils.schema import CamelModel, USERNAME_PATTERN


def check_not_null(value):
    """Reject an explicit null for a field that may be omitted but not cleared."""
    if value is None:
        raise ValueError("Field cannot be null")
    return value


def check_year(value: int | None, minimum: int, years_ahead: int = 0) -> int | None:
    """Reject years outside ``minimum`` .. current year + ``years_ahead``."""
    if value is None:
        return value
    maximum = date.today().year + years_ahead
    if not minimum <= value <= maximum:
        raise ValueError(f"Year must be between {minimum} and {maximum}")
    return value


def check_url(value: str | None) -> str | None:
    """Accept an absolute http(s) URL or an empty string."""
    if value is None or value == "":
        return value
    parsed = urlparse(value)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise ValueError("Invalid url")
    return value


class Pagination(CamelModel):
    """Paging metadata returned with every list."""

    page: int
    limit: int
    total: int
    pages: int

    @classmethod
    def build(cls, page: int, limit: int, total: int) -> "Pagination":
        return cls(page=page, limit=limit, total=total, pages=math.ceil(total / limit))


class UserSummary(CamelModel):
    id: int
    username: str
    display_name: str


class MovieSummary(CamelModel):
    id: int
    title: str
    year: int
    watched_year: int | None = None
