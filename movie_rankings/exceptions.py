"""
Movie Rankings - Domain exceptions.

Raised by the database and core layers; mapped to HTTP responses by
``movie_rankings.api.errors``.
"""

from typing import Any, Optional


class MovieRankingsError(Exception):
    """Base exception for the application."""

    def __init__(self, message: str, code: str = "MOVIE_RANKINGS_ERROR"):
        self.message = message
        self.code = code
        super().__init__(message)

    def to_dict(self):
        return {"error": self.message}


class NotFoundError(MovieRankingsError):
    """A referenced record does not exist."""

    def __init__(self, message: str):
        super().__init__(message, code="NOT_FOUND")


class ConflictError(MovieRankingsError):
    """
    A uniqueness rule was violated.

    Attributes:
        existing: The record that already occupies the unique key, echoed back
            to the caller so it can be reused.
    """

    def __init__(self, message: str, existing: Optional[Any] = None):
        super().__init__(message, code="CONFLICT")
        self.existing = existing


class InvariantViolationError(MovieRankingsError):
    """An operation would break a data invariant (e.g. deleting a ranked movie)."""

    def __init__(self, message: str, detail: Optional[str] = None):
        super().__init__(message, code="INVARIANT_VIOLATION")
        self.detail = detail

    def to_dict(self):
        return {"error": self.message, "message": self.detail}


class MetadataLookupError(MovieRankingsError):
    """Third-party metadata service is unavailable or not configured."""

    def __init__(self, message: str):
        super().__init__(message, code="METADATA_LOOKUP_ERROR")
