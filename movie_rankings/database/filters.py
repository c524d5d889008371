"""
Filter criteria for list and count queries.

Each filter is a plain dataclass of optional fields; ``apply`` translates the
fields that are set into SQLAlchemy criteria on a query.
"""

from dataclasses import dataclass
from typing import Optional
from sqlalchemy import or_
from sqlalchemy.orm import Query

from movie_rankings.database.models import User, Movie, Ranking


@dataclass
class UserFilter:
    """Case-insensitive substring search on username or display name."""

    search: Optional[str] = None

    def apply(self, query: Query) -> Query:
        if self.search:
            pattern = f"%{self.search}%"
            query = query.filter(
                or_(User.username.ilike(pattern), User.display_name.ilike(pattern))
            )
        return query


@dataclass
class MovieFilter:
    """Equality on release/watched year, substring search on title or description."""

    year: Optional[int] = None
    watched_year: Optional[int] = None
    search: Optional[str] = None

    def apply(self, query: Query) -> Query:
        if self.year is not None:
            query = query.filter(Movie.year == self.year)
        if self.watched_year is not None:
            query = query.filter(Movie.watched_year == self.watched_year)
        if self.search:
            pattern = f"%{self.search}%"
            query = query.filter(
                or_(Movie.title.ilike(pattern), Movie.description.ilike(pattern))
            )
        return query


@dataclass
class RankingFilter:
    """
    Equality filters on rankings.

    ``ranking_year`` matches the ranking's own year; ``watched_year`` matches
    the year the ranked movie was watched. The two are independent.
    """

    user_id: Optional[int] = None
    movie_id: Optional[int] = None
    ranking_year: Optional[int] = None
    watched_year: Optional[int] = None

    def apply(self, query: Query) -> Query:
        if self.user_id is not None:
            query = query.filter(Ranking.user_id == self.user_id)
        if self.movie_id is not None:
            query = query.filter(Ranking.movie_id == self.movie_id)
        if self.ranking_year is not None:
            query = query.filter(Ranking.ranking_year == self.ranking_year)
        if self.watched_year is not None:
            query = query.join(Movie, Ranking.movie_id == Movie.id).filter(
                Movie.watched_year == self.watched_year
            )
        return query
