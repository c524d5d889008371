"""
JSON export and best-effort import of users, movies and rankings.

Imports are processed one record at a time: a record that fails validation or
hits a database error is rolled back and reported, and the import carries on
with the next record. Imports are therefore not atomic.
"""

import logging
from datetime import date, datetime, timezone
from typing import Any, Dict, List, Optional

from pydantic import Field, ValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from movie_rankings.database import crud
from movie_rankings.database.filters import MovieFilter, RankingFilter
from movie_rankings.exceptions import MovieRankingsError
from movie_rankings.utils.schema import CamelModel, USERNAME_PATTERN

logger = logging.getLogger(__name__)

EXPORT_VERSION = "1.0.0"

RECORD_ERRORS = (ValidationError, SQLAlchemyError, MovieRankingsError)


# ==================== EXPORT FORMAT ====================

class ExportedUser(CamelModel):
    id: int
    username: str
    display_name: str
    avatar_url: Optional[str] = None
    is_active: bool
    created_at: Optional[datetime] = None
    total_rankings: int = 0


class ExportedMovie(CamelModel):
    id: int
    title: str
    year: int
    description: Optional[str] = None
    poster_url: Optional[str] = None
    watched_year: int
    added_by: str
    created_at: Optional[datetime] = None
    total_rankings: int = 0


class ExportedUserRef(CamelModel):
    id: int
    username: str
    display_name: str


class ExportedMovieRef(CamelModel):
    id: int
    title: str
    year: int


class ExportedRanking(CamelModel):
    id: int
    user_id: int
    movie_id: int
    rating: int
    ranking_year: int
    description: Optional[str] = None
    ranked_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    user: ExportedUserRef
    movie: ExportedMovieRef


# ==================== IMPORT RECORDS ====================

class UserRecord(CamelModel):
    username: str = Field(..., min_length=3, max_length=50, pattern=USERNAME_PATTERN)
    display_name: Optional[str] = Field(None, max_length=100)
    is_active: Optional[bool] = None


class MovieRecord(CamelModel):
    title: str = Field(..., min_length=1, max_length=200)
    year: int
    description: Optional[str] = None
    poster_url: Optional[str] = None
    watched_year: Optional[int] = None
    added_by: Optional[str] = None


class UserRef(CamelModel):
    username: Optional[str] = None


class MovieRef(CamelModel):
    title: Optional[str] = None
    year: Optional[int] = None


class RankingRecord(CamelModel):
    user: Optional[UserRef] = None
    movie: Optional[MovieRef] = None
    rating: int = Field(..., ge=1, le=10)
    ranking_year: int
    description: Optional[str] = None
    ranked_at: Optional[datetime] = None


def export_filename(today: Optional[date] = None) -> str:
    """Download filename for an export made on ``today``."""
    today = today or date.today()
    return f"movie-rankings-export-{today.isoformat()}.json"


def export_data(
    session: Session,
    include_users: bool = True,
    include_movies: bool = True,
    include_rankings: bool = True,
    year: Optional[int] = None,
) -> Dict[str, Any]:
    """
    Build the export document.

    Args:
        session: Database session
        include_users: Include the ``users`` section
        include_movies: Include the ``movies`` section
        include_rankings: Include the ``rankings`` section
        year: Restrict movies to this watched year and rankings to this
            ranking year

    Returns:
        JSON-ready dictionary with camelCase keys
    """
    data: Dict[str, Any] = {
        'exportDate': datetime.now(timezone.utc).isoformat(),
        'version': EXPORT_VERSION,
        'metadata': {
            'includeUsers': include_users,
            'includeMovies': include_movies,
            'includeRankings': include_rankings,
            'yearFilter': year,
        },
    }

    if include_users:
        users = crud.get_all_users(session)
        counts = crud.get_ranking_counts_by_user(session, [u.id for u in users])
        data['users'] = [
            ExportedUser.model_validate(user)
            .model_copy(update={'total_rankings': counts[user.id]})
            .model_dump(by_alias=True, mode='json')
            for user in users
        ]

    if include_movies:
        movies = crud.get_all_movies(session, MovieFilter(watched_year=year))
        ratings = crud.get_ratings_by_movie(session, [m.id for m in movies])
        data['movies'] = [
            ExportedMovie.model_validate(movie)
            .model_copy(update={'total_rankings': len(ratings[movie.id])})
            .model_dump(by_alias=True, mode='json')
            for movie in movies
        ]

    if include_rankings:
        rankings = crud.get_all_rankings(session, RankingFilter(ranking_year=year))
        rankings = sorted(rankings, key=lambda r: (r.ranking_year, r.rating), reverse=True)
        data['rankings'] = [
            ExportedRanking.model_validate(ranking).model_dump(by_alias=True, mode='json')
            for ranking in rankings
        ]

    logger.info(
        "Exported %d users, %d movies, %d rankings",
        len(data.get('users', [])), len(data.get('movies', [])), len(data.get('rankings', [])),
    )
    return data


def _describe(error: Exception) -> str:
    if isinstance(error, ValidationError):
        return "; ".join(
            f"{'.'.join(str(part) for part in item['loc']) or 'record'}: {item['msg']}"
            for item in error.errors()
        )
    if isinstance(error, MovieRankingsError):
        return error.message
    return str(error)


def _new_tally() -> Dict[str, Any]:
    return {'imported': 0, 'skipped': 0, 'errors': []}


def _label(raw: Any, *keys: str) -> List[Any]:
    if isinstance(raw, dict):
        return [raw.get(key) for key in keys]
    return [None for _ in keys]


def _import_users(session: Session, records: List[Any], overwrite: bool) -> Dict[str, Any]:
    tally = _new_tally()
    for raw in records:
        try:
            record = UserRecord.model_validate(raw)
            existing = crud.get_user_by_username(session, record.username)
            if existing and not overwrite:
                tally['skipped'] += 1
                continue
            if existing:
                crud.update_user(
                    session,
                    existing.id,
                    display_name=record.display_name or existing.display_name,
                    is_active=existing.is_active if record.is_active is None else record.is_active,
                )
            else:
                crud.create_user(
                    session,
                    username=record.username,
                    display_name=record.display_name or record.username,
                    is_active=True if record.is_active is None else record.is_active,
                )
            tally['imported'] += 1
        except RECORD_ERRORS as e:
            session.rollback()
            username, = _label(raw, 'username')
            message = f"User {username}: {_describe(e)}"
            logger.warning("Import failed: %s", message)
            tally['errors'].append(message)
    return tally


def _import_movies(session: Session, records: List[Any], overwrite: bool) -> Dict[str, Any]:
    tally = _new_tally()
    for raw in records:
        try:
            record = MovieRecord.model_validate(raw)
            existing = crud.find_movie(session, record.title, record.year, case_insensitive=False)
            if existing and not overwrite:
                tally['skipped'] += 1
                continue
            if existing:
                crud.update_movie(
                    session,
                    existing.id,
                    description=record.description or existing.description,
                    poster_url=record.poster_url or existing.poster_url,
                    watched_year=record.watched_year or existing.watched_year,
                )
            else:
                crud.create_movie(
                    session,
                    title=record.title,
                    year=record.year,
                    description=record.description or None,
                    poster_url=record.poster_url or None,
                    watched_year=record.watched_year or record.year,
                    added_by=record.added_by or 'import',
                )
            tally['imported'] += 1
        except RECORD_ERRORS as e:
            session.rollback()
            title, year = _label(raw, 'title', 'year')
            message = f'Movie "{title}" ({year}): {_describe(e)}'
            logger.warning("Import failed: %s", message)
            tally['errors'].append(message)
    return tally


def _import_rankings(session: Session, records: List[Any], overwrite: bool) -> Dict[str, Any]:
    tally = _new_tally()
    user_ids = {u.username: u.id for u in crud.get_all_users(session)}
    movie_ids = {(m.title, m.year): m.id for m in crud.get_all_movies(session)}

    for raw in records:
        try:
            record = RankingRecord.model_validate(raw)
            user_id = user_ids.get(record.user.username) if record.user else None
            movie_id = movie_ids.get((record.movie.title, record.movie.year)) if record.movie else None
            if not user_id or not movie_id:
                tally['skipped'] += 1
                tally['errors'].append("Ranking skipped: User or movie not found")
                continue

            ranked_at = record.ranked_at or datetime.now(timezone.utc)
            existing = crud.get_ranking_by_user_movie_year(session, user_id, movie_id, record.ranking_year)
            if existing and not overwrite:
                tally['skipped'] += 1
                continue
            if existing:
                crud.update_ranking(session, existing.id, rating=record.rating, ranked_at=ranked_at)
            else:
                crud.create_ranking(
                    session,
                    user_id=user_id,
                    movie_id=movie_id,
                    rating=record.rating,
                    ranking_year=record.ranking_year,
                    description=record.description,
                    ranked_at=ranked_at,
                )
            tally['imported'] += 1
        except RECORD_ERRORS as e:
            session.rollback()
            message = f"Ranking error: {_describe(e)}"
            logger.warning("Import failed: %s", message)
            tally['errors'].append(message)
    return tally


def import_data(session: Session, payload: Dict[str, Any], overwrite: bool = False) -> Dict[str, Any]:
    """
    Import an export document.

    Users are matched by username, movies by exact title and year, rankings by
    (user, movie, ranking year) after resolving their embedded user and movie
    references. Existing records are skipped unless ``overwrite`` is set, in
    which case they are updated.

    Args:
        session: Database session
        payload: Export document (``users``, ``movies``, ``rankings`` lists)
        overwrite: Update records that already exist

    Returns:
        Dictionary with per-entity ``results`` and an overall ``summary``
    """
    results = {
        'users': _import_users(session, payload.get('users') or [], overwrite),
        'movies': _import_movies(session, payload.get('movies') or [], overwrite),
        'rankings': _import_rankings(session, payload.get('rankings') or [], overwrite),
    }
    summary = {
        'total_imported': sum(r['imported'] for r in results.values()),
        'total_skipped': sum(r['skipped'] for r in results.values()),
        'total_errors': sum(len(r['errors']) for r in results.values()),
    }
    logger.info(
        "Import completed: %d imported, %d skipped, %d errors",
        summary['total_imported'], summary['total_skipped'], summary['total_errors'],
    )
    return {'results': results, 'summary': summary}
