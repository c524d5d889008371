"""
CRUD operations for User, Movie, and Ranking models.

This module provides Create, Read, Update, Delete operations for all database
models. Lookups return None for unknown ids; writes raise NotFoundError,
ConflictError or InvariantViolationError so callers can tell the cases apart.
"""

import logging
from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence, Tuple
from sqlalchemy import func, and_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload

from movie_rankings.database.filters import UserFilter, MovieFilter, RankingFilter
from movie_rankings.database.models import User, Movie, Ranking
from movie_rankings.exceptions import ConflictError, InvariantViolationError, NotFoundError

logger = logging.getLogger(__name__)

MOVIE_SORT_COLUMNS = {
    'title': Movie.title,
    'year': Movie.year,
    'watchedYear': Movie.watched_year,
    'createdAt': Movie.created_at,
}

USER_UPDATABLE_FIELDS = ('username', 'display_name', 'avatar_url', 'is_active')
MOVIE_UPDATABLE_FIELDS = ('title', 'year', 'description', 'poster_url', 'watched_year')
RANKING_UPDATABLE_FIELDS = ('rating', 'ranking_year', 'description', 'ranked_at')
BULK_UPDATABLE_FIELDS = ('description', 'poster_url', 'year')


def _page(query, page: int, limit: int) -> list:
    return query.offset((page - 1) * limit).limit(limit).all()


# ==================== USER CRUD OPERATIONS ====================

def create_user(
    session: Session,
    username: str,
    display_name: Optional[str] = None,
    avatar_url: Optional[str] = None,
    is_active: bool = True,
) -> User:
    """
    Create a new user.

    Args:
        session: Database session
        username: Unique username
        display_name: Display name (defaults to the username)
        avatar_url: Avatar image URL (optional)
        is_active: Whether the user is active

    Returns:
        Created User object

    Raises:
        ConflictError: If the username is already taken
    """
    existing = get_user_by_username(session, username)
    if existing:
        logger.warning("Username already exists: %s", username)
        raise ConflictError("Username already exists", existing=existing)

    user = User(
        username=username,
        display_name=display_name or username,
        avatar_url=avatar_url or None,
        is_active=is_active,
    )
    session.add(user)
    session.commit()
    session.refresh(user)
    logger.info("Created user %s (%s)", user.id, user.username)
    return user


def get_user(session: Session, user_id: int) -> Optional[User]:
    """
    Get a user by ID.

    Returns:
        User object or None if not found
    """
    return session.query(User).filter(User.id == user_id).first()


def get_user_by_username(session: Session, username: str) -> Optional[User]:
    """Get a user by exact username."""
    return session.query(User).filter(User.username == username).first()


def list_users(
    session: Session,
    filters: Optional[UserFilter] = None,
    page: int = 1,
    limit: int = 20,
) -> Tuple[List[User], int]:
    """
    Get a page of users, newest first.

    Args:
        session: Database session
        filters: Optional search criteria
        page: 1-based page number
        limit: Page size

    Returns:
        Tuple of (users on this page, total matching users)
    """
    query = (filters or UserFilter()).apply(session.query(User))
    total = query.count()
    users = _page(query.order_by(User.created_at.desc(), User.id.desc()), page, limit)
    return users, total


def get_all_users(session: Session) -> List[User]:
    """Get every user in insertion order."""
    return session.query(User).order_by(User.id).all()


def count_users(session: Session, filters: Optional[UserFilter] = None) -> int:
    """Get count of users matching the filter."""
    return (filters or UserFilter()).apply(session.query(User)).count()


def update_user(session: Session, user_id: int, **kwargs) -> User:
    """
    Update user information.

    Args:
        session: Database session
        user_id: User ID
        **kwargs: Fields to update (username, display_name, avatar_url, is_active)

    Returns:
        Updated User object

    Raises:
        NotFoundError: If the user does not exist
        ConflictError: If the new username belongs to another user
    """
    user = get_user(session, user_id)
    if not user:
        raise NotFoundError("User not found")

    username = kwargs.get('username')
    if username and username != user.username:
        other = get_user_by_username(session, username)
        if other and other.id != user_id:
            logger.warning("Username already taken: %s", username)
            raise ConflictError("Username already taken", existing=other)

    for key, value in kwargs.items():
        if key in USER_UPDATABLE_FIELDS:
            if key == 'avatar_url' and value == "":
                value = None
            setattr(user, key, value)
    session.commit()
    session.refresh(user)
    return user


def delete_user(session: Session, user_id: int) -> None:
    """
    Delete a user that has no rankings.

    Raises:
        NotFoundError: If the user does not exist
        InvariantViolationError: If the user has rankings
    """
    user = get_user(session, user_id)
    if not user:
        raise NotFoundError("User not found")

    if count_rankings(session, RankingFilter(user_id=user_id)) > 0:
        logger.warning("Refusing to delete user %s with rankings", user_id)
        raise InvariantViolationError(
            "Cannot delete user with rankings",
            "User has existing rankings. Deactivate instead.",
        )

    session.delete(user)
    session.commit()
    logger.info("Deleted user %s", user_id)


# ==================== MOVIE CRUD OPERATIONS ====================

def find_movie(
    session: Session,
    title: str,
    year: int,
    case_insensitive: bool = True,
) -> Optional[Movie]:
    """
    Find a movie by title and release year.

    Args:
        session: Database session
        title: Movie title
        year: Release year
        case_insensitive: Compare titles ignoring case

    Returns:
        Movie object or None
    """
    query = session.query(Movie).filter(Movie.year == year)
    if case_insensitive:
        query = query.filter(func.lower(Movie.title) == title.lower())
    else:
        query = query.filter(Movie.title == title)
    return query.first()


def create_movie(
    session: Session,
    title: str,
    year: int,
    watched_year: int,
    added_by: str,
    description: Optional[str] = None,
    poster_url: Optional[str] = None,
) -> Movie:
    """
    Create a new movie.

    Args:
        session: Database session
        title: Movie title
        year: Release year
        watched_year: Year the group watched the movie
        added_by: Who added the movie
        description: Plot summary
        poster_url: Poster image URL

    Returns:
        Created Movie object

    Raises:
        ConflictError: If a movie with the same title (any case) and year exists
    """
    existing = find_movie(session, title, year)
    if existing:
        logger.warning("Movie already exists: %s (%s)", title, year)
        raise ConflictError("Movie already exists", existing=existing)

    movie = Movie(
        title=title,
        year=year,
        watched_year=watched_year,
        added_by=added_by,
        description=description,
        poster_url=poster_url or None,
    )
    session.add(movie)
    session.commit()
    session.refresh(movie)
    logger.info("Created movie %s (%s)", movie.id, movie.title)
    return movie


def get_movie(session: Session, movie_id: int) -> Optional[Movie]:
    """
    Get a movie by ID.

    Returns:
        Movie object or None if not found
    """
    return session.query(Movie).filter(Movie.id == movie_id).first()


def get_movie_with_rankings(session: Session, movie_id: int) -> Optional[Movie]:
    """Get a movie with its rankings and their users loaded."""
    return (
        session.query(Movie)
        .options(joinedload(Movie.rankings).joinedload(Ranking.user))
        .filter(Movie.id == movie_id)
        .first()
    )


def list_movies(
    session: Session,
    filters: Optional[MovieFilter] = None,
    sort_by: str = 'title',
    sort_order: str = 'asc',
    page: int = 1,
    limit: int = 20,
) -> Tuple[List[Movie], int]:
    """
    Get a page of movies.

    Args:
        session: Database session
        filters: Optional filter criteria
        sort_by: One of title, year, watchedYear, createdAt
        sort_order: 'asc' or 'desc'
        page: 1-based page number
        limit: Page size

    Returns:
        Tuple of (movies on this page, total matching movies)
    """
    query = (filters or MovieFilter()).apply(session.query(Movie))
    total = query.count()
    column = MOVIE_SORT_COLUMNS.get(sort_by, Movie.title)
    order = column.desc() if sort_order == 'desc' else column.asc()
    movies = _page(query.order_by(order, Movie.id), page, limit)
    return movies, total


def list_movies_by_watched_year(session: Session, watched_year: int) -> List[Movie]:
    """Get all movies watched in a year, ordered by title."""
    return (
        session.query(Movie)
        .filter(Movie.watched_year == watched_year)
        .order_by(Movie.title.asc(), Movie.id)
        .all()
    )


def get_all_movies(session: Session, filters: Optional[MovieFilter] = None) -> List[Movie]:
    """Get every movie matching the filter in insertion order."""
    return (filters or MovieFilter()).apply(session.query(Movie)).order_by(Movie.id).all()


def count_movies(session: Session, filters: Optional[MovieFilter] = None) -> int:
    """Get count of movies matching the filter."""
    return (filters or MovieFilter()).apply(session.query(Movie)).count()


def update_movie(session: Session, movie_id: int, **kwargs) -> Movie:
    """
    Update movie information.

    Raises:
        NotFoundError: If the movie does not exist
        ConflictError: If the new title and year belong to another movie
    """
    movie = get_movie(session, movie_id)
    if not movie:
        raise NotFoundError("Movie not found")

    title = kwargs.get('title') or movie.title
    year = kwargs.get('year') or movie.year
    if (title, year) != (movie.title, movie.year):
        other = find_movie(session, title, year)
        if other and other.id != movie_id:
            logger.warning("Movie already exists: %s (%s)", title, year)
            raise ConflictError("Movie already exists", existing=other)

    for key, value in kwargs.items():
        if key in MOVIE_UPDATABLE_FIELDS:
            if key == 'poster_url' and value == "":
                value = None
            setattr(movie, key, value)
    session.commit()
    session.refresh(movie)
    return movie


def delete_movie(session: Session, movie_id: int) -> None:
    """
    Delete a movie that has no rankings.

    Raises:
        NotFoundError: If the movie does not exist
        InvariantViolationError: If the movie has rankings
    """
    movie = get_movie(session, movie_id)
    if not movie:
        raise NotFoundError("Movie not found")

    if count_rankings(session, RankingFilter(movie_id=movie_id)) > 0:
        logger.warning("Refusing to delete movie %s with rankings", movie_id)
        raise InvariantViolationError(
            "Cannot delete movie with rankings",
            "Movie has existing rankings. Consider archiving instead.",
        )

    session.delete(movie)
    session.commit()
    logger.info("Deleted movie %s", movie_id)


def bulk_update_movies(session: Session, movie_ids: Sequence[int], values: Dict[str, Any]) -> int:
    """
    Apply the same field values to a group of movies in one UPDATE.

    All ids must exist; otherwise nothing is written.

    Args:
        session: Database session
        movie_ids: Movie IDs to update
        values: Column values (description, poster_url, year)

    Returns:
        Number of rows updated

    Raises:
        NotFoundError: If any of the ids does not exist
    """
    ids = list(dict.fromkeys(movie_ids))
    found = {row[0] for row in session.query(Movie.id).filter(Movie.id.in_(ids)).all()}
    missing = [movie_id for movie_id in ids if movie_id not in found]
    if missing:
        raise NotFoundError(f"Movies not found: {', '.join(str(m) for m in missing)}")

    updates = {k: v for k, v in values.items() if k in BULK_UPDATABLE_FIELDS}
    updated = (
        session.query(Movie)
        .filter(Movie.id.in_(ids))
        .update(updates, synchronize_session=False)
    )
    session.commit()
    return updated


# ==================== RANKING CRUD OPERATIONS ====================

def _ranking_query(session: Session):
    return session.query(Ranking).options(
        joinedload(Ranking.user),
        joinedload(Ranking.movie),
    )


def get_ranking(session: Session, ranking_id: int) -> Optional[Ranking]:
    """
    Get a ranking by ID with its user and movie loaded.

    Returns:
        Ranking object or None if not found
    """
    return _ranking_query(session).filter(Ranking.id == ranking_id).first()


def get_ranking_by_user_movie_year(
    session: Session,
    user_id: int,
    movie_id: int,
    ranking_year: int,
) -> Optional[Ranking]:
    """
    Get the ranking for a (user, movie, ranking year) triple.

    Returns:
        Ranking object or None if not found
    """
    return _ranking_query(session).filter(
        and_(
            Ranking.user_id == user_id,
            Ranking.movie_id == movie_id,
            Ranking.ranking_year == ranking_year,
        )
    ).first()


def create_ranking(
    session: Session,
    user_id: int,
    movie_id: int,
    rating: int,
    ranking_year: int,
    description: Optional[str] = None,
    ranked_at: Optional[datetime] = None,
) -> Ranking:
    """
    Create a new ranking.

    Args:
        session: Database session
        user_id: User ID
        movie_id: Movie ID
        rating: Integer rating from 1 to 10
        ranking_year: Year the rating counts toward
        description: Optional comment
        ranked_at: Override for the ranking timestamp (used by imports)

    Returns:
        Created Ranking object

    Raises:
        NotFoundError: If the user or movie does not exist
        ConflictError: If the user already ranked the movie for that year
    """
    if not get_user(session, user_id):
        raise NotFoundError("User not found")
    if not get_movie(session, movie_id):
        raise NotFoundError("Movie not found")

    existing = get_ranking_by_user_movie_year(session, user_id, movie_id, ranking_year)
    if existing:
        logger.warning(
            "Ranking already exists for user %s, movie %s, year %s",
            user_id, movie_id, ranking_year,
        )
        raise ConflictError("Ranking already exists for this year", existing=existing)

    ranking = Ranking(
        user_id=user_id,
        movie_id=movie_id,
        rating=rating,
        ranking_year=ranking_year,
        description=description,
    )
    if ranked_at is not None:
        ranking.ranked_at = ranked_at
    session.add(ranking)
    try:
        session.commit()
    except IntegrityError:
        # Another request created the same triple between check and insert
        session.rollback()
        existing = get_ranking_by_user_movie_year(session, user_id, movie_id, ranking_year)
        if not existing:
            raise
        raise ConflictError("Ranking already exists for this year", existing=existing)
    return get_ranking(session, ranking.id)


def list_rankings(
    session: Session,
    filters: Optional[RankingFilter] = None,
    page: int = 1,
    limit: int = 20,
) -> Tuple[List[Ranking], int]:
    """
    Get a page of rankings, most recently ranked first.

    Returns:
        Tuple of (rankings on this page, total matching rankings)
    """
    filters = filters or RankingFilter()
    total = filters.apply(session.query(Ranking)).count()
    query = filters.apply(_ranking_query(session))
    rankings = _page(query.order_by(Ranking.ranked_at.desc(), Ranking.id.desc()), page, limit)
    return rankings, total


def get_all_rankings(session: Session, filters: Optional[RankingFilter] = None) -> List[Ranking]:
    """
    Get every ranking matching the filter, with user and movie loaded.

    Rankings are returned in insertion order; statistics rely on this order
    for deterministic tie-breaking.
    """
    query = (filters or RankingFilter()).apply(_ranking_query(session))
    return query.order_by(Ranking.id).all()


def get_ratings_by_movie(session: Session, movie_ids: Sequence[int]) -> Dict[int, List[int]]:
    """
    Get the ratings of several movies at once.

    Returns:
        Mapping of movie ID to its list of ratings (empty list if unranked)
    """
    ratings: Dict[int, List[int]] = {movie_id: [] for movie_id in movie_ids}
    if not movie_ids:
        return ratings
    rows = (
        session.query(Ranking.movie_id, Ranking.rating)
        .filter(Ranking.movie_id.in_(list(movie_ids)))
        .order_by(Ranking.id)
        .all()
    )
    for movie_id, rating in rows:
        ratings[movie_id].append(rating)
    return ratings


def get_ranking_counts_by_user(session: Session, user_ids: Sequence[int]) -> Dict[int, int]:
    """Get the number of rankings for each of several users."""
    counts = {user_id: 0 for user_id in user_ids}
    if not user_ids:
        return counts
    rows = (
        session.query(Ranking.user_id, func.count(Ranking.id))
        .filter(Ranking.user_id.in_(list(user_ids)))
        .group_by(Ranking.user_id)
        .all()
    )
    for user_id, count in rows:
        counts[user_id] = count
    return counts


def get_recent_rankings_for_user(session: Session, user_id: int, limit: int = 10) -> List[Ranking]:
    """Get a user's most recent rankings."""
    return (
        _ranking_query(session)
        .filter(Ranking.user_id == user_id)
        .order_by(Ranking.ranked_at.desc(), Ranking.id.desc())
        .limit(limit)
        .all()
    )


def count_rankings(session: Session, filters: Optional[RankingFilter] = None) -> int:
    """Get count of rankings matching the filter."""
    return (filters or RankingFilter()).apply(session.query(Ranking)).count()


def get_ranking_year_counts(session: Session) -> List[Tuple[int, int]]:
    """
    Get the number of rankings per ranking year.

    Returns:
        List of (ranking_year, count), newest year first
    """
    return [
        (year, count)
        for year, count in session.query(Ranking.ranking_year, func.count(Ranking.id))
        .group_by(Ranking.ranking_year)
        .order_by(Ranking.ranking_year.desc())
        .all()
    ]


def update_ranking(session: Session, ranking_id: int, **kwargs) -> Ranking:
    """
    Update a ranking's rating, year or description.

    Raises:
        NotFoundError: If the ranking does not exist
        ConflictError: If moving it to another year collides with an existing ranking
    """
    ranking = get_ranking(session, ranking_id)
    if not ranking:
        raise NotFoundError("Ranking not found")

    new_year = kwargs.get('ranking_year')
    if new_year is not None and new_year != ranking.ranking_year:
        other = get_ranking_by_user_movie_year(session, ranking.user_id, ranking.movie_id, new_year)
        if other:
            raise ConflictError("Ranking already exists for this year", existing=other)

    for key, value in kwargs.items():
        if key in RANKING_UPDATABLE_FIELDS:
            setattr(ranking, key, value)
    ranking.updated_at = func.current_timestamp()
    session.commit()
    session.refresh(ranking)
    return get_ranking(session, ranking_id)


def delete_ranking(session: Session, ranking_id: int) -> None:
    """
    Delete a ranking.

    Raises:
        NotFoundError: If the ranking does not exist
    """
    ranking = session.query(Ranking).filter(Ranking.id == ranking_id).first()
    if not ranking:
        raise NotFoundError("Ranking not found")
    session.delete(ranking)
    session.commit()
