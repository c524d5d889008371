"""
SQLAlchemy ORM models for the movie rankings database.

This module defines the User, Movie, and Ranking tables with their
relationships and constraints. Rankings reference users and movies without
cascading deletes: a ranked user or movie must be deactivated, not deleted.
"""

from datetime import datetime
from typing import List, Optional
from sqlalchemy import (
    Integer, String, Text, Boolean, ForeignKey,
    CheckConstraint, UniqueConstraint, Index, TIMESTAMP
)
from sqlalchemy.orm import DeclarativeBase, relationship, Mapped, mapped_column
from sqlalchemy.sql import func


class Base(DeclarativeBase):
    """Base class for all ORM models."""
    pass


class User(Base):
    """
    User table storing group members.

    Attributes:
        id: Primary key, auto-incremented
        username: Unique login handle (letters, digits, underscore)
        display_name: Name shown in listings
        avatar_url: Optional avatar image URL
        is_active: False once a member has been deactivated
        created_at: Timestamp when record was created
    """
    __tablename__ = 'users'

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    username: Mapped[str] = mapped_column(String(50), nullable=False, unique=True)
    display_name: Mapped[str] = mapped_column(String(100), nullable=False)
    avatar_url: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP,
        nullable=False,
        server_default=func.current_timestamp()
    )

    rankings: Mapped[List["Ranking"]] = relationship(
        "Ranking",
        back_populates="user"
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, username='{self.username}')>"


class Movie(Base):
    """
    Movie table storing movies the group has watched.

    Attributes:
        id: Primary key, auto-incremented
        title: Movie title (required)
        year: Release year
        description: Plot summary (optional)
        poster_url: Poster image URL (optional)
        watched_year: Year the group watched the movie
        added_by: Free-text attribution of who added it
        created_at: Timestamp when record was created
    """
    __tablename__ = 'movies'

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    year: Mapped[int] = mapped_column(Integer, nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    poster_url: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    watched_year: Mapped[int] = mapped_column(Integer, nullable=False)
    added_by: Mapped[str] = mapped_column(String(100), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP,
        nullable=False,
        server_default=func.current_timestamp()
    )

    rankings: Mapped[List["Ranking"]] = relationship(
        "Ranking",
        back_populates="movie"
    )

    __table_args__ = (
        Index('idx_movies_title', 'title'),
        Index('idx_movies_watched_year', 'watched_year'),
    )

    def __repr__(self) -> str:
        return f"<Movie(id={self.id}, title='{self.title}', year={self.year})>"


class Ranking(Base):
    """
    Ranking table storing one user's rating of one movie for one year.

    Attributes:
        id: Primary key, auto-incremented
        user_id: Foreign key to users table
        movie_id: Foreign key to movies table
        rating: Integer rating from 1 to 10
        ranking_year: Year this rating counts toward
        description: Optional comment
        ranked_at: Timestamp when the rating was given
        updated_at: Timestamp when the rating was last changed
    """
    __tablename__ = 'rankings'

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey('users.id'),
        nullable=False
    )
    movie_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey('movies.id'),
        nullable=False
    )
    rating: Mapped[int] = mapped_column(Integer, nullable=False)
    ranking_year: Mapped[int] = mapped_column(Integer, nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    ranked_at: Mapped[datetime] = mapped_column(
        TIMESTAMP,
        nullable=False,
        server_default=func.current_timestamp()
    )
    updated_at: Mapped[datetime] = mapped_column(
        TIMESTAMP,
        nullable=False,
        server_default=func.current_timestamp(),
        onupdate=func.current_timestamp()
    )

    user: Mapped["User"] = relationship("User", back_populates="rankings")
    movie: Mapped["Movie"] = relationship("Movie", back_populates="rankings")

    __table_args__ = (
        CheckConstraint("rating >= 1 AND rating <= 10", name='check_rating_range'),
        UniqueConstraint('user_id', 'movie_id', 'ranking_year', name='unique_user_movie_year'),
        Index('idx_rankings_user', 'user_id'),
        Index('idx_rankings_movie', 'movie_id'),
        Index('idx_rankings_year', 'ranking_year'),
    )

    def __repr__(self) -> str:
        return (
            f"<Ranking(id={self.id}, user_id={self.user_id}, movie_id={self.movie_id}, "
            f"rating={self.rating}, ranking_year={self.ranking_year})>"
        )
