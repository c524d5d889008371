"""
API route handlers.
"""

from movie_rankings.api.routers import users, movies, rankings, data, stats, tmdb, system

__all__ = ["users", "movies", "rankings", "data", "stats", "tmdb", "system"]
