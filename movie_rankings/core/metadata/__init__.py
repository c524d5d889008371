"""Third-party movie metadata lookup."""

from movie_rankings.core.metadata.tmdb import TMDBClient

__all__ = ['TMDBClient']
