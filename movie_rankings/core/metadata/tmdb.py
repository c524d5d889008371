"""
Client for The Movie Database (TMDB) v3 API.

Used to look up posters and plot summaries when adding movies. Lookups never
write to the database; ``format_for_import`` only shapes a TMDB record into
the fields a new movie needs.
"""

import logging
from typing import Any, Dict, List, Optional

import requests

from movie_rankings.exceptions import MetadataLookupError

logger = logging.getLogger(__name__)

TMDB_BASE_URL = "https://api.themoviedb.org/3"
TMDB_IMAGE_BASE_URL = "https://image.tmdb.org/t/p"
DEFAULT_TIMEOUT = 10


def _image_url(path: Optional[str], size: str) -> Optional[str]:
    if not path:
        return None
    return f"{TMDB_IMAGE_BASE_URL}/{size}{path}"


def poster_url(path: Optional[str], size: str = "w500") -> Optional[str]:
    """Full poster URL for a TMDB poster path (None when there is no poster)."""
    return _image_url(path, size)


def backdrop_url(path: Optional[str], size: str = "w1280") -> Optional[str]:
    """Full backdrop URL for a TMDB backdrop path."""
    return _image_url(path, size)


def release_year(release_date: Optional[str]) -> Optional[int]:
    """Year part of a TMDB ``YYYY-MM-DD`` release date."""
    if not release_date or len(release_date) < 4 or not release_date[:4].isdigit():
        return None
    return int(release_date[:4])


def format_search_result(movie: Dict[str, Any]) -> Dict[str, Any]:
    """Shape a search hit for the API."""
    return {
        'id': movie['id'],
        'title': movie.get('title'),
        'year': release_year(movie.get('release_date')),
        'description': movie.get('overview'),
        'poster_url': poster_url(movie.get('poster_path'), 'w342'),
        'rating': movie.get('vote_average'),
        'vote_count': movie.get('vote_count'),
    }


def format_movie_details(details: Dict[str, Any]) -> Dict[str, Any]:
    """Shape a full movie record for the API."""
    return {
        'id': details['id'],
        'title': details.get('title'),
        'original_title': details.get('original_title'),
        'year': release_year(details.get('release_date')),
        'description': details.get('overview'),
        'poster_url': poster_url(details.get('poster_path')),
        'backdrop_url': backdrop_url(details.get('backdrop_path')),
        'runtime': details.get('runtime'),
        'genres': [genre['name'] for genre in details.get('genres') or []],
        'imdb_id': details.get('imdb_id'),
        'rating': details.get('vote_average'),
        'vote_count': details.get('vote_count'),
        'popularity': details.get('popularity'),
        'release_date': details.get('release_date'),
        'tagline': details.get('tagline'),
        'status': details.get('status'),
        'homepage': details.get('homepage'),
    }


def format_for_import(
    details: Dict[str, Any],
    added_by: str,
    watched_year: Optional[int] = None,
) -> Dict[str, Any]:
    """
    Shape a TMDB record into the fields of a new movie.

    ``watched_year`` defaults to the release year.
    """
    year = release_year(details.get('release_date'))
    return {
        'title': details.get('title'),
        'year': year,
        'description': details.get('overview') or '',
        'poster_url': poster_url(details.get('poster_path')),
        'watched_year': watched_year or year,
        'added_by': added_by,
        'tmdb_id': details['id'],
        'imdb_id': details.get('imdb_id'),
        'runtime': details.get('runtime'),
        'genres': ', '.join(genre['name'] for genre in details.get('genres') or []),
    }


class TMDBClient:
    """
    Thin wrapper over the TMDB REST API.

    Args:
        api_key: TMDB v3 API key; every lookup fails while it is empty
        base_url: API root URL
        timeout: Request timeout in seconds
        session: Optional ``requests.Session`` to reuse
    """

    def __init__(
        self,
        api_key: Optional[str],
        base_url: str = TMDB_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT,
        session: Optional[requests.Session] = None,
    ):
        self.api_key = api_key
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({"Accept": "application/json"})

    @property
    def configured(self) -> bool:
        return bool(self.api_key)

    def _get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Optional[Dict[str, Any]]:
        """
        GET a TMDB endpoint.

        Returns:
            Decoded JSON body, or None when TMDB answers 404

        Raises:
            MetadataLookupError: If no API key is configured or the request fails
        """
        if not self.api_key:
            raise MetadataLookupError("TMDB API key is not configured")

        query = {'api_key': self.api_key, 'language': 'en-US'}
        query.update(params or {})
        try:
            response = self.session.get(f"{self.base_url}{path}", params=query, timeout=self.timeout)
            if response.status_code == 404:
                return None
            response.raise_for_status()
            return response.json()
        except requests.RequestException as e:
            logger.error("TMDB request to %s failed: %s", path, e)
            raise MetadataLookupError(f"TMDB request failed: {e}")

    def search_movies(self, query: str, year: Optional[int] = None) -> List[Dict[str, Any]]:
        """Search movies by title, optionally restricted to a release year."""
        params: Dict[str, Any] = {'query': query, 'include_adult': 'false'}
        if year:
            params['year'] = year
        data = self._get("/search/movie", params) or {}
        return data.get('results', [])

    def get_movie_details(self, tmdb_id: int) -> Optional[Dict[str, Any]]:
        """Full details for one TMDB movie, or None if TMDB does not know it."""
        return self._get(f"/movie/{tmdb_id}")

    def get_movie_by_title_and_year(self, title: str, year: Optional[int] = None) -> Optional[Dict[str, Any]]:
        """
        Best match for a title.

        Prefers the first search hit released in ``year``, falling back to the
        first hit overall, and returns its full details.
        """
        results = self.search_movies(title, year)
        if not results:
            return None

        best = results[0]
        if year:
            same_year = [m for m in results if release_year(m.get('release_date')) == year]
            if same_year:
                best = same_year[0]
        return self.get_movie_details(best['id'])
