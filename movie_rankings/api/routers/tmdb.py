"""
TMDB metadata lookup endpoints.

Nothing here writes to the database.
"""

from fastapi import APIRouter, Depends, Query

from movie_rankings.api.dependencies import get_tmdb_client
from movie_rankings.api.models.tmdb import (
    TMDBImportRequest, TMDBImportResponse, TMDBMovieDetails, TMDBSearchResponse,
)
from movie_rankings.core.metadata import tmdb
from movie_rankings.core.metadata.tmdb import TMDBClient
from movie_rankings.exceptions import NotFoundError

router = APIRouter(prefix="/api/tmdb", tags=["tmdb"])


@router.get("/search", response_model=TMDBSearchResponse)
def search(
    query: str = Query(..., min_length=1),
    year: int | None = Query(None),
    client: TMDBClient = Depends(get_tmdb_client),
):
    """Search TMDB by title."""
    results = client.search_movies(query, year)
    return {
        "results": [tmdb.format_search_result(movie) for movie in results],
        "total": len(results),
    }


@router.get("/movie/{tmdb_id}", response_model=TMDBMovieDetails)
def get_movie(tmdb_id: int, client: TMDBClient = Depends(get_tmdb_client)):
    """Full TMDB details for one movie."""
    details = client.get_movie_details(tmdb_id)
    if not details:
        raise NotFoundError("Movie not found on TMDB")
    return tmdb.format_movie_details(details)


@router.get("/match", response_model=TMDBMovieDetails)
def match(
    title: str = Query(..., min_length=1),
    year: int | None = Query(None),
    client: TMDBClient = Depends(get_tmdb_client),
):
    """Best TMDB match for a title and optional release year."""
    details = client.get_movie_by_title_and_year(title, year)
    if not details:
        raise NotFoundError("Movie not found on TMDB")
    return tmdb.format_movie_details(details)


@router.post("/import", response_model=TMDBImportResponse)
def prepare_import(body: TMDBImportRequest, client: TMDBClient = Depends(get_tmdb_client)):
    """Shape a TMDB movie into the fields of a new movie without saving it."""
    details = client.get_movie_details(body.tmdb_id)
    if not details:
        raise NotFoundError("Movie not found on TMDB")
    return {
        "movie": tmdb.format_for_import(details, added_by=body.added_by, watched_year=body.watched_year),
    }
