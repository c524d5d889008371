"""
Pydantic schemas for TMDB lookup API.
"""

from pydantic import Field

from movie_rankings.utils.schema import CamelModel


class TMDBSearchResult(CamelModel):
    id: int
    title: str | None = None
    year: int | None = None
    description: str | None = None
    poster_url: str | None = None
    rating: float | None = None
    vote_count: int | None = None


class TMDBSearchResponse(CamelModel):
    results: list[TMDBSearchResult]
    total: int


class TMDBMovieDetails(CamelModel):
    id: int
    title: str | None = None
    original_title: str | None = None
    year: int | None = None
    description: str | None = None
    poster_url: str | None = None
    backdrop_url: str | None = None
    runtime: int | None = None
    genres: list[str] = []
    imdb_id: str | None = None
    rating: float | None = None
    vote_count: int | None = None
    popularity: float | None = None
    release_date: str | None = None
    tagline: str | None = None
    status: str | None = None
    homepage: str | None = None


class TMDBImportRequest(CamelModel):
    tmdb_id: int
    watched_year: int | None = None
    added_by: str = Field(..., min_length=1)


class TMDBImportMovie(CamelModel):
    title: str | None = None
    year: int | None = None
    description: str = ""
    poster_url: str | None = None
    watched_year: int | None = None
    added_by: str
    tmdb_id: int
    imdb_id: str | None = None
    runtime: int | None = None
    genres: str = ""


class TMDBImportResponse(CamelModel):
    message: str = "Movie ready for import"
    movie: TMDBImportMovie
    source: str = "tmdb"
