"""
Movie API endpoints.
"""

from typing import Literal

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.orm import Session

from movie_rankings.api.config import get_bulk_batch_size, get_bulk_delay
from movie_rankings.api.dependencies import get_db, get_statistics_service, get_current_user_id
from movie_rankings.api.models.common import Pagination
from movie_rankings.api.models.movie import (
    MovieCreate, MovieUpdate, MovieResponse, MovieList, MovieListItem, MovieDetail, MovieRankingItem,
    UnratedMovies, BulkUpdateRequest, BulkUpdateResponse,
)
from movie_rankings.api.models.stats import CatalogStats
from movie_rankings.core.data import bulk
from movie_rankings.core.stats import StatisticsService, aggregations
from movie_rankings.database import crud
from movie_rankings.database.filters import MovieFilter
from movie_rankings.exceptions import NotFoundError

router = APIRouter(prefix="/api/movies", tags=["movies"])


@router.get("", response_model=MovieList)
def list_movies(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    year: int | None = Query(None),
    watched_year: int | None = Query(None, alias="watchedYear"),
    search: str | None = Query(None),
    sort_by: Literal["title", "year", "watchedYear", "createdAt"] = Query("title", alias="sortBy"),
    sort_order: Literal["asc", "desc"] = Query("asc", alias="sortOrder"),
    db: Session = Depends(get_db),
):
    """List movies with filters, sorting and average ratings."""
    filters = MovieFilter(year=year, watched_year=watched_year, search=search)
    movies, total = crud.list_movies(
        db, filters, sort_by=sort_by, sort_order=sort_order, page=page, limit=limit
    )
    ratings = crud.get_ratings_by_movie(db, [m.id for m in movies])
    return MovieList(
        data=[
            MovieListItem.model_validate(m).model_copy(update={
                "average_rating": aggregations.round_display(aggregations.average(ratings[m.id])),
                "total_rankings": len(ratings[m.id]),
            })
            for m in movies
        ],
        pagination=Pagination.build(page, limit, total),
    )


@router.get("/stats", response_model=CatalogStats)
def get_movie_stats(stats: StatisticsService = Depends(get_statistics_service)):
    """Catalog statistics: watched year spread and average rating."""
    return stats.catalog_stats()


@router.get("/unrated/{year}", response_model=UnratedMovies)
def get_unrated_movies(
    year: int,
    user_id: int | None = Depends(get_current_user_id),
    stats: StatisticsService = Depends(get_statistics_service),
):
    """Movies watched in a year that the calling user has not rated for that year."""
    return stats.unrated_movies(year, user_id)


@router.post("/bulk-update", response_model=BulkUpdateResponse)
def bulk_update_movies(body: BulkUpdateRequest, db: Session = Depends(get_db)):
    """Apply the same metadata to many movies in batches."""
    return bulk.bulk_update_movies(
        db,
        body.movie_ids,
        body.metadata.model_dump(exclude_unset=True),
        batch_size=get_bulk_batch_size(),
        delay=get_bulk_delay(),
    )


@router.get("/{movie_id}", response_model=MovieDetail)
def get_movie(movie_id: int, db: Session = Depends(get_db)):
    """Get movie details with rankings and per year averages."""
    movie = crud.get_movie_with_rankings(db, movie_id)
    if not movie:
        raise NotFoundError("Movie not found")
    rankings = sorted(movie.rankings, key=lambda r: (r.ranked_at, r.id), reverse=True)
    ratings = [r.rating for r in rankings]
    return MovieDetail(
        **MovieResponse.model_validate(movie).model_dump(),
        average_rating=aggregations.round_display(aggregations.average(ratings)),
        total_rankings=len(ratings),
        rankings=[MovieRankingItem.model_validate(r) for r in rankings],
        yearly_stats=aggregations.movie_breakdown(rankings),
    )


@router.post("", response_model=MovieResponse, status_code=201)
def create_movie(movie_in: MovieCreate, db: Session = Depends(get_db)):
    """Add a movie."""
    movie = crud.create_movie(db, **movie_in.model_dump())
    return MovieResponse.model_validate(movie)


@router.put("/{movie_id}", response_model=MovieResponse)
def update_movie(movie_id: int, movie_in: MovieUpdate, db: Session = Depends(get_db)):
    """Update a movie; only the fields sent are changed."""
    movie = crud.update_movie(db, movie_id, **movie_in.model_dump(exclude_unset=True))
    return MovieResponse.model_validate(movie)


@router.delete("/{movie_id}", status_code=204)
def delete_movie(movie_id: int, db: Session = Depends(get_db)):
    """Delete a movie without rankings."""
    crud.delete_movie(db, movie_id)
    return Response(status_code=204)
