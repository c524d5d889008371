"""
Ranking API endpoints.
"""

from datetime import date

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.orm import Session

from movie_rankings.api.dependencies import get_db, get_statistics_service
from movie_rankings.api.models.common import Pagination
from movie_rankings.api.models.ranking import (
    RankingCreate, RankingUpdate, RankingResponse, RankingList, RankingsByWatchedYear,
)
from movie_rankings.api.models.stats import WatchedYearOverview
from movie_rankings.core.stats import StatisticsService
from movie_rankings.database import crud
from movie_rankings.database.filters import RankingFilter
from movie_rankings.exceptions import NotFoundError

router = APIRouter(prefix="/api/rankings", tags=["rankings"])


@router.get("", response_model=RankingList)
def list_rankings(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    user_id: int | None = Query(None, alias="userId"),
    movie_id: int | None = Query(None, alias="movieId"),
    ranking_year: int | None = Query(None, alias="rankingYear"),
    year: int | None = Query(None, description="Alias of rankingYear"),
    watched_year: int | None = Query(None, alias="watchedYear"),
    db: Session = Depends(get_db),
):
    """List rankings, most recent first."""
    filters = RankingFilter(
        user_id=user_id,
        movie_id=movie_id,
        ranking_year=ranking_year if ranking_year is not None else year,
        watched_year=watched_year,
    )
    rankings, total = crud.list_rankings(db, filters, page=page, limit=limit)
    return RankingList(
        data=[RankingResponse.model_validate(r) for r in rankings],
        pagination=Pagination.build(page, limit, total),
    )


@router.get("/year/{year}", response_model=RankingsByWatchedYear)
def get_rankings_by_watched_year(
    year: int,
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    stats: StatisticsService = Depends(get_statistics_service),
):
    """Rankings of movies watched in a year, with that year's top movies and users."""
    result = stats.rankings_by_watched_year(year, page=page, limit=limit)
    return RankingsByWatchedYear(
        year=year,
        stats=result["stats"],
        data=[RankingResponse.model_validate(r) for r in result["rankings"]],
        pagination=Pagination.build(page, limit, result["total"]),
        top_movies=result["top_movies"],
        active_users=result["active_users"],
    )


@router.get("/stats/years", response_model=WatchedYearOverview)
def get_watched_year_overview(stats: StatisticsService = Depends(get_statistics_service)):
    """Summary per watched year that has rankings."""
    return stats.watched_year_overview()


@router.get("/user/{user_id}/movie/{movie_id}", response_model=RankingResponse)
@router.get("/user/{user_id}/movie/{movie_id}/year/{year}", response_model=RankingResponse)
def get_user_movie_ranking(
    user_id: int,
    movie_id: int,
    year: int | None = None,
    db: Session = Depends(get_db),
):
    """A user's ranking of a movie for a year (the current year by default)."""
    ranking_year = year if year is not None else date.today().year
    ranking = crud.get_ranking_by_user_movie_year(db, user_id, movie_id, ranking_year)
    if not ranking:
        raise NotFoundError("Ranking not found")
    return RankingResponse.model_validate(ranking)


@router.get("/{ranking_id}", response_model=RankingResponse)
def get_ranking(ranking_id: int, db: Session = Depends(get_db)):
    """Get ranking by ID."""
    ranking = crud.get_ranking(db, ranking_id)
    if not ranking:
        raise NotFoundError("Ranking not found")
    return RankingResponse.model_validate(ranking)


@router.post("", response_model=RankingResponse, status_code=201)
def create_ranking(ranking_in: RankingCreate, db: Session = Depends(get_db)):
    """Rate a movie for a year; one ranking per user, movie and year."""
    ranking = crud.create_ranking(db, **ranking_in.model_dump())
    return RankingResponse.model_validate(ranking)


@router.put("/{ranking_id}", response_model=RankingResponse)
def update_ranking(ranking_id: int, ranking_in: RankingUpdate, db: Session = Depends(get_db)):
    """Change a ranking's rating, year or description."""
    ranking = crud.update_ranking(db, ranking_id, **ranking_in.model_dump(exclude_unset=True))
    return RankingResponse.model_validate(ranking)


@router.delete("/{ranking_id}", status_code=204)
def delete_ranking(ranking_id: int, db: Session = Depends(get_db)):
    """Delete a ranking."""
    crud.delete_ranking(db, ranking_id)
    return Response(status_code=204)
