"""
Data export/import API endpoints.
"""

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from movie_rankings.api.dependencies import get_db
from movie_rankings.api.models.data import DataStats, ImportRequest, ImportResponse
from movie_rankings.core.data import transfer
from movie_rankings.database import crud

router = APIRouter(prefix="/api/data", tags=["data"])

# Approximate serialized size per record, in bytes
EXPORT_BYTES_PER_USER = 100
EXPORT_BYTES_PER_MOVIE = 200
EXPORT_BYTES_PER_RANKING = 150


@router.get("/export")
def export_data(
    include_users: bool = Query(True, alias="includeUsers"),
    include_movies: bool = Query(True, alias="includeMovies"),
    include_rankings: bool = Query(True, alias="includeRankings"),
    year: int | None = Query(None),
    db: Session = Depends(get_db),
):
    """Download users, movies and rankings as a JSON file."""
    data = transfer.export_data(
        db,
        include_users=include_users,
        include_movies=include_movies,
        include_rankings=include_rankings,
        year=year,
    )
    filename = transfer.export_filename()
    return JSONResponse(
        content=data,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.post("/import", response_model=ImportResponse)
def import_data(body: ImportRequest, db: Session = Depends(get_db)):
    """Import an export file, skipping or updating records that already exist."""
    payload = body.data.model_dump()
    return transfer.import_data(db, payload, overwrite=body.overwrite)


@router.get("/stats", response_model=DataStats)
def get_data_stats(db: Session = Depends(get_db)):
    """Record counts, rankings per year and approximate export size."""
    users = crud.count_users(db)
    movies = crud.count_movies(db)
    rankings = crud.count_rankings(db)
    sizes = {
        "users": users * EXPORT_BYTES_PER_USER,
        "movies": movies * EXPORT_BYTES_PER_MOVIE,
        "rankings": rankings * EXPORT_BYTES_PER_RANKING,
    }
    sizes["total"] = sum(sizes.values())
    return {
        "counts": {"users": users, "movies": movies, "rankings": rankings},
        "years": [{"year": year, "count": count} for year, count in crud.get_ranking_year_counts(db)],
        "export_size": sizes,
    }
