"""
User management API endpoints.
"""

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.orm import Session

from movie_rankings.api.dependencies import get_db, get_statistics_service
from movie_rankings.api.models.common import Pagination
from movie_rankings.api.models.stats import UserStats
from movie_rankings.api.models.user import (
    UserCreate, UserUpdate, UserResponse, UserList, UserListItem, UserDetail, UserRecentRanking,
)
from movie_rankings.core.stats import StatisticsService
from movie_rankings.database import crud
from movie_rankings.database.filters import UserFilter, RankingFilter
from movie_rankings.exceptions import NotFoundError

router = APIRouter(prefix="/api/users", tags=["users"])


@router.get("", response_model=UserList)
def list_users(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    search: str | None = Query(None),
    db: Session = Depends(get_db),
):
    """List users, newest first, with ranking counts."""
    users, total = crud.list_users(db, UserFilter(search=search), page=page, limit=limit)
    counts = crud.get_ranking_counts_by_user(db, [u.id for u in users])
    return UserList(
        data=[
            UserListItem.model_validate(u).model_copy(update={"total_rankings": counts[u.id]})
            for u in users
        ],
        pagination=Pagination.build(page, limit, total),
    )


@router.get("/{user_id}", response_model=UserDetail)
def get_user(user_id: int, db: Session = Depends(get_db)):
    """Get user profile with the ten most recent rankings."""
    user = crud.get_user(db, user_id)
    if not user:
        raise NotFoundError("User not found")
    recent = crud.get_recent_rankings_for_user(db, user_id, limit=10)
    return UserDetail(
        **UserResponse.model_validate(user).model_dump(),
        total_rankings=crud.count_rankings(db, RankingFilter(user_id=user_id)),
        rankings=[UserRecentRanking.model_validate(r) for r in recent],
    )


@router.post("", response_model=UserResponse, status_code=201)
def create_user(user_in: UserCreate, db: Session = Depends(get_db)):
    """Create a new user."""
    user = crud.create_user(
        db,
        username=user_in.username,
        display_name=user_in.display_name,
        avatar_url=user_in.avatar_url,
    )
    return UserResponse.model_validate(user)


@router.put("/{user_id}", response_model=UserResponse)
def update_user(user_id: int, user_in: UserUpdate, db: Session = Depends(get_db)):
    """Update a user; only the fields sent are changed."""
    user = crud.update_user(db, user_id, **user_in.model_dump(exclude_unset=True))
    return UserResponse.model_validate(user)


@router.delete("/{user_id}", status_code=204)
def delete_user(user_id: int, db: Session = Depends(get_db)):
    """Delete a user without rankings."""
    crud.delete_user(db, user_id)
    return Response(status_code=204)


@router.get("/{user_id}/stats", response_model=UserStats)
def get_user_stats(user_id: int, stats: StatisticsService = Depends(get_statistics_service)):
    """Rating statistics for one user."""
    return stats.user_stats(user_id)
