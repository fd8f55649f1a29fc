from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.db.base import get_db
from app.db.models.user import User
from app.schemas.user import AdminUserUpdate, ProfileUpdate, UserListResponse, UserResponse
from app.core.security import get_current_user, require_admin
from app.services import users as user_service

router = APIRouter(prefix="/users", tags=["users"])


# declared before /{user_id}
@router.patch("/profile", response_model=UserResponse)
def update_profile(
    changes: ProfileUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return user_service.update_profile(db, current_user, changes)


# Admin: all users, optional name/email search
@router.get("", response_model=UserListResponse)
def list_users(
    search: Optional[str] = None,
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
):
    return user_service.list_users(db, search=search, page=page, limit=limit)


@router.patch("/{user_id}", response_model=UserResponse)
def update_user(
    user_id: int,
    changes: AdminUserUpdate,
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
):
    return user_service.update_user(db, admin, user_id, changes)


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_user(
    user_id: int,
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
):
    user_service.delete_user(db, admin, user_id)
