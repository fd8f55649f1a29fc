# app/api/routes/review.py
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.db.base import get_db
from app.db.models.user import User
from app.schemas.review import ReviewCreate, ReviewListResponse, ReviewResponse, ReviewUpdate
from app.core.security import get_current_user, require_role
from app.services import reviews as review_service

router = APIRouter(prefix="/reviews", tags=["reviews"])


# Buyer reviews a completed booking
@router.post("", response_model=ReviewResponse, status_code=status.HTTP_201_CREATED)
def create_review(
    review_in: ReviewCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_role("buyer")),
):
    return review_service.create_review(db, current_user, review_in)


# Reviews for a hoarding (public)
@router.get("/hoarding/{hoarding_id}", response_model=ReviewListResponse)
def list_hoarding_reviews(
    hoarding_id: int,
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    db: Session = Depends(get_db),
):
    return review_service.list_reviews(db, hoarding_id, page=page, limit=limit)


@router.patch("/{review_id}", response_model=ReviewResponse)
def update_review(
    review_id: int,
    changes: ReviewUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return review_service.update_review(db, current_user, review_id, changes)


@router.delete("/{review_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_review(
    review_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    review_service.delete_review(db, current_user, review_id)
