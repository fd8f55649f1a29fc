# app/api/routes/hoardings.py

from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.db.base import get_db
from app.db.models.user import User
from app.schemas.hoarding import (
    HoardingCreate,
    HoardingListResponse,
    HoardingResponse,
    HoardingStatusUpdate,
    HoardingUpdate,
    MediaType,
)
from app.core.security import require_admin, require_role
from app.services import hoardings as hoarding_service

router = APIRouter(prefix="/hoardings", tags=["hoardings"])

require_vendor = require_role("vendor")


# Public search over approved listings
@router.get("", response_model=HoardingListResponse)
def search_hoardings(
    city: Optional[str] = None,
    media_type: Optional[MediaType] = None,
    min_price: Optional[float] = Query(None, ge=0),
    max_price: Optional[float] = Query(None, ge=0),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    db: Session = Depends(get_db),
):
    return hoarding_service.list_hoardings(
        db,
        city=city,
        media_type=media_type,
        min_price=min_price,
        max_price=max_price,
        page=page,
        limit=limit,
    )


# Vendor views their listings (declared before /{hoarding_id})
@router.get("/mine", response_model=HoardingListResponse)
def my_hoardings(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_vendor),
):
    return hoarding_service.list_vendor_hoardings(db, current_user, page=page, limit=limit)


@router.get("/{hoarding_id}", response_model=HoardingResponse)
def get_hoarding(hoarding_id: int, db: Session = Depends(get_db)):
    return hoarding_service.get_hoarding_or_404(db, hoarding_id)


@router.post("", response_model=HoardingResponse, status_code=status.HTTP_201_CREATED)
def create_hoarding(
    hoarding_in: HoardingCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_vendor),
):
    return hoarding_service.create_hoarding(db, current_user, hoarding_in)


@router.patch("/{hoarding_id}", response_model=HoardingResponse)
def update_hoarding(
    hoarding_id: int,
    changes: HoardingUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_vendor),
):
    return hoarding_service.update_hoarding(db, current_user, hoarding_id, changes)


@router.delete("/{hoarding_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_hoarding(
    hoarding_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_vendor),
):
    hoarding_service.delete_hoarding(db, current_user, hoarding_id)


# Admin moderation
@router.patch("/{hoarding_id}/status", response_model=HoardingResponse)
def moderate_hoarding(
    hoarding_id: int,
    body: HoardingStatusUpdate,
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
):
    return hoarding_service.set_hoarding_status(db, admin, hoarding_id, body.status)
