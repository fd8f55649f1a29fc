from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile, status
from sqlalchemy.orm import Session

from app.db.base import get_db
from app.db.models.user import User
from app.schemas.booking import (
    BookingCreate,
    BookingListResponse,
    BookingResponse,
    BookingStatusUpdate,
    CalendarResponse,
    InstallationUpdate,
    VerificationUpdate,
)
from app.core.security import get_current_user, require_admin, require_role
from app.services import bookings as booking_service
from app.services.storage import get_storage

router = APIRouter(prefix="/bookings", tags=["bookings"])


# Buyer requests a booking
@router.post("", response_model=BookingResponse, status_code=status.HTTP_201_CREATED)
def create_booking(
    booking_in: BookingCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_role("buyer")),
):
    return booking_service.create_booking(db, current_user, booking_in)


# Own bookings: buyer's requests, vendor's incoming, admin sees all
@router.get("/me", response_model=BookingListResponse)
def my_bookings(
    status: Optional[str] = None,
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return booking_service.list_bookings_for(db, current_user, status=status, page=page, limit=limit)


# Public availability calendar
@router.get("/hoarding/{hoarding_id}", response_model=CalendarResponse)
def hoarding_calendar(hoarding_id: int, db: Session = Depends(get_db)):
    return {"bookings": booking_service.calendar_for_hoarding(db, hoarding_id)}


@router.get("/{booking_id}", response_model=BookingResponse)
def get_booking(
    booking_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return booking_service.get_booking_for(db, current_user, booking_id)


# accept / reject / complete / cancel
@router.patch("/{booking_id}/status", response_model=BookingResponse)
def update_booking_status(
    booking_id: int,
    body: BookingStatusUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return booking_service.transition_booking(db, current_user, booking_id, body.status)


# Vendor uploads proof of display
@router.patch("/{booking_id}/proof", response_model=BookingResponse)
def upload_proof(
    booking_id: int,
    proof_images: Optional[List[UploadFile]] = File(None),
    notes: Optional[str] = Form(None),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_role("vendor")),
    storage=Depends(get_storage),
):
    return booking_service.attach_proof(db, current_user, booking_id, proof_images, storage, notes=notes)


@router.patch("/{booking_id}/installation", response_model=BookingResponse)
def update_installation(
    booking_id: int,
    changes: InstallationUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_role("vendor")),
):
    return booking_service.update_installation(db, current_user, booking_id, changes)


@router.patch("/{booking_id}/verification", response_model=BookingResponse)
def update_verification(
    booking_id: int,
    body: VerificationUpdate,
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
):
    return booking_service.update_verification(db, admin, booking_id, body)
