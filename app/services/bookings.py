"""
Booking creation and lifecycle.

Every function takes the authenticated principal (`actor`) explicitly; guards
live in app.services.booking_policy.
"""
import logging
import math
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.errors import Conflict, Forbidden, NotFound, ValidationError
from app.db.models.booking import Booking, BookingProofImage
from app.db.models.hoarding import Hoarding
from app.db.models.user import User
from app.schemas.booking import BookingCreate, InstallationUpdate, VerificationUpdate
from app.services.availability import (
    active_bookings_for_hoarding,
    check_pricing,
    compute_price,
    find_conflicting_booking,
)
from app.services.booking_policy import (
    TRANSITION_TARGETS,
    can_manage_installation,
    can_transition,
    can_view,
)
from app.services.storage import ALLOWED_IMAGE_TYPES, build_key

logger = logging.getLogger(__name__)


def _now():
    return datetime.now(timezone.utc)


def get_booking_or_404(db: Session, booking_id: int) -> Booking:
    booking = db.query(Booking).filter(Booking.id == booking_id).first()
    if not booking:
        raise NotFound("Booking not found")
    return booking


# --------------------------------------------------
# Creation
# --------------------------------------------------
def create_booking(db: Session, actor: User, payload: BookingCreate) -> Booking:
    if actor.role != "buyer":
        raise Forbidden("Only buyers can create bookings")

    if payload.end_date <= payload.start_date:
        raise ValidationError("End date must be after start date")

    # row lock serialises concurrent creates for the same hoarding (no-op on SQLite)
    hoarding = (
        db.query(Hoarding)
        .filter(Hoarding.id == payload.hoarding_id, Hoarding.status == "approved")
        .with_for_update()
        .first()
    )
    if not hoarding:
        raise NotFound("Hoarding not found or not approved")

    check_pricing(hoarding.base_price, hoarding.price_per)

    clash = find_conflicting_booking(db, hoarding.id, payload.start_date, payload.end_date)
    if clash:
        logger.info(
            "Rejected booking on hoarding=%s %s..%s: overlaps booking=%s",
            hoarding.id, payload.start_date, payload.end_date, clash.id,
        )
        db.rollback()
        raise Conflict("Hoarding is already booked for these dates")

    quote = compute_price(
        hoarding.base_price,
        hoarding.price_per,
        hoarding.additional_costs,
        payload.start_date,
        payload.end_date,
    )

    booking = Booking(
        hoarding_id=hoarding.id,
        buyer_id=actor.id,
        vendor_id=hoarding.vendor_id,
        start_date=payload.start_date,
        end_date=payload.end_date,
        notes=payload.notes,
        status="pending",
        base_price=hoarding.base_price,
        price_per=hoarding.price_per,
        additional_costs=[dict(c) for c in (hoarding.additional_costs or [])],
        total_price=quote.total,
    )
    db.add(booking)
    db.commit()
    db.refresh(booking)

    logger.info(
        "Booking %s created: hoarding=%s buyer=%s %s..%s total=%.2f",
        booking.id, hoarding.id, actor.id, booking.start_date, booking.end_date, booking.total_price,
    )
    return booking


# --------------------------------------------------
# Reading
# --------------------------------------------------
def list_bookings_for(
    db: Session,
    actor: User,
    status: Optional[str] = None,
    page: int = 1,
    limit: int = 10,
) -> dict:
    q = db.query(Booking)
    if actor.role == "buyer":
        q = q.filter(Booking.buyer_id == actor.id)
    elif actor.role == "vendor":
        q = q.filter(Booking.vendor_id == actor.id)
    if status:
        q = q.filter(Booking.status == status)

    total = q.count()
    rows = (
        q.order_by(Booking.created_at.desc(), Booking.id.desc())
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )
    return {
        "bookings": rows,
        "current_page": page,
        "total_pages": math.ceil(total / limit) if total else 0,
        "total_bookings": total,
    }


def get_booking_for(db: Session, actor: User, booking_id: int) -> Booking:
    booking = get_booking_or_404(db, booking_id)
    if not can_view(actor, booking):
        raise Forbidden("Not authorized to view this booking")
    return booking


def calendar_for_hoarding(db: Session, hoarding_id: int) -> list[Booking]:
    return active_bookings_for_hoarding(db, hoarding_id)


# --------------------------------------------------
# Status transitions
# --------------------------------------------------
def transition_booking(db: Session, actor: User, booking_id: int, target_status: str) -> Booking:
    if target_status not in TRANSITION_TARGETS:
        raise ValidationError("Invalid status")

    booking = get_booking_or_404(db, booking_id)
    if not can_transition(actor, booking, target_status):
        logger.info(
            "Denied transition booking=%s %s -> %s by user=%s (%s)",
            booking.id, booking.status, target_status, actor.id, actor.role,
        )
        if target_status == "completed" and can_manage_installation(actor, booking):
            raise Forbidden("Proof image is required to complete booking")
        raise Forbidden("Not authorized to move this booking to " + target_status)

    previous = booking.status
    booking.status = target_status
    db.commit()
    db.refresh(booking)
    logger.info("Booking %s: %s -> %s by user=%s", booking.id, previous, target_status, actor.id)
    return booking


# --------------------------------------------------
# Installation sub-state
# --------------------------------------------------
def update_installation(db: Session, actor: User, booking_id: int, changes: InstallationUpdate) -> Booking:
    booking = get_booking_or_404(db, booking_id)
    if not can_manage_installation(actor, booking):
        raise Forbidden("Not authorized to update installation for this booking")

    data = changes.model_dump(exclude_unset=True)
    if "scheduled_date" in data:
        booking.installation_scheduled_date = data["scheduled_date"]
    if "notes" in data:
        booking.installation_notes = data["notes"]
    if data.get("status"):
        booking.installation_status = data["status"]
        # stamped once, never overwritten
        if data["status"] == "Completed" and booking.installation_completed_date is None:
            booking.installation_completed_date = _now()

    db.commit()
    db.refresh(booking)
    logger.info("Booking %s installation -> %s", booking.id, booking.installation_status)
    return booking


# --------------------------------------------------
# Verification sub-state (admin; role enforced at the route)
# --------------------------------------------------
def update_verification(db: Session, actor: User, booking_id: int, changes: VerificationUpdate) -> Booking:
    booking = get_booking_or_404(db, booking_id)
    data = changes.model_dump(exclude_unset=True)
    booking.verification_status = data["status"]
    # omitted notes keep their previous value
    if "notes" in data:
        booking.verification_notes = data["notes"]
    booking.verified_by = actor.id
    booking.verified_at = _now()
    db.commit()
    db.refresh(booking)
    logger.info("Booking %s verification -> %s by admin=%s", booking.id, booking.verification_status, actor.id)
    return booking


# --------------------------------------------------
# Proof of display
# --------------------------------------------------
def attach_proof(db: Session, actor: User, booking_id: int, uploads, storage, notes: Optional[str] = None) -> Booking:
    """
    Store each upload and append it to the booking's proof list.
    `uploads` are UploadFile-like objects (filename, content_type, file).
    The booking status is left alone; completion is a separate transition.
    """
    booking = get_booking_or_404(db, booking_id)
    if not can_manage_installation(actor, booking):
        raise Forbidden("Not authorized to upload proof for this booking")

    uploads = [u for u in (uploads or []) if u is not None]
    if not uploads:
        raise ValidationError("Proof image is required")
    if len(uploads) > settings.max_proof_images:
        raise ValidationError(f"Too many files. Maximum is {settings.max_proof_images} files per upload.")
    for u in uploads:
        if u.content_type not in ALLOWED_IMAGE_TYPES:
            raise ValidationError(f"Invalid file type: {u.content_type}. Please upload only images.")

    stored = []
    try:
        for u in uploads:
            key = build_key(f"proofs/booking-{booking.id}", u.filename, u.content_type)
            stored.append(storage.upload(u.file, key, u.content_type))

        for obj in stored:
            booking.proof_images.append(BookingProofImage(url=obj.url, key=obj.key, uploaded_at=_now()))
        if notes is not None:
            booking.proof_notes = notes
        db.commit()
    except Exception:
        # nothing is attached unless every file landed; drop the ones that did
        db.rollback()
        for obj in stored:
            storage.delete(obj.key)
        logger.warning("Booking %s: proof upload failed, removed %d stored file(s)", booking_id, len(stored))
        raise
    db.refresh(booking)
    logger.info("Booking %s: %d proof image(s) attached", booking.id, len(stored))
    return booking
