import logging
import math

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.errors import Conflict, Forbidden, NotFound
from app.db.models.booking import Booking
from app.db.models.hoarding import Hoarding
from app.db.models.review import Review
from app.db.models.user import User
from app.schemas.review import ReviewCreate, ReviewUpdate

logger = logging.getLogger(__name__)


def recompute_hoarding_rating(db: Session, hoarding_id: int) -> None:
    """
    Recalculate the hoarding's average and count from its reviews.
    Flushes only; the caller commits together with the review write.
    """
    hoarding = db.query(Hoarding).filter(Hoarding.id == hoarding_id).first()
    if not hoarding:
        return
    avg, count = (
        db.query(func.avg(Review.rating), func.count(Review.id))
        .filter(Review.hoarding_id == hoarding_id)
        .one()
    )
    if not count:
        hoarding.average_rating = 0.0
        hoarding.review_count = 0
    else:
        hoarding.average_rating = round(float(avg), 1)
        hoarding.review_count = count
    db.flush()


def _owned_review(db: Session, actor: User, review_id: int) -> Review:
    review = db.query(Review).filter(Review.id == review_id).first()
    if not review:
        raise NotFound("Review not found")
    if review.buyer_id != actor.id:
        raise Forbidden("You can only modify your own reviews")
    return review


def create_review(db: Session, actor: User, payload: ReviewCreate) -> Review:
    if actor.role != "buyer":
        raise Forbidden("Only buyers can write reviews")

    booking = (
        db.query(Booking)
        .filter(
            Booking.id == payload.booking_id,
            Booking.buyer_id == actor.id,
            Booking.hoarding_id == payload.hoarding_id,
            Booking.status == "completed",
        )
        .first()
    )
    if not booking:
        raise NotFound("Booking not found or not completed")

    if db.query(Review).filter(Review.booking_id == booking.id).first():
        raise Conflict("You have already reviewed this booking")

    review = Review(
        hoarding_id=booking.hoarding_id,
        buyer_id=actor.id,
        booking_id=booking.id,
        rating=payload.rating,
        comment=payload.comment,
    )
    db.add(review)
    try:
        db.flush()
    except IntegrityError:
        db.rollback()
        raise Conflict("You have already reviewed this booking")

    recompute_hoarding_rating(db, review.hoarding_id)
    db.commit()
    db.refresh(review)
    logger.info("Review %s written for hoarding=%s by buyer=%s", review.id, review.hoarding_id, actor.id)
    return review


def list_reviews(db: Session, hoarding_id: int, page: int = 1, limit: int = 10) -> dict:
    q = db.query(Review).filter(Review.hoarding_id == hoarding_id)
    total = q.count()
    rows = (
        q.order_by(Review.created_at.desc(), Review.id.desc())
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )
    return {
        "reviews": rows,
        "current_page": page,
        "total_pages": math.ceil(total / limit) if total else 0,
        "total_reviews": total,
    }


def update_review(db: Session, actor: User, review_id: int, changes: ReviewUpdate) -> Review:
    review = _owned_review(db, actor, review_id)
    for field, value in changes.model_dump(exclude_unset=True).items():
        setattr(review, field, value)
    db.flush()
    recompute_hoarding_rating(db, review.hoarding_id)
    db.commit()
    db.refresh(review)
    return review


def delete_review(db: Session, actor: User, review_id: int) -> None:
    review = _owned_review(db, actor, review_id)
    hoarding_id = review.hoarding_id
    db.delete(review)
    db.flush()
    recompute_hoarding_rating(db, hoarding_id)
    db.commit()
    logger.info("Review %s deleted by buyer=%s", review_id, actor.id)
