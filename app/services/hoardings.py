import logging
import math
from typing import Optional

from sqlalchemy.orm import Session

from app.core.errors import Forbidden, NotFound, ValidationError
from app.db.models.hoarding import Hoarding
from app.db.models.user import User
from app.schemas.hoarding import NON_NULLABLE_FIELDS, HoardingCreate, HoardingUpdate
from app.services.availability import active_bookings_for_hoarding

logger = logging.getLogger(__name__)


def aspect_ratio(width: float, height: float) -> Optional[str]:
    """'16:9' style ratio when both sides are whole numbers."""
    if not width or not height:
        return None
    if float(width).is_integer() and float(height).is_integer():
        w, h = int(width), int(height)
        g = math.gcd(w, h)
        return f"{w // g}:{h // g}"
    return f"{round(width / height, 2)}:1"


def _page(total: int, limit: int) -> int:
    return math.ceil(total / limit) if total else 0


def get_hoarding_or_404(db: Session, hoarding_id: int) -> Hoarding:
    hoarding = db.query(Hoarding).filter(Hoarding.id == hoarding_id).first()
    if not hoarding:
        raise NotFound("Hoarding not found")
    return hoarding


def _owned_by(db: Session, actor: User, hoarding_id: int) -> Hoarding:
    hoarding = get_hoarding_or_404(db, hoarding_id)
    if hoarding.vendor_id != actor.id:
        raise Forbidden("You cannot modify another vendor's hoarding")
    return hoarding


def create_hoarding(db: Session, actor: User, payload: HoardingCreate) -> Hoarding:
    data = payload.model_dump(exclude={"pricing"})
    hoarding = Hoarding(
        vendor_id=actor.id,
        aspect_ratio=aspect_ratio(payload.width, payload.height),
        base_price=payload.pricing.base_price,
        price_per=payload.pricing.per,
        additional_costs=[c.model_dump() for c in payload.pricing.additional_costs],
        status="pending",
        **data,
    )
    db.add(hoarding)
    db.commit()
    db.refresh(hoarding)
    logger.info("Hoarding %s created by vendor=%s", hoarding.id, actor.id)
    return hoarding


def list_hoardings(
    db: Session,
    city: Optional[str] = None,
    media_type: Optional[str] = None,
    min_price: Optional[float] = None,
    max_price: Optional[float] = None,
    page: int = 1,
    limit: int = 10,
) -> dict:
    q = db.query(Hoarding).filter(Hoarding.status == "approved")
    if city:
        q = q.filter(Hoarding.city.ilike(f"%{city}%"))
    if media_type:
        q = q.filter(Hoarding.media_type == media_type)
    if min_price is not None:
        q = q.filter(Hoarding.base_price >= min_price)
    if max_price is not None:
        q = q.filter(Hoarding.base_price <= max_price)

    total = q.count()
    rows = q.order_by(Hoarding.id.desc()).offset((page - 1) * limit).limit(limit).all()
    return {
        "hoardings": rows,
        "current_page": page,
        "total_pages": _page(total, limit),
        "total_hoardings": total,
    }


def list_vendor_hoardings(db: Session, actor: User, page: int = 1, limit: int = 10) -> dict:
    q = db.query(Hoarding).filter(Hoarding.vendor_id == actor.id)
    total = q.count()
    rows = q.order_by(Hoarding.id.desc()).offset((page - 1) * limit).limit(limit).all()
    return {
        "hoardings": rows,
        "current_page": page,
        "total_pages": _page(total, limit),
        "total_hoardings": total,
    }


def update_hoarding(db: Session, actor: User, hoarding_id: int, changes: HoardingUpdate) -> Hoarding:
    hoarding = _owned_by(db, actor, hoarding_id)

    data = changes.model_dump(exclude_unset=True)
    pricing = data.pop("pricing", None)
    for field, value in data.items():
        if value is None and field in NON_NULLABLE_FIELDS:
            raise ValidationError(f"{field} cannot be empty")
        setattr(hoarding, field, value)

    if pricing is not None:
        hoarding.base_price = pricing["base_price"]
        hoarding.price_per = pricing["per"]
        hoarding.additional_costs = list(pricing.get("additional_costs") or [])

    if "width" in data or "height" in data:
        hoarding.aspect_ratio = aspect_ratio(hoarding.width, hoarding.height)

    db.commit()
    db.refresh(hoarding)
    logger.info("Hoarding %s updated by vendor=%s", hoarding.id, actor.id)
    return hoarding


def delete_hoarding(db: Session, actor: User, hoarding_id: int) -> None:
    hoarding = _owned_by(db, actor, hoarding_id)
    if active_bookings_for_hoarding(db, hoarding.id):
        raise ValidationError("Hoarding has pending or accepted bookings and cannot be deleted")
    db.delete(hoarding)
    db.commit()
    logger.info("Hoarding %s deleted by vendor=%s", hoarding_id, actor.id)


def set_hoarding_status(db: Session, actor: User, hoarding_id: int, status: str) -> Hoarding:
    hoarding = get_hoarding_or_404(db, hoarding_id)
    if hoarding.status != "pending":
        raise ValidationError(f"Hoarding is already {hoarding.status}")
    hoarding.status = status
    db.commit()
    db.refresh(hoarding)
    logger.info("Hoarding %s moderated to %s by admin=%s", hoarding.id, status, actor.id)
    return hoarding
