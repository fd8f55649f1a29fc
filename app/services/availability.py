"""
Availability and pricing engine.

Date ranges are calendar dates with inclusive boundaries: a booking for
Aug 1 - Aug 3 occupies three days and touches a booking starting Aug 3.
The overlap and price functions are pure; only find_conflicting_booking
reads the database.
"""
import math
from dataclasses import dataclass
from datetime import date
from typing import Iterable, Optional

from sqlalchemy.orm import Session

from app.core.errors import InvalidPricing
from app.db.models.booking import ACTIVE_BOOKING_STATUSES, Booking
from app.db.models.hoarding import PRICING_UNITS

DAYS_PER_UNIT = {"week": 7, "month": 30}


@dataclass(frozen=True)
class Quote:
    days: int
    unit_count: int
    base: float
    extras: float
    total: float


def ranges_overlap(start1: date, end1: date, start2: date, end2: date) -> bool:
    return start1 <= end2 and end1 >= start2


def count_days(start: date, end: date) -> int:
    """Number of billable days, both endpoints included."""
    return (end - start).days + 1


def unit_count(per: str, days: int) -> int:
    if per == "day":
        return days
    if per == "slot":
        return 1
    if per in DAYS_PER_UNIT:
        return math.ceil(days / DAYS_PER_UNIT[per])
    raise InvalidPricing(f"Unsupported pricing unit: {per}")


def included_costs_total(additional_costs: Optional[Iterable[dict]]) -> float:
    return float(sum(c.get("cost", 0) or 0 for c in (additional_costs or []) if c.get("is_included")))


def compute_price(
    base_price: float,
    per: str,
    additional_costs: Optional[Iterable[dict]],
    start: date,
    end: date,
) -> Quote:
    days = count_days(start, end)
    units = unit_count(per, days)
    base = float(base_price) * units
    extras = included_costs_total(additional_costs)
    return Quote(days=days, unit_count=units, base=base, extras=extras, total=base + extras)


def check_pricing(base_price: Optional[float], per: Optional[str]) -> None:
    """A hoarding can only be quoted with a positive base price and a known unit."""
    if base_price is None or per is None:
        raise InvalidPricing("Hoarding has no pricing configured")
    if base_price <= 0:
        raise InvalidPricing("Hoarding base price must be positive")
    if per not in PRICING_UNITS:
        raise InvalidPricing(f"Unsupported pricing unit: {per}")


def find_conflicting_booking(db: Session, hoarding_id: int, start: date, end: date) -> Optional[Booking]:
    """First pending/accepted booking on the hoarding whose range overlaps [start, end]."""
    return (
        db.query(Booking)
        .filter(
            Booking.hoarding_id == hoarding_id,
            Booking.status.in_(ACTIVE_BOOKING_STATUSES),
            Booking.start_date <= end,
            Booking.end_date >= start,
        )
        .order_by(Booking.start_date)
        .first()
    )


def active_bookings_for_hoarding(db: Session, hoarding_id: int) -> list[Booking]:
    return (
        db.query(Booking)
        .filter(Booking.hoarding_id == hoarding_id, Booking.status.in_(ACTIVE_BOOKING_STATUSES))
        .order_by(Booking.start_date)
        .all()
    )
