"""Booking lifecycle guards."""

TRANSITION_TARGETS = ("accepted", "rejected", "completed", "cancelled")


def _is_buyer_of(actor, booking) -> bool:
    return actor.role == "buyer" and booking.buyer_id == actor.id


def _is_vendor_of(actor, booking) -> bool:
    return actor.role == "vendor" and booking.vendor_id == actor.id


def can_transition(actor, booking, target_status: str) -> bool:
    """
    Whether `actor` may move `booking` to `target_status`.

    buyer  -> cancelled  only their own booking, only while pending
    vendor -> accepted   their booking, only while pending
    vendor -> rejected   their booking
    vendor -> completed  their booking, once a proof image is attached
    vendor -> cancelled  their booking
    admin has no status transitions (verification only).
    """
    if _is_buyer_of(actor, booking):
        return target_status == "cancelled" and booking.status == "pending"

    if _is_vendor_of(actor, booking):
        if target_status == "accepted":
            return booking.status == "pending"
        if target_status == "completed":
            return len(booking.proof_images) > 0
        return target_status in ("rejected", "cancelled")

    return False


def can_view(actor, booking) -> bool:
    if actor.role == "admin":
        return True
    return booking.buyer_id == actor.id or booking.vendor_id == actor.id


def can_manage_installation(actor, booking) -> bool:
    return _is_vendor_of(actor, booking)
