from sqlalchemy import CheckConstraint, Column, Date, DateTime, Float, ForeignKey, Index, Integer, JSON, String, Text
from sqlalchemy.orm import relationship
from datetime import datetime, timezone
from app.db.base import Base

BOOKING_STATUSES = ("pending", "accepted", "rejected", "completed", "cancelled")
# statuses that occupy the hoarding's calendar
ACTIVE_BOOKING_STATUSES = ("pending", "accepted")

INSTALLATION_STATUSES = ("Pending", "Scheduled", "Completed", "Cancelled")
VERIFICATION_STATUSES = ("Pending", "Verified", "Rejected")


def utcnow():
    return datetime.now(timezone.utc)


class Booking(Base):
    __tablename__ = "bookings"
    __table_args__ = (
        CheckConstraint("end_date > start_date", name="ck_bookings_end_after_start"),
        Index("ix_bookings_hoarding_range", "hoarding_id", "start_date", "end_date"),
    )

    id = Column(Integer, primary_key=True, index=True)

    hoarding_id = Column(Integer, ForeignKey("hoardings.id", ondelete="CASCADE"), nullable=False)
    buyer_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    # copied from the hoarding at creation
    vendor_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)
    notes = Column(Text, nullable=True)

    status = Column(String, nullable=False, default="pending", index=True)

    # pricing snapshot, never recomputed after creation
    base_price = Column(Float, nullable=False)
    price_per = Column(String, nullable=False)
    additional_costs = Column(JSON, nullable=False, default=list)
    total_price = Column(Float, nullable=False)

    # verification (admin)
    verification_status = Column(String, nullable=False, default="Pending")
    verified_by = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    verified_at = Column(DateTime(timezone=True), nullable=True)
    verification_notes = Column(Text, nullable=True)

    # proof of display (vendor)
    proof_notes = Column(Text, nullable=True)

    # installation (vendor)
    installation_scheduled_date = Column(DateTime(timezone=True), nullable=True)
    installation_completed_date = Column(DateTime(timezone=True), nullable=True)
    installation_status = Column(String, nullable=False, default="Pending")
    installation_notes = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    # relationships
    hoarding = relationship("Hoarding", foreign_keys=[hoarding_id])
    buyer = relationship("User", foreign_keys=[buyer_id])
    vendor = relationship("User", foreign_keys=[vendor_id])
    proof_images = relationship(
        "BookingProofImage",
        back_populates="booking",
        order_by="BookingProofImage.id",
        cascade="all, delete-orphan",
        lazy="selectin",
    )

    @property
    def pricing(self):
        return {
            "base_price": self.base_price,
            "per": self.price_per,
            "additional_costs": list(self.additional_costs or []),
            "total_price": self.total_price,
        }

    @property
    def installation(self):
        return {
            "scheduled_date": self.installation_scheduled_date,
            "completed_date": self.installation_completed_date,
            "status": self.installation_status,
            "notes": self.installation_notes,
        }

    @property
    def verification(self):
        return {
            "status": self.verification_status,
            "verified_by": self.verified_by,
            "verified_at": self.verified_at,
            "notes": self.verification_notes,
        }

    @property
    def proof(self):
        return {
            "images": [
                {"url": img.url, "key": img.key, "uploaded_at": img.uploaded_at}
                for img in self.proof_images
            ],
            "notes": self.proof_notes,
        }


class BookingProofImage(Base):
    __tablename__ = "booking_proof_images"

    id = Column(Integer, primary_key=True, index=True)
    booking_id = Column(Integer, ForeignKey("bookings.id", ondelete="CASCADE"), nullable=False, index=True)
    url = Column(String, nullable=False)
    key = Column(String, nullable=False)
    uploaded_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    booking = relationship("Booking", back_populates="proof_images")
