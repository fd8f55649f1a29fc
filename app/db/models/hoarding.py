# app/db/models/hoarding.py

from sqlalchemy import Column, DateTime, Float, ForeignKey, Integer, JSON, String, Text, func
from sqlalchemy.orm import relationship
from app.db.base import Base

MEDIA_TYPES = (
    "Static Billboard",
    "Digital OOH (DOOH)",
    "Transit",
    "Street Furniture",
    "Wallscape",
    "Gantry",
    "Other",
)
PRICING_UNITS = ("day", "week", "month", "slot")
HOARDING_STATUSES = ("pending", "approved", "rejected")


class Hoarding(Base):
    __tablename__ = "hoardings"

    id = Column(Integer, primary_key=True, index=True)

    # Owner
    vendor_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    # Basic details
    name = Column(String, nullable=False)
    description = Column(Text, nullable=False)
    media_type = Column(String, nullable=False, default="Static Billboard")

    # Location
    address = Column(String, nullable=False)
    landmark = Column(String, nullable=True)
    area = Column(String, nullable=False)
    city = Column(String, nullable=False, index=True)
    state = Column(String, nullable=False)
    latitude = Column(Float, nullable=True)
    longitude = Column(Float, nullable=True)

    # Dimensions
    width = Column(Float, nullable=False)
    height = Column(Float, nullable=False)
    units = Column(String, nullable=False, default="ft")
    aspect_ratio = Column(String, nullable=True)

    # [{media_type, url, caption}]
    media = Column(JSON, nullable=False, default=list)

    # Pricing
    base_price = Column(Float, nullable=True)
    price_per = Column(String, nullable=False, default="month")
    additional_costs = Column(JSON, nullable=False, default=list)  # [{name, cost, is_included}]

    # Moderation
    status = Column(String, nullable=False, default="pending", index=True)

    # Derived from reviews, see app.services.reviews.recompute_hoarding_rating
    average_rating = Column(Float, nullable=False, default=0.0)
    review_count = Column(Integer, nullable=False, default=0)

    # Timestamps
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    # Relationships
    vendor = relationship("User", back_populates="hoardings")

    @property
    def pricing(self):
        return {
            "base_price": self.base_price,
            "per": self.price_per,
            "additional_costs": list(self.additional_costs or []),
        }
