# app/db/models/user.py
from sqlalchemy import Column, DateTime, Integer, String, func
from sqlalchemy.orm import relationship
from app.db.base import Base

ROLES = ("buyer", "vendor", "admin")


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String, unique=True, index=True, nullable=False)
    first_name = Column(String, nullable=False)
    last_name = Column(String, nullable=False)
    phone_number = Column(String, nullable=True)
    password_hash = Column(String, nullable=False)

    # fixed at registration
    role = Column(String, nullable=False, default="buyer", server_default="buyer")

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    # vendor side
    hoardings = relationship(
        "Hoarding",
        back_populates="vendor",
        lazy="selectin",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
