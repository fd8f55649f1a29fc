import logging
import math
from typing import Optional

from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.errors import AuthenticationError, NotFound, ValidationError
from app.core.security import hash_password, verify_password
from app.db.models.booking import Booking
from app.db.models.user import User
from app.schemas.user import AdminUserUpdate, ProfileUpdate, UserCreate

logger = logging.getLogger(__name__)


def register_user(db: Session, payload: UserCreate) -> User:
    email = payload.email.lower()
    if db.query(User).filter(User.email == email).first():
        raise ValidationError("Email already registered")

    user = User(
        email=email,
        first_name=payload.first_name.strip(),
        last_name=payload.last_name.strip(),
        phone_number=payload.phone_number,
        password_hash=hash_password(payload.password),
        role=payload.role,
    )
    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ValidationError("Email already registered")
    db.refresh(user)
    logger.info("Registered user %s as %s", user.id, user.role)
    return user


def authenticate(db: Session, email: str, password: str) -> User:
    user = db.query(User).filter(User.email == email.lower()).first()
    if not user or not verify_password(password, user.password_hash):
        raise AuthenticationError("Invalid credentials")
    return user


def update_profile(db: Session, actor: User, changes: ProfileUpdate) -> User:
    for field, value in changes.model_dump(exclude_unset=True).items():
        if value is None:
            continue
        setattr(actor, field, value.strip() if field != "phone_number" else value)
    db.commit()
    db.refresh(actor)
    return actor


# --------------------------------------------------
# Admin user management
# --------------------------------------------------
def list_users(db: Session, search: Optional[str] = None, page: int = 1, limit: int = 10) -> dict:
    q = db.query(User)
    if search:
        pattern = f"%{search}%"
        q = q.filter(or_(User.first_name.ilike(pattern), User.last_name.ilike(pattern), User.email.ilike(pattern)))
    total = q.count()
    rows = q.order_by(User.created_at.desc(), User.id.desc()).offset((page - 1) * limit).limit(limit).all()
    return {
        "users": rows,
        "current_page": page,
        "total_pages": math.ceil(total / limit) if total else 0,
        "total_users": total,
    }


def get_user_or_404(db: Session, user_id: int) -> User:
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise NotFound("User not found")
    return user


def _is_last_admin(db: Session, user: User) -> bool:
    return user.role == "admin" and db.query(User).filter(User.role == "admin").count() <= 1


def update_user(db: Session, actor: User, user_id: int, changes: AdminUserUpdate) -> User:
    user = get_user_or_404(db, user_id)
    data = {k: v for k, v in changes.model_dump(exclude_unset=True).items() if v is not None}

    if "role" in data and data["role"] != user.role and _is_last_admin(db, user):
        raise ValidationError("Cannot change role of the last admin")

    if "email" in data:
        data["email"] = data["email"].lower()
        taken = db.query(User).filter(User.email == data["email"], User.id != user.id).first()
        if taken:
            raise ValidationError("Email already registered")

    for field, value in data.items():
        setattr(user, field, value.strip() if field in ("first_name", "last_name") else value)
    db.commit()
    db.refresh(user)
    logger.info("User %s updated by admin=%s (%s)", user.id, actor.id, ", ".join(sorted(data)) or "no changes")
    return user


def delete_user(db: Session, actor: User, user_id: int) -> None:
    user = get_user_or_404(db, user_id)
    if _is_last_admin(db, user):
        raise ValidationError("Cannot delete the last admin")

    # bookings are never deleted in normal flow, so their parties stay
    has_bookings = (
        db.query(Booking.id)
        .filter(or_(Booking.buyer_id == user.id, Booking.vendor_id == user.id))
        .first()
    )
    if has_bookings:
        raise ValidationError("User has bookings and cannot be deleted")

    db.delete(user)
    db.commit()
    logger.info("User %s deleted by admin=%s", user_id, actor.id)
