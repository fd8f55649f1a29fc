from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.db.base import get_db
from app.db.models.user import User
from app.schemas.user import TokenResponse, UserCreate, UserLogin, UserResponse
from app.core.security import create_access_token, get_current_user
from app.services import users as user_service

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/register", response_model=TokenResponse, status_code=status.HTTP_201_CREATED)
def register(user_in: UserCreate, db: Session = Depends(get_db)):
    user = user_service.register_user(db, user_in)
    return {"access_token": create_access_token(user.id), "token_type": "bearer", "user": user}


@router.post("/login", response_model=TokenResponse)
def login(credentials: UserLogin, db: Session = Depends(get_db)):
    user = user_service.authenticate(db, credentials.email, credentials.password)
    return {"access_token": create_access_token(user.id), "token_type": "bearer", "user": user}


@router.get("/profile", response_model=UserResponse)
def profile(current_user: User = Depends(get_current_user)):
    return current_user
