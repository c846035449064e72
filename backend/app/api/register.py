"""Handles user registration."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from backend.app.db.session import get_db
from backend.app.schemas.user import UserCreate, UserRead
from backend.app.services.auth_service import sign_up

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/register", response_model=UserRead)
def register_user(user_in: UserCreate, db: Session = Depends(get_db)):
    return sign_up(db, email=user_in.email, password=user_in.password)
