"""Session and password management endpoints."""

from typing import Any, Dict

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from backend.app.core.settings import get_settings
from backend.app.db.session import get_db
from backend.app.dependencies.auth import get_current_user, get_token_payload
from backend.app.models.user import User
from backend.app.schemas.auth import (
    PasswordResetConfirm,
    PasswordResetRequest,
    PasswordResetResponse,
    PasswordUpdate,
)
from backend.app.services import auth_service

router = APIRouter(prefix="/auth", tags=["auth"])

RESET_MESSAGE = "If the account exists, a reset link has been sent"


@router.post("/logout")
def logout(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    payload: Dict[str, Any] = Depends(get_token_payload),
):
    auth_service.sign_out(db, current_user, payload)
    return {"status": "signed_out"}


@router.post("/password-reset", response_model=PasswordResetResponse, status_code=status.HTTP_202_ACCEPTED)
def request_password_reset(request: PasswordResetRequest, db: Session = Depends(get_db)):
    token = auth_service.request_password_reset(db, request.email)
    response = {"message": RESET_MESSAGE}
    if token and get_settings().is_development:
        response["reset_token"] = token
    return response


@router.post("/password-reset/confirm")
def confirm_password_reset(payload: PasswordResetConfirm, db: Session = Depends(get_db)):
    auth_service.reset_password(db, payload.token, payload.new_password)
    return {"status": "password_updated"}


@router.post("/update-password")
def update_password(
    payload: PasswordUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    auth_service.update_password(db, current_user, payload.new_password, payload.confirm_password)
    return {"status": "password_updated"}
