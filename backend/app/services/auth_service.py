"""Sign-up, sign-in, sign-out and password management."""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from fastapi import status
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from backend.app.core.errors import AuthError, PersistenceError, ValidationError
from backend.app.core.security import (
    PASSWORD_RESET_PURPOSE,
    create_access_token,
    create_password_reset_token,
    decode_access_token,
    get_password_hash,
    verify_password,
)
from backend.app.core.time import utc_now
from backend.app.models.revoked_token import RevokedToken
from backend.app.models.user import User

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6


def _commit(db: Session) -> None:
    try:
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error("Database error: %s", exc)
        raise PersistenceError(str(exc)) from exc


def _find_user_by_email(db: Session, email: str):
    return db.query(User).filter(User.email == email).first()


def _check_password_strength(password: str) -> None:
    if len(password or "") < MIN_PASSWORD_LENGTH:
        raise ValidationError(
            f"Password must be at least {MIN_PASSWORD_LENGTH} characters",
            field="password",
            bound="minimum",
        )


def sign_up(db: Session, email: str, password: str) -> User:
    existing = _find_user_by_email(db, email)
    if existing:
        raise AuthError("Email already registered", http_status=status.HTTP_400_BAD_REQUEST)
    _check_password_strength(password)
    user = User(email=email, hashed_password=get_password_hash(password))
    db.add(user)
    try:
        db.commit()
    except IntegrityError as exc:
        # Lost a race with a concurrent sign-up for the same email
        db.rollback()
        raise AuthError("Email already registered", http_status=status.HTTP_400_BAD_REQUEST) from exc
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error("Database error: %s", exc)
        raise PersistenceError(str(exc)) from exc
    db.refresh(user)
    logger.info("Registered user %s", user.id)
    return user


def sign_in(db: Session, email: str, password: str) -> str:
    user = _find_user_by_email(db, email)
    if not user or not user.hashed_password:
        raise AuthError("Invalid credentials", http_status=status.HTTP_400_BAD_REQUEST)
    if not user.is_active:
        raise AuthError("User is inactive", http_status=status.HTTP_400_BAD_REQUEST)
    if not verify_password(password, user.hashed_password):
        logger.info("Failed sign-in for user %s", user.id)
        raise AuthError("Invalid credentials", http_status=status.HTTP_400_BAD_REQUEST)

    user.last_login = utc_now()
    _commit(db)
    logger.info("User %s signed in", user.id)
    return create_access_token(user_id=user.id)


def sign_out(db: Session, user: User, payload: Dict[str, Any]) -> None:
    jti = payload.get("jti")
    if not jti:
        return
    expires_at = None
    if payload.get("exp") is not None:
        expires_at = datetime.fromtimestamp(int(payload["exp"]), tz=timezone.utc)
    db.add(RevokedToken(jti=jti, user_id=user.id, expires_at=expires_at))
    _commit(db)
    logger.info("User %s signed out", user.id)


def request_password_reset(db: Session, email: str) -> Optional[str]:
    """Issue a reset token for a known, active account; None otherwise.

    Email delivery is not implemented here; the issue is logged without the token.
    """
    user = _find_user_by_email(db, email)
    if not user or not user.is_active:
        logger.info("Password reset requested for unknown or inactive account")
        return None
    token = create_password_reset_token(user.id)
    logger.info("Password reset token issued for user %s", user.id)
    return token


def reset_password(db: Session, token: str, new_password: str) -> User:
    try:
        payload = decode_access_token(token, purpose=PASSWORD_RESET_PURPOSE)
    except ValueError:
        raise AuthError("Invalid or expired reset token", http_status=status.HTTP_400_BAD_REQUEST)

    jti = payload.get("jti")
    if jti and db.query(RevokedToken).filter(RevokedToken.jti == jti).first():
        raise AuthError("Invalid or expired reset token", http_status=status.HTTP_400_BAD_REQUEST)

    user = db.query(User).filter(User.id == int(payload["sub"])).first()
    if not user or not user.is_active:
        raise AuthError("Invalid or expired reset token", http_status=status.HTTP_400_BAD_REQUEST)

    _check_password_strength(new_password)
    user.hashed_password = get_password_hash(new_password)
    if jti:
        # Reset links are single use
        expires_at = datetime.fromtimestamp(int(payload["exp"]), tz=timezone.utc)
        db.add(RevokedToken(jti=jti, user_id=user.id, expires_at=expires_at))
    _commit(db)
    db.refresh(user)
    logger.info("Password reset completed for user %s", user.id)
    return user


def update_password(db: Session, user: User, new_password: str, confirm_password: Optional[str] = None) -> User:
    if confirm_password is not None and new_password != confirm_password:
        raise ValidationError("Passwords do not match", field="confirm_password")
    _check_password_strength(new_password)
    user.hashed_password = get_password_hash(new_password)
    _commit(db)
    db.refresh(user)
    logger.info("Password updated for user %s", user.id)
    return user
