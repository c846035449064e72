"""Security utilities: password hashing and JWT token operations.

Tokens carry a subject, an expiration, a unique id (for revocation on
sign-out) and a purpose so a password reset token cannot be used as a
session.
"""

import uuid
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

import jwt
from passlib.context import CryptContext

from backend.app.core.settings import get_settings

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

ACCESS_PURPOSE = "access"
PASSWORD_RESET_PURPOSE = "password_reset"


def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def create_access_token(
    user_id: int,
    expires_minutes: Optional[int] = None,
    purpose: str = ACCESS_PURPOSE,
) -> str:
    settings = get_settings()
    expire_delta = timedelta(
        minutes=expires_minutes if expires_minutes is not None else settings.ACCESS_TOKEN_EXPIRE_MINUTES
    )
    expire = datetime.now(timezone.utc) + expire_delta
    payload = {"sub": str(user_id), "exp": expire, "jti": uuid.uuid4().hex, "purpose": purpose}
    return jwt.encode(payload, settings.SECRET_KEY, algorithm="HS256")


def create_password_reset_token(user_id: int) -> str:
    settings = get_settings()
    return create_access_token(
        user_id=user_id,
        expires_minutes=settings.password_reset_expire_minutes,
        purpose=PASSWORD_RESET_PURPOSE,
    )


def decode_access_token(token: str, purpose: Optional[str] = None) -> Dict[str, Any]:
    settings = get_settings()
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=["HS256"])
    except jwt.ExpiredSignatureError as exc:
        raise ValueError("Expired token") from exc
    except jwt.InvalidTokenError as exc:
        raise ValueError("Invalid token") from exc
    if purpose is not None and payload.get("purpose", ACCESS_PURPOSE) != purpose:
        raise ValueError("Invalid token purpose")
    return payload
