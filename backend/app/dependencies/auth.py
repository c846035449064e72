"""Authentication dependencies for retrieving the current user."""

from typing import Any, Dict

from fastapi import Depends, Header
from sqlalchemy.orm import Session

from backend.app.core.errors import AuthError
from backend.app.core.security import ACCESS_PURPOSE, decode_access_token
from backend.app.db.session import get_db
from backend.app.models.revoked_token import RevokedToken
from backend.app.models.user import User


def get_token_payload(
    db: Session = Depends(get_db),
    authorization: str | None = Header(default=None),
) -> Dict[str, Any]:
    # Expect Authorization: Bearer <token>
    if not authorization or not authorization.startswith("Bearer "):
        raise AuthError("Not authenticated")
    token = authorization.split(" ", 1)[1]
    try:
        payload = decode_access_token(token, purpose=ACCESS_PURPOSE)
    except ValueError:
        raise AuthError("Not authenticated")

    jti = payload.get("jti")
    if jti and db.query(RevokedToken).filter(RevokedToken.jti == jti).first():
        raise AuthError("Session has been signed out")
    return payload


def get_current_user(
    db: Session = Depends(get_db),
    payload: Dict[str, Any] = Depends(get_token_payload),
) -> User:
    try:
        user_id_int = int(payload.get("sub"))
    except (TypeError, ValueError):
        raise AuthError("Not authenticated")

    user = db.query(User).filter(User.id == user_id_int).first()
    if not user or not user.is_active:
        raise AuthError("Not authenticated")
    return user
