"""Request and response payloads for the auth endpoints."""

from typing import Optional

from pydantic import BaseModel, EmailStr


class LoginRequest(BaseModel):
    """Payload for login attempts."""

    email: EmailStr
    password: str


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"


class PasswordResetRequest(BaseModel):
    email: EmailStr


class PasswordResetResponse(BaseModel):
    message: str
    # Only populated in development, where no mailer is configured
    reset_token: Optional[str] = None


class PasswordResetConfirm(BaseModel):
    token: str
    new_password: str


class PasswordUpdate(BaseModel):
    new_password: str
    confirm_password: Optional[str] = None
