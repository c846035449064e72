"""Access tokens invalidated by sign-out."""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String

from backend.app.core.time import utc_now
from backend.app.db.base_class import Base


class RevokedToken(Base):
    __tablename__ = "revoked_tokens"

    id = Column(Integer, primary_key=True, index=True)
    jti = Column(String(64), unique=True, index=True, nullable=False)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    expires_at = Column(DateTime(timezone=True), nullable=True)
    revoked_at = Column(DateTime(timezone=True), nullable=False, default=utc_now)
