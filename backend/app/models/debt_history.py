"""Append-only audit trail of non-payment changes to a debt."""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, Numeric, String, Text
from sqlalchemy.orm import relationship

from backend.app.core.time import utc_now
from backend.app.db.base_class import Base

HISTORY_ACTIONS = ("increase", "payment", "status_change")


class DebtHistory(Base):
    __tablename__ = "debt_history"

    id = Column(Integer, primary_key=True, index=True)
    debt_id = Column(Integer, ForeignKey("debts.id", ondelete="CASCADE"), nullable=False, index=True)
    action_type = Column(String(20), nullable=False)
    amount = Column(Numeric(12, 2), nullable=True)
    previous_amount = Column(Numeric(12, 2), nullable=True)
    new_amount = Column(Numeric(12, 2), nullable=True)
    reason = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utc_now)

    debt = relationship("Debt", back_populates="history")
