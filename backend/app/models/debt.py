"""Debt model: a receivable owed by a customer to the signed-in user."""

from decimal import Decimal

from sqlalchemy import Column, Date, DateTime, ForeignKey, Integer, Numeric, String, Text
from sqlalchemy.orm import relationship

from backend.app.core.time import utc_now
from backend.app.db.base_class import Base
from backend.app.services.reconciliation import compute_remaining, compute_total_paid

DEBT_STATUSES = ("pending", "partial", "paid", "overdue")


class Debt(Base):
    __tablename__ = "debts"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    customer_name = Column(String(255), nullable=False)
    phone = Column(String(50), nullable=False)
    amount = Column(Numeric(12, 2), nullable=False, default=Decimal("0.00"))
    description = Column(Text, nullable=True)
    due_date = Column(Date, nullable=True)
    status = Column(String(20), nullable=False, default="pending")
    version = Column(Integer, nullable=False)

    created_at = Column(DateTime(timezone=True), nullable=False, default=utc_now)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utc_now, onupdate=utc_now)

    owner = relationship("User", back_populates="debts")
    payments = relationship(
        "Payment",
        back_populates="debt",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="Payment.id",
    )
    history = relationship(
        "DebtHistory",
        back_populates="debt",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="DebtHistory.id",
    )

    # UPDATEs carry "WHERE version = :expected" so concurrent writers on the same debt conflict
    __mapper_args__ = {"version_id_col": version}

    @property
    def total_paid(self) -> Decimal:
        return compute_total_paid(p.amount for p in self.payments)

    @property
    def remaining_amount(self) -> Decimal:
        return compute_remaining(self.amount, [p.amount for p in self.payments])
