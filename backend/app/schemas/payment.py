"""Payment schemas."""

from datetime import date, datetime
from decimal import Decimal
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

PaymentMethod = Literal["cash", "bank_transfer", "mobile_money", "check", "other"]


class PaymentBase(BaseModel):
    amount: Decimal = Field(max_digits=12, decimal_places=2)
    payment_method: PaymentMethod = "cash"
    notes: Optional[str] = None
    payment_date: Optional[date] = None


class PaymentCreate(PaymentBase):
    # Version of the debt the client computed its balance from; a mismatch is a conflict
    expected_version: Optional[int] = None


class PaymentRead(PaymentBase):
    id: int
    debt_id: int
    payment_date: date
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class PaymentRecorded(BaseModel):
    """Result of recording a payment: the row plus the debt's new state."""

    payment: PaymentRead
    debt_status: str
    remaining_amount: Decimal
