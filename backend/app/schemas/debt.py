"""Debt schemas."""

from datetime import date, datetime
from decimal import Decimal
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

DebtStatus = Literal["pending", "partial", "paid", "overdue"]


def _strip_required(v: Optional[str]) -> Optional[str]:
    if v is None:
        return v
    v = v.strip()
    if not v:
        raise ValueError("must not be blank")
    return v


class DebtBase(BaseModel):
    customer_name: str = Field(min_length=1, max_length=255)
    phone: str = Field(min_length=1, max_length=50)
    description: Optional[str] = None
    due_date: Optional[date] = None

    strip_required = field_validator("customer_name", "phone")(_strip_required)


class DebtCreate(DebtBase):
    amount: Decimal = Field(ge=0, max_digits=12, decimal_places=2)


class DebtUpdate(BaseModel):
    """Editable descriptive fields. Amount and status follow payments and increases."""

    model_config = ConfigDict(extra="forbid")

    customer_name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    phone: Optional[str] = Field(default=None, min_length=1, max_length=50)
    description: Optional[str] = None
    due_date: Optional[date] = None

    strip_required = field_validator("customer_name", "phone")(_strip_required)


class DebtIncrease(BaseModel):
    amount: Decimal = Field(max_digits=12, decimal_places=2)
    reason: Optional[str] = None
    expected_version: Optional[int] = None


class DebtRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    customer_name: str
    phone: str
    amount: Decimal
    description: Optional[str] = None
    due_date: Optional[date] = None
    status: DebtStatus
    version: int
    total_paid: Decimal
    remaining_amount: Decimal
    created_at: datetime
    updated_at: datetime
