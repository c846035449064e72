"""Debt history and combined timeline schemas."""

from datetime import date, datetime
from decimal import Decimal
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict

from backend.app.schemas.debt import DebtRead


class DebtHistoryRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    debt_id: int
    action_type: Literal["increase", "payment", "status_change"]
    amount: Optional[Decimal] = None
    previous_amount: Optional[Decimal] = None
    new_amount: Optional[Decimal] = None
    reason: Optional[str] = None
    created_at: datetime


class DebtIncreaseResult(BaseModel):
    debt: DebtRead
    history: DebtHistoryRead


class TimelineItem(BaseModel):
    id: int
    debt_id: int
    type: Literal["debt_action", "payment"]
    action_type: Literal["increase", "payment", "status_change"]
    date: datetime
    amount: Optional[Decimal] = None
    previous_amount: Optional[Decimal] = None
    new_amount: Optional[Decimal] = None
    reason: Optional[str] = None
    payment_method: Optional[str] = None
    payment_date: Optional[date] = None
    notes: Optional[str] = None
    created_at: datetime
