"""Aggregate statistics for the dashboard cards."""

from decimal import Decimal
from typing import Dict, List

from pydantic import BaseModel, ConfigDict


class DebtStatsRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    total: Decimal
    count: int
    average: Decimal
    paid_total: Decimal
    pending_total: Decimal
    overdue_count: int
    # Short names used by the dashboard cards
    paid: Decimal
    pending: Decimal
    overdue: int
    status_counts: Dict[str, int] = {}


class OverdueRefreshResult(BaseModel):
    as_of: str
    updated: int
    debt_ids: List[int]
