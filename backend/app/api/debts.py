"""Debt routes: CRUD, payments, increases, history and stats."""

from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from backend.app.db.session import get_db
from backend.app.dependencies.auth import get_current_user
from backend.app.models.user import User
from backend.app.schemas.debt import DebtCreate, DebtIncrease, DebtRead, DebtUpdate
from backend.app.schemas.debt_history import DebtHistoryRead, DebtIncreaseResult, TimelineItem
from backend.app.schemas.payment import PaymentCreate, PaymentRead, PaymentRecorded
from backend.app.schemas.stats import DebtStatsRead, OverdueRefreshResult
from backend.app.services import debt_service

router = APIRouter(prefix="/debts", tags=["debts"])


@router.get("/", response_model=List[DebtRead])
async def list_debts(
    search: str | None = None,
    status: str | None = None,
    sort: str = "newest",
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return debt_service.list_debts(db, current_user.id, search=search, status=status, sort=sort)


@router.post("/", response_model=DebtRead, status_code=status.HTTP_201_CREATED)
async def create_debt(
    payload: DebtCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return debt_service.create_debt(db, current_user.id, payload)


@router.get("/stats", response_model=DebtStatsRead)
async def get_debt_stats(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    stats = debt_service.get_stats(db, current_user.id)
    # Validate from attributes so the short-name properties are included
    return DebtStatsRead.model_validate(stats)


@router.post("/overdue/refresh", response_model=OverdueRefreshResult)
async def refresh_overdue(
    as_of: Optional[date] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    today = as_of or date.today()
    updated = debt_service.mark_overdue_debts(db, current_user.id, today=today)
    return {"as_of": today.isoformat(), "updated": len(updated), "debt_ids": [d.id for d in updated]}


@router.get("/{debt_id}", response_model=DebtRead)
async def get_debt(debt_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return debt_service.get_debt(db, debt_id, current_user.id)


@router.patch("/{debt_id}", response_model=DebtRead)
async def update_debt(
    debt_id: int,
    payload: DebtUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    debt = debt_service.get_debt(db, debt_id, current_user.id)
    return debt_service.update_debt(db, debt, payload)


@router.delete("/{debt_id}")
async def delete_debt(debt_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    debt = debt_service.get_debt(db, debt_id, current_user.id)
    debt_service.delete_debt(db, debt)
    return {"status": "deleted", "id": debt_id}


@router.post("/{debt_id}/payments", response_model=PaymentRecorded, status_code=status.HTTP_201_CREATED)
async def record_payment(
    debt_id: int,
    payload: PaymentCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    debt = debt_service.get_debt(db, debt_id, current_user.id)
    payment, outcome = debt_service.apply_payment(db, debt, payload, expected_version=payload.expected_version)
    return {"payment": payment, "debt_status": outcome.status, "remaining_amount": outcome.remaining}


@router.get("/{debt_id}/payments", response_model=List[PaymentRead])
async def list_debt_payments(
    debt_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    debt = debt_service.get_debt(db, debt_id, current_user.id)
    return debt_service.list_payments(db, debt)


@router.post("/{debt_id}/increase", response_model=DebtIncreaseResult)
async def increase_debt(
    debt_id: int,
    payload: DebtIncrease,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    debt = debt_service.get_debt(db, debt_id, current_user.id)
    entry, _ = debt_service.apply_increase(
        db, debt, payload.amount, reason=payload.reason, expected_version=payload.expected_version
    )
    return {"debt": debt, "history": entry}


@router.get("/{debt_id}/history", response_model=List[DebtHistoryRead])
async def list_debt_history(
    debt_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    debt = debt_service.get_debt(db, debt_id, current_user.id)
    return debt_service.list_history(db, debt)


@router.get("/{debt_id}/timeline", response_model=List[TimelineItem])
async def get_debt_timeline(
    debt_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    debt = debt_service.get_debt(db, debt_id, current_user.id)
    return debt_service.build_timeline(db, debt)
