"""Payment listing endpoints."""

from datetime import date
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from backend.app.core.errors import ValidationError
from backend.app.db.session import get_db
from backend.app.dependencies.auth import get_current_user
from backend.app.models.debt import Debt
from backend.app.models.payment import Payment
from backend.app.models.user import User
from backend.app.schemas.payment import PaymentRead

router = APIRouter(prefix="/payments", tags=["payments"])


@router.get("/", response_model=List[PaymentRead])
async def list_payments(
    debt_id: int | None = None,
    method: str | None = None,
    from_date: date | None = None,
    to_date: date | None = None,
    skip: int = 0,
    limit: int = 50,
    sort_by: str = "payment_date",
    sort_order: str = "desc",
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    query = db.query(Payment).join(Debt).filter(Debt.user_id == current_user.id)

    if debt_id is not None:
        query = query.filter(Payment.debt_id == debt_id)
    if method:
        query = query.filter(Payment.payment_method == method)
    if from_date is not None:
        query = query.filter(Payment.payment_date >= from_date)
    if to_date is not None:
        query = query.filter(Payment.payment_date <= to_date)

    supported_sort_fields = {
        "payment_date": Payment.payment_date,
        "created_at": Payment.created_at,
        "amount": Payment.amount,
        "id": Payment.id,
    }
    if sort_by not in supported_sort_fields:
        raise ValidationError("Invalid sort_by field", field="sort_by")
    sort_order_normalized = (sort_order or "desc").lower()
    if sort_order_normalized not in {"asc", "desc"}:
        raise ValidationError("Invalid sort_order value", field="sort_order")

    sort_column = supported_sort_fields[sort_by]
    if sort_order_normalized == "asc":
        query = query.order_by(sort_column.asc(), Payment.id.asc())
    else:
        query = query.order_by(sort_column.desc(), Payment.id.desc())

    query = query.offset(skip).limit(limit)
    return query.all()
