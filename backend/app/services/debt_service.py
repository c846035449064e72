"""Persistence for debts, payments and debt history.

Every query is scoped to the owning user. Writes that touch a debt and a
child row (payment, history entry) commit together, and the debt UPDATE is
guarded by its version column so a concurrent writer surfaces as
ConsistencyError instead of overdrawing the balance.
"""

import logging
from datetime import date
from typing import List, Optional

from sqlalchemy import func, or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, selectinload
from sqlalchemy.orm.exc import StaleDataError

from backend.app.core.errors import ConsistencyError, NotFoundError, PersistenceError, ValidationError
from backend.app.core.time import as_utc, start_of_day, utc_now
from backend.app.models.debt import Debt
from backend.app.models.debt_history import DebtHistory
from backend.app.models.payment import Payment
from backend.app.schemas.debt import DebtCreate, DebtUpdate
from backend.app.schemas.payment import PaymentCreate
from backend.app.services.reconciliation import (
    STATUS_OVERDUE,
    STATUS_PAID,
    STATUS_PENDING,
    STATUSES,
    DebtSnapshot,
    DebtStats,
    IncreaseOutcome,
    PaymentOutcome,
    derive_aggregate_stats,
    increase_debt,
    is_overdue,
    quantize_money,
    record_payment,
)

logger = logging.getLogger(__name__)

SORT_OPTIONS = ("newest", "oldest", "name", "amount-high", "amount-low", "due-date")


def _commit(db: Session) -> None:
    try:
        db.commit()
    except StaleDataError as exc:
        db.rollback()
        raise ConsistencyError() from exc
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error("Database error: %s", exc)
        raise PersistenceError(str(exc)) from exc


def _check_version(debt: Debt, expected_version: Optional[int]) -> None:
    if expected_version is not None and expected_version != debt.version:
        logger.warning("Stale version for debt %s: expected %s, found %s", debt.id, expected_version, debt.version)
        raise ConsistencyError()


def list_debts(
    db: Session,
    owner_id: int,
    search: Optional[str] = None,
    status: Optional[str] = None,
    sort: str = "newest",
) -> List[Debt]:
    if sort not in SORT_OPTIONS:
        raise ValidationError("Invalid sort value", field="sort")

    query = db.query(Debt).options(selectinload(Debt.payments)).filter(Debt.user_id == owner_id)

    if search:
        term = search.strip()
        query = query.filter(
            or_(
                func.lower(Debt.customer_name).contains(term.lower(), autoescape=True),
                Debt.phone.contains(term, autoescape=True),
            )
        )
    if status and status != "all":
        if status not in STATUSES:
            raise ValidationError("Invalid status value", field="status")
        query = query.filter(Debt.status == status)

    if sort == "oldest":
        order_by_clause = [Debt.created_at.asc(), Debt.id.asc()]
    elif sort == "name":
        order_by_clause = [func.lower(Debt.customer_name).asc(), Debt.id.asc()]
    elif sort == "amount-high":
        order_by_clause = [Debt.amount.desc(), Debt.id.desc()]
    elif sort == "amount-low":
        order_by_clause = [Debt.amount.asc(), Debt.id.asc()]
    elif sort == "due-date":
        order_by_clause = [Debt.due_date.is_(None), Debt.due_date.asc(), Debt.id.asc()]
    else:
        order_by_clause = [Debt.created_at.desc(), Debt.id.desc()]

    return query.order_by(*order_by_clause).all()


def get_debt(db: Session, debt_id: int, owner_id: int) -> Debt:
    debt = (
        db.query(Debt)
        .options(selectinload(Debt.payments))
        .filter(Debt.id == debt_id, Debt.user_id == owner_id)
        .first()
    )
    if not debt:
        raise NotFoundError("Debt not found")
    return debt


def create_debt(db: Session, owner_id: int, data: DebtCreate) -> Debt:
    debt = Debt(
        user_id=owner_id,
        customer_name=data.customer_name,
        phone=data.phone,
        amount=quantize_money(data.amount),
        description=data.description or None,
        due_date=data.due_date,
        status=STATUS_PENDING,
    )
    db.add(debt)
    _commit(db)
    db.refresh(debt)
    logger.info("Created debt %s for user %s", debt.id, owner_id)
    return debt


def update_debt(db: Session, debt: Debt, data: DebtUpdate) -> Debt:
    update_data = data.model_dump(exclude_unset=True)
    for field in ("customer_name", "phone"):
        if field in update_data and not (update_data[field] or "").strip():
            raise ValidationError(f"{field} is required", field=field)
    for field, value in update_data.items():
        if field == "description":
            value = value or None
        setattr(debt, field, value)
    _commit(db)
    db.refresh(debt)
    return debt


def delete_debt(db: Session, debt: Debt) -> None:
    debt_id = debt.id
    db.delete(debt)
    _commit(db)
    logger.info("Deleted debt %s", debt_id)


def apply_payment(
    db: Session,
    debt: Debt,
    data: PaymentCreate,
    expected_version: Optional[int] = None,
) -> tuple[Payment, PaymentOutcome]:
    """Record a payment and update the debt status in a single transaction."""
    _check_version(debt, expected_version)
    outcome = record_payment(DebtSnapshot.from_model(debt), data.amount)

    payment = Payment(
        debt_id=debt.id,
        amount=quantize_money(data.amount),
        payment_date=data.payment_date or date.today(),
        payment_method=data.payment_method,
        notes=data.notes or None,
    )
    db.add(payment)
    debt.status = outcome.status
    # Always touch the row so the versioned UPDATE runs even when the status is unchanged
    debt.updated_at = utc_now()
    _commit(db)
    db.refresh(payment)
    db.refresh(debt)
    logger.info(
        "Recorded payment %s of %s on debt %s (status=%s, remaining=%s)",
        payment.id,
        payment.amount,
        debt.id,
        outcome.status,
        outcome.remaining,
    )
    return payment, outcome


def list_payments(db: Session, debt: Debt) -> List[Payment]:
    return (
        db.query(Payment)
        .filter(Payment.debt_id == debt.id)
        .order_by(Payment.payment_date.desc(), Payment.id.desc())
        .all()
    )


def apply_increase(
    db: Session,
    debt: Debt,
    amount,
    reason: Optional[str] = None,
    expected_version: Optional[int] = None,
) -> tuple[DebtHistory, IncreaseOutcome]:
    """Raise the principal and append the audit entry in a single transaction."""
    _check_version(debt, expected_version)
    outcome = increase_debt(DebtSnapshot.from_model(debt), amount, reason)
    draft = outcome.history

    entry = DebtHistory(
        debt_id=debt.id,
        action_type=draft.action_type,
        amount=draft.amount,
        previous_amount=draft.previous_amount,
        new_amount=draft.new_amount,
        reason=draft.reason,
    )
    db.add(entry)
    debt.amount = outcome.new_principal
    debt.status = outcome.status
    debt.updated_at = utc_now()
    _commit(db)
    db.refresh(entry)
    db.refresh(debt)
    logger.info("Increased debt %s by %s to %s", debt.id, draft.amount, draft.new_amount)
    return entry, outcome


def list_history(db: Session, debt: Debt) -> List[DebtHistory]:
    return (
        db.query(DebtHistory)
        .filter(DebtHistory.debt_id == debt.id)
        .order_by(DebtHistory.created_at.desc(), DebtHistory.id.desc())
        .all()
    )


def build_timeline(db: Session, debt: Debt) -> List[dict]:
    """Merge history entries and payments, newest first."""
    items = []
    for entry in list_history(db, debt):
        items.append(
            {
                "id": entry.id,
                "debt_id": entry.debt_id,
                "type": "debt_action",
                "action_type": entry.action_type,
                "date": as_utc(entry.created_at),
                "amount": entry.amount,
                "previous_amount": entry.previous_amount,
                "new_amount": entry.new_amount,
                "reason": entry.reason,
                "created_at": as_utc(entry.created_at),
            }
        )
    for payment in list_payments(db, debt):
        items.append(
            {
                "id": payment.id,
                "debt_id": payment.debt_id,
                "type": "payment",
                "action_type": "payment",
                "date": start_of_day(payment.payment_date),
                "amount": payment.amount,
                "payment_method": payment.payment_method,
                "payment_date": payment.payment_date,
                "notes": payment.notes,
                "created_at": as_utc(payment.created_at),
            }
        )
    items.sort(key=lambda item: (item["date"], item["created_at"]), reverse=True)
    return items


def get_stats(db: Session, owner_id: int) -> DebtStats:
    debts = db.query(Debt).options(selectinload(Debt.payments)).filter(Debt.user_id == owner_id).all()
    return derive_aggregate_stats([DebtSnapshot.from_model(debt) for debt in debts])


def mark_overdue_debts(db: Session, owner_id: int, today: Optional[date] = None) -> List[Debt]:
    """Move unpaid debts past their due date to overdue, logging a status_change entry for each."""
    check_date = today or date.today()
    candidates = (
        db.query(Debt)
        .options(selectinload(Debt.payments))
        .filter(
            Debt.user_id == owner_id,
            Debt.due_date.isnot(None),
            Debt.due_date < check_date,
            Debt.status.notin_([STATUS_PAID, STATUS_OVERDUE]),
        )
        .all()
    )

    updated = []
    for debt in candidates:
        if not is_overdue(debt.status, debt.remaining_amount, debt.due_date, check_date):
            continue
        db.add(
            DebtHistory(
                debt_id=debt.id,
                action_type="status_change",
                previous_amount=debt.amount,
                new_amount=debt.amount,
                reason=f"{debt.status} -> {STATUS_OVERDUE}: due {debt.due_date.isoformat()}",
            )
        )
        debt.status = STATUS_OVERDUE
        updated.append(debt)

    if updated:
        _commit(db)
        logger.info("Marked %d debt(s) overdue for user %s", len(updated), owner_id)
    return updated
