"""Balance and status reconciliation for debts.

Pure functions over in-memory values. Callers persist the returned fields;
nothing here touches the database.
"""

from dataclasses import dataclass, field
from datetime import date
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Iterable, Optional, Sequence, Tuple

from backend.app.core.errors import ValidationError

ZERO = Decimal("0.00")
CENT = Decimal("0.01")

STATUS_PENDING = "pending"
STATUS_PARTIAL = "partial"
STATUS_PAID = "paid"
STATUS_OVERDUE = "overdue"
STATUSES = (STATUS_PENDING, STATUS_PARTIAL, STATUS_PAID, STATUS_OVERDUE)


def quantize_money(value) -> Decimal:
    """Coerce to Decimal at two places; floats go through str() so 0.1 stays 0.10."""
    if value is None:
        return ZERO
    try:
        amount = value if isinstance(value, Decimal) else Decimal(str(value))
    except (InvalidOperation, ValueError) as exc:
        raise ValidationError(f"Invalid amount: {value!r}", field="amount") from exc
    if not amount.is_finite():
        raise ValidationError(f"Invalid amount: {value!r}", field="amount")
    return amount.quantize(CENT, rounding=ROUND_HALF_UP)


def compute_total_paid(payments: Iterable) -> Decimal:
    return sum((quantize_money(p) for p in payments if p is not None), ZERO)


def compute_remaining(principal, payments: Iterable) -> Decimal:
    """Principal minus payments, clamped at zero."""
    remaining = quantize_money(principal) - compute_total_paid(payments)
    if remaining < ZERO:
        return ZERO
    return remaining


@dataclass(frozen=True)
class DebtSnapshot:
    amount: Decimal
    status: str = STATUS_PENDING
    payments: Tuple[Decimal, ...] = ()
    due_date: Optional[date] = None

    def __post_init__(self):
        amount = quantize_money(self.amount)
        if amount < ZERO:
            raise ValidationError("Debt amount cannot be negative", field="amount", bound="minimum")
        if self.status not in STATUSES:
            raise ValidationError(f"Unknown debt status: {self.status}", field="status")
        object.__setattr__(self, "amount", amount)
        object.__setattr__(self, "payments", tuple(quantize_money(p) for p in self.payments))

    @classmethod
    def from_model(cls, debt) -> "DebtSnapshot":
        return cls(
            amount=debt.amount,
            status=debt.status,
            payments=tuple(p.amount for p in debt.payments),
            due_date=debt.due_date,
        )

    @property
    def total_paid(self) -> Decimal:
        return compute_total_paid(self.payments)

    @property
    def remaining_amount(self) -> Decimal:
        return compute_remaining(self.amount, self.payments)


@dataclass(frozen=True)
class PaymentOutcome:
    status: str
    remaining: Decimal


@dataclass(frozen=True)
class HistoryDraft:
    action_type: str
    amount: Decimal
    previous_amount: Decimal
    new_amount: Decimal
    reason: Optional[str] = None


@dataclass(frozen=True)
class IncreaseOutcome:
    new_principal: Decimal
    status: str
    history: HistoryDraft


@dataclass(frozen=True)
class DebtStats:
    total: Decimal = ZERO
    count: int = 0
    average: Decimal = ZERO
    paid_total: Decimal = ZERO
    pending_total: Decimal = ZERO
    overdue_count: int = 0
    status_counts: dict = field(default_factory=dict)

    @property
    def paid(self) -> Decimal:
        return self.paid_total

    @property
    def pending(self) -> Decimal:
        return self.pending_total

    @property
    def overdue(self) -> int:
        return self.overdue_count


def record_payment(debt: DebtSnapshot, amount) -> PaymentOutcome:
    """Validate a payment against the current balance and derive the new status."""
    payment_amount = quantize_money(amount)
    if payment_amount <= ZERO:
        raise ValidationError("Amount must be greater than 0", field="amount", bound="minimum")

    remaining = debt.remaining_amount
    if payment_amount > remaining:
        raise ValidationError(
            f"Amount cannot exceed remaining debt of {remaining}",
            field="amount",
            bound="maximum",
        )

    new_remaining = remaining - payment_amount
    if new_remaining <= ZERO:
        return PaymentOutcome(status=STATUS_PAID, remaining=ZERO)
    return PaymentOutcome(status=STATUS_PARTIAL, remaining=new_remaining)


def increase_debt(debt: DebtSnapshot, increase_amount, reason: Optional[str] = None) -> IncreaseOutcome:
    """Raise the principal; a fully paid debt reopens as partial."""
    delta = quantize_money(increase_amount)
    if delta <= ZERO:
        raise ValidationError("Amount must be greater than 0", field="amount", bound="minimum")

    new_principal = debt.amount + delta
    status = STATUS_PARTIAL if debt.status == STATUS_PAID else debt.status
    cleaned_reason = reason.strip() if reason else None
    history = HistoryDraft(
        action_type="increase",
        amount=delta,
        previous_amount=debt.amount,
        new_amount=new_principal,
        reason=cleaned_reason or None,
    )
    return IncreaseOutcome(new_principal=new_principal, status=status, history=history)


def is_overdue(status: str, remaining, due_date: Optional[date], today: date) -> bool:
    if due_date is None or status == STATUS_PAID:
        return False
    return due_date < today and quantize_money(remaining) > ZERO


def derive_aggregate_stats(debts: Sequence[DebtSnapshot]) -> DebtStats:
    count = len(debts)
    if count == 0:
        return DebtStats(status_counts={status: 0 for status in STATUSES})

    total = sum((d.amount for d in debts), ZERO)
    paid_total = sum((d.total_paid for d in debts), ZERO)
    status_counts = {status: 0 for status in STATUSES}
    for debt in debts:
        status_counts[debt.status] += 1

    return DebtStats(
        total=total,
        count=count,
        average=quantize_money(total / count),
        paid_total=paid_total,
        pending_total=total - paid_total,
        overdue_count=status_counts[STATUS_OVERDUE],
        status_counts=status_counts,
    )
