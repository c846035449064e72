import pytest
from datetime import date
from decimal import Decimal

from backend.app.db.base import Base
from backend.app.db.session import SessionLocal, engine
from backend.app.models.debt import Debt
from backend.app.models.debt_history import DebtHistory
from backend.app.models.payment import Payment
from backend.app.models.user import User


@pytest.fixture(autouse=True)
def setup_db():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


def _create_user_debt(db, amount=Decimal("80.00")):
    user = User(email="owner@example.com", hashed_password="x", is_active=True)
    db.add(user)
    db.commit()
    db.refresh(user)

    debt = Debt(user_id=user.id, customer_name="Customer", phone="555-0100", amount=amount)
    db.add(debt)
    db.commit()
    db.refresh(debt)
    return user, debt


def test_payment_persists_and_relations_work():
    db = SessionLocal()
    try:
        user, debt = _create_user_debt(db)
        payment = Payment(debt_id=debt.id, amount=Decimal("80.00"), payment_method="cash")
        db.add(payment)
        db.commit()
        db.refresh(payment)

        assert payment.id is not None
        assert payment.debt_id == debt.id
        assert payment.debt.id == debt.id
        assert payment.debt.payments[0].id == payment.id
    finally:
        db.close()


def test_payment_defaults_set():
    db = SessionLocal()
    try:
        user, debt = _create_user_debt(db)
        payment = Payment(debt_id=debt.id, amount=Decimal("50.00"))
        db.add(payment)
        db.commit()
        db.refresh(payment)

        assert payment.created_at is not None
        assert payment.payment_date == date.today()
        assert payment.payment_method == "cash"
    finally:
        db.close()


def test_payment_amount_precision():
    db = SessionLocal()
    try:
        user, debt = _create_user_debt(db)
        payment = Payment(debt_id=debt.id, amount=Decimal("123.45"))
        db.add(payment)
        db.commit()
        db.refresh(payment)

        assert payment.amount == Decimal("123.45")
    finally:
        db.close()


def test_new_debt_starts_pending_with_version():
    db = SessionLocal()
    try:
        user, debt = _create_user_debt(db)
        assert debt.status == "pending"
        assert debt.version == 1
        debt.description = "changed"
        db.commit()
        db.refresh(debt)
        assert debt.version == 2
    finally:
        db.close()


def test_derived_fields_on_debt():
    db = SessionLocal()
    try:
        user, debt = _create_user_debt(db, amount=Decimal("100.00"))
        db.add(Payment(debt_id=debt.id, amount=Decimal("30.00")))
        db.add(Payment(debt_id=debt.id, amount=Decimal("90.00")))
        db.commit()
        db.refresh(debt)

        assert debt.total_paid == Decimal("120.00")
        assert debt.remaining_amount == Decimal("0.00")
    finally:
        db.close()


def test_deleting_debt_removes_payments_and_history():
    db = SessionLocal()
    try:
        user, debt = _create_user_debt(db)
        db.add(Payment(debt_id=debt.id, amount=Decimal("10.00")))
        db.add(DebtHistory(debt_id=debt.id, action_type="increase", amount=Decimal("5.00")))
        db.commit()
        db.refresh(debt)

        db.delete(debt)
        db.commit()

        assert db.query(Payment).count() == 0
        assert db.query(DebtHistory).count() == 0
    finally:
        db.close()
