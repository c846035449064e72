from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from backend.app.core.errors import ConsistencyError
from backend.app.core.security import get_password_hash
from backend.app.db.base import Base
from backend.app.db.session import SessionLocal, engine
from backend.app.main import app
from backend.app.models.debt import Debt
from backend.app.models.payment import Payment
from backend.app.models.user import User
from backend.app.schemas.payment import PaymentCreate
from backend.app.services import debt_service


@pytest.fixture(autouse=True)
def setup_db():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


def register_and_login(client: TestClient, email: str, password: str) -> str:
    client.post("/auth/register", json={"email": email, "password": password})
    resp = client.post("/auth/login", json={"email": email, "password": password})
    assert resp.status_code == 200
    return resp.json()["access_token"]


def seed_debt(amount: str = "100.00"):
    with SessionLocal() as db:
        user = User(email="race@example.com", hashed_password=get_password_hash("secret"))
        db.add(user)
        db.commit()
        debt = Debt(user_id=user.id, customer_name="Customer", phone="0700000000", amount=Decimal(amount))
        db.add(debt)
        db.commit()
        return user.id, debt.id


def test_stale_payment_is_rejected_without_extra_row():
    user_id, debt_id = seed_debt()
    first = SessionLocal()
    second = SessionLocal()
    try:
        debt_a = debt_service.get_debt(first, debt_id, user_id)
        debt_b = debt_service.get_debt(second, debt_id, user_id)

        debt_service.apply_payment(first, debt_a, PaymentCreate(amount=Decimal("100.00")))
        with pytest.raises(ConsistencyError):
            debt_service.apply_payment(second, debt_b, PaymentCreate(amount=Decimal("100.00")))
    finally:
        first.close()
        second.close()

    with SessionLocal() as db:
        assert db.query(Payment).filter(Payment.debt_id == debt_id).count() == 1
        debt = db.get(Debt, debt_id)
        assert debt.status == "paid"
        assert debt.remaining_amount == Decimal("0.00")


def test_stale_increase_is_rejected():
    user_id, debt_id = seed_debt()
    first = SessionLocal()
    second = SessionLocal()
    try:
        debt_a = debt_service.get_debt(first, debt_id, user_id)
        debt_b = debt_service.get_debt(second, debt_id, user_id)

        debt_service.apply_increase(first, debt_a, Decimal("10.00"))
        with pytest.raises(ConsistencyError):
            debt_service.apply_increase(second, debt_b, Decimal("10.00"))
    finally:
        first.close()
        second.close()

    with SessionLocal() as db:
        assert db.get(Debt, debt_id).amount == Decimal("110.00")


def test_version_increments_on_each_write():
    client = TestClient(app)
    token = register_and_login(client, "version@example.com", "secret")
    headers = {"Authorization": f"Bearer {token}"}
    debt = client.post(
        "/debts", json={"customer_name": "Customer", "phone": "0700000000", "amount": "100.00"}, headers=headers
    ).json()
    start = debt["version"]

    client.post(f"/debts/{debt['id']}/payments", json={"amount": "10.00"}, headers=headers)
    client.post(f"/debts/{debt['id']}/payments", json={"amount": "10.00"}, headers=headers)
    assert client.get(f"/debts/{debt['id']}", headers=headers).json()["version"] == start + 2


def test_expected_version_mismatch_returns_conflict():
    client = TestClient(app)
    token = register_and_login(client, "conflict@example.com", "secret")
    headers = {"Authorization": f"Bearer {token}"}
    debt = client.post(
        "/debts", json={"customer_name": "Customer", "phone": "0700000000", "amount": "100.00"}, headers=headers
    ).json()
    version = debt["version"]

    ok = client.post(
        f"/debts/{debt['id']}/payments", json={"amount": "40.00", "expected_version": version}, headers=headers
    )
    assert ok.status_code == 201

    stale = client.post(
        f"/debts/{debt['id']}/payments", json={"amount": "40.00", "expected_version": version}, headers=headers
    )
    assert stale.status_code == 409
    assert stale.json()["error"]["code"] == "conflict"

    stale_increase = client.post(
        f"/debts/{debt['id']}/increase", json={"amount": "5.00", "expected_version": version}, headers=headers
    )
    assert stale_increase.status_code == 409

    payments = client.get(f"/debts/{debt['id']}/payments", headers=headers).json()
    assert len(payments) == 1
