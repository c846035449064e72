import pytest
from fastapi.testclient import TestClient

from backend.app.db.base import Base
from backend.app.db.session import SessionLocal, engine
from backend.app.main import app
from backend.app.models.user import User


@pytest.fixture(autouse=True)
def setup_db():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


def register_and_login(client: TestClient, email: str, password: str) -> str:
    client.post("/auth/register", json={"email": email, "password": password})
    response = client.post("/auth/login", json={"email": email, "password": password})
    assert response.status_code == 200
    return response.json()["access_token"]


def test_me_returns_current_user_with_last_login():
    client = TestClient(app)
    token = register_and_login(client, "me@example.com", "secret")
    response = client.get("/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 200
    data = response.json()
    assert data["email"] == "me@example.com"
    assert isinstance(data["id"], int)
    assert data["last_login"] is not None


def test_me_rejects_non_bearer_header():
    client = TestClient(app)
    token = register_and_login(client, "basic@example.com", "secret")
    response = client.get("/auth/me", headers={"Authorization": f"Token {token}"})
    assert response.status_code == 401
    assert response.json()["detail"] == "Not authenticated"


def test_me_rejects_deactivated_user():
    client = TestClient(app)
    token = register_and_login(client, "gone@example.com", "secret")
    with SessionLocal() as db:
        user = db.query(User).filter(User.email == "gone@example.com").first()
        user.is_active = False
        db.commit()

    response = client.get("/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 401


def test_me_rejects_token_of_deleted_user():
    client = TestClient(app)
    token = register_and_login(client, "deleted@example.com", "secret")
    with SessionLocal() as db:
        db.query(User).filter(User.email == "deleted@example.com").delete()
        db.commit()

    response = client.get("/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 401
