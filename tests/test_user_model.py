from backend.app.models.debt import Debt
from backend.app.models.debt_history import DebtHistory
from backend.app.models.payment import Payment
from backend.app.models.user import User


def test_user_model_has_columns():
    column_names = [column.name for column in User.__table__.columns]
    expected = {"id", "email", "hashed_password", "is_active", "created_at", "updated_at"}
    assert expected.issubset(set(column_names))


def test_user_model_primary_key():
    pk_columns = [column.name for column in User.__table__.primary_key.columns]
    assert "id" in pk_columns


def test_user_model_email_field_exists():
    email_column = User.__table__.columns.get("email")
    assert email_column is not None
    assert email_column.unique


def test_debt_model_columns():
    column_names = {column.name for column in Debt.__table__.columns}
    expected = {"id", "user_id", "customer_name", "phone", "amount", "description", "due_date", "status", "version"}
    assert expected.issubset(column_names)


def test_child_tables_cascade_on_debt_delete():
    for model in (Payment, DebtHistory):
        fk = next(iter(model.__table__.columns["debt_id"].foreign_keys))
        assert fk.ondelete == "CASCADE"
