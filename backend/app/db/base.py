from backend.app.db.base_class import Base

# Import models to register metadata for Base.metadata.create_all in tests
from backend.app.models.user import User  # noqa: F401
from backend.app.models.revoked_token import RevokedToken  # noqa: F401
from backend.app.models.debt import Debt  # noqa: F401
from backend.app.models.payment import Payment  # noqa: F401
from backend.app.models.debt_history import DebtHistory  # noqa: F401
