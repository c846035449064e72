import os

# Keep test runs away from the development database
os.environ.setdefault("DATABASE_URL", "sqlite:///./test_debt_tracker.db")
os.environ.setdefault("ENVIRONMENT", "development")
