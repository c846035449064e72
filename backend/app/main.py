# Debt Tracker backend entrypoint: FastAPI app wiring.

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from backend.app.api import debts, login, payments, register
from backend.app.api.auth import router as auth
from backend.app.core.errors import register_error_handlers
from backend.app.core.logging import setup_logging
from backend.app.core.settings import get_settings
from backend.app.db.base import Base
from backend.app.db.session import engine

settings = get_settings()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging(settings.log_level, settings.log_file)
    Base.metadata.create_all(bind=engine)
    logger.info("%s started (%s)", settings.app_name, settings.environment)
    yield
    engine.dispose()


app = FastAPI(title=settings.app_name, version=settings.api_version, lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_error_handlers(app)

app.include_router(register.router)
app.include_router(login.router)
app.include_router(auth.router)
app.include_router(debts.router)
app.include_router(payments.router)


@app.get("/")
def read_root():
    return {"app": "Debt Tracker backend", "status": "ok"}


@app.get("/health")
def health_check():
    return {"status": "ok"}
