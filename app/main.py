import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.core.config import settings
from app.core.logging import setup_logging
from app.db.session import open_store, close_store
from app.api.error_handlers import register_error_handlers
from app.api.v1.api import api_router
from app.services.migration_service import run_migrations

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging(settings.LOG_LEVEL, settings.LOG_FORMAT)
    store = await open_store()
    # migrations finish before the first request can read players or history
    if settings.RUN_MIGRATIONS_ON_STARTUP:
        applied = await run_migrations(store)
        if applied:
            logger.info("Applied migrations: %s", ", ".join(applied))
    yield
    await close_store()


app = FastAPI(
    title=settings.PROJECT_NAME,
    version=settings.PROJECT_VERSION,
    description=settings.DESCRIPTION,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_error_handlers(app)


@app.get("/")
async def root():
    return {"message": "Welcome to PokerSplit API"}

app.include_router(api_router, prefix=settings.API_V1_STR)
