"""
Personal Finance Tracker: FastAPI application.

This is the entry point for the application. create_app()
builds the database, the stores and the services once, keeps
them on app.state and registers all routers.
"""

import logging
import time

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from finance_tracker.config import Settings, get_settings
from finance_tracker.logging_config import setup_logging
from finance_tracker.models.base import Database
from finance_tracker.services.ledger_service import LedgerService
from finance_tracker.services.ledger_store import LedgerStore
from finance_tracker.services.user_service import UserService
from finance_tracker.services.user_store import UserStore
from finance_tracker.api.health import router as health_router
from finance_tracker.api.auth import router as auth_router
from finance_tracker.api.entries import router as entries_router

logger = logging.getLogger("finance_tracker.requests")


def create_app(
    settings: Settings | None = None,
    database: Database | None = None,
) -> FastAPI:
    """
    Build a fully wired application.

    Tests pass their own Database so every test starts empty.
    """
    settings = settings or get_settings()
    setup_logging(settings.LOG_LEVEL)

    if database is None:
        database = Database(settings.DATABASE_URL)
    database.create_all()

    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        description="Track income and expenses with an overdraft-safe balance",
        debug=settings.DEBUG,
    )

    app.state.settings = settings
    app.state.database = database
    app.state.ledger_service = LedgerService(LedgerStore(database))
    app.state.user_service = UserService(UserStore(database), settings)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        started = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - started) * 1000
        logger.info(
            "%s %s -> %s (%.1f ms)",
            request.method, request.url.path, response.status_code, elapsed_ms,
        )
        return response

    # Register routers
    app.include_router(health_router)
    app.include_router(auth_router)
    app.include_router(entries_router)

    return app


app = create_app()
