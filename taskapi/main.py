import logging
import time
from pathlib import Path
from typing import Optional

from fastapi import FastAPI, Request, Response
from fastapi.staticfiles import StaticFiles

from taskapi.config import (
    APP_TITLE,
    APP_VERSION,
    CORS_HEADERS,
    DATABASE_URL,
    LOG_LEVEL,
    MAX_PER_PAGE,
    SQL_ECHO,
)
from taskapi.database import build_engine, init_database
from taskapi.errors import register_error_handlers
from taskapi.logging_setup import setup_logging
from taskapi.routers import root, tasks

logger = logging.getLogger(__name__)

FRONTEND_DIR = Path(__file__).resolve().parent / "frontend"


def create_app(database_url: Optional[str] = None, log_level: str = LOG_LEVEL) -> FastAPI:
    """Build a fully wired application.

    The engine is created here and owned by the returned app; nothing is
    shared between two apps built by separate calls.
    """
    setup_logging(log_level)
    engine = build_engine(database_url or DATABASE_URL, echo=SQL_ECHO)
    session_factory = init_database(engine)

    app = FastAPI(title=APP_TITLE, version=APP_VERSION)
    app.state.engine = engine

    @app.middleware("http")
    async def cors_and_logging(request: Request, call_next):
        start = time.perf_counter()
        if request.method == "OPTIONS":
            response = Response(status_code=204)
        else:
            response = await call_next(request)
        response.headers.update(CORS_HEADERS)
        logger.info(
            "%s %s -> %s (%.1fms)",
            request.method,
            request.url.path,
            response.status_code,
            (time.perf_counter() - start) * 1000,
        )
        return response

    register_error_handlers(app)

    app.include_router(root.router)
    app.include_router(tasks.create_router(session_factory, max_per_page=MAX_PER_PAGE))

    # Minimal web client
    app.mount("/ui", StaticFiles(directory=FRONTEND_DIR, html=True), name="frontend")

    return app
