"""
FastAPI application for the Task Board.

Serves HTML pages and htmx fragments for boards and their tasks, with a
signed-cookie login in front of everything except ``/login`` and
``/health``. State lives in memory for the lifetime of the process.
"""

from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, status
from fastapi.responses import RedirectResponse
from fastapi.staticfiles import StaticFiles
import structlog

from taskboard.api.errors import register_exception_handlers
from taskboard.api.routers import auth, boards, health, tasks

# Configure structured logging first
from taskboard.config import configure_structlog, settings
from taskboard.core.board_store import initialize_store, seed_demo_data

configure_structlog()
logger = structlog.get_logger(__name__)

STATIC_DIR = Path(__file__).resolve().parent / "static"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan event handler for startup and shutdown."""
    logger.info(
        "Task Board starting up",
        version=settings.app_version,
        environment=settings.get_environment_display(),
        debug=settings.debug,
    )

    store = initialize_store()
    if settings.seed_demo_data:
        await seed_demo_data(store)
        logger.info("Demo data seeded")

    if settings.uses_default_secret():
        log = logger.error if settings.is_production() else logger.warning
        log("TASKBOARD_SESSION_SECRET not configured - using the development secret")

    logger.info("Routes registered", endpoints=len(app.routes))

    yield

    logger.info("Task Board shutting down")


def create_application() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Sets up exception handlers, static files and the auth, board, task and
    health routers. The interactive API docs are disabled in production.
    """
    application = FastAPI(
        title=settings.app_title,
        version=settings.app_version,
        debug=settings.debug,
        lifespan=lifespan,
        docs_url="/docs" if not settings.is_production() else None,
        redoc_url=None,
        openapi_url="/openapi.json" if not settings.is_production() else None,
    )

    register_exception_handlers(application)
    application.mount("/static", StaticFiles(directory=STATIC_DIR), name="static")

    application.include_router(health.router)
    application.include_router(auth.router)
    application.include_router(boards.router)
    application.include_router(tasks.router)

    @application.get("/", include_in_schema=False)
    async def root() -> RedirectResponse:
        return RedirectResponse("/boards", status_code=status.HTTP_303_SEE_OTHER)

    return application


app = create_application()


def run() -> None:
    """Console entry point."""
    import uvicorn

    uvicorn.run(
        "taskboard.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.reload,
        log_config=None,  # Use our structured logging
    )


if __name__ == "__main__":
    run()
