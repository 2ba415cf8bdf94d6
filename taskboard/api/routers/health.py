"""Health check endpoint."""

from fastapi import APIRouter, Depends

from taskboard.api.dependencies import get_store
from taskboard.api.schemas import HealthStatus
from taskboard.config import settings
from taskboard.core.board_store import BoardStore

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthStatus)
async def health_check(store: BoardStore = Depends(get_store)) -> HealthStatus:
    """Health check endpoint for load balancers and monitoring."""
    stats = await store.stats()

    return HealthStatus(
        status="healthy",
        service="taskboard",
        version=settings.app_version,
        environment=settings.get_environment_display(),
        boards=stats["boards"],
        tasks=stats["tasks"],
        tasks_done=stats["tasks_done"],
    )
