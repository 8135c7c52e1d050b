"""
System API routes.
"""
import time

from fastapi import APIRouter

from decision_engine import __version__
from decision_engine.api.dependencies import app_state, get_pipeline
from decision_engine.api.models import HealthResponse, StatsResponse

router = APIRouter(prefix="/api", tags=["System"])


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """
    System health check.

    Returns status, version, uptime, and service health.
    """
    uptime = time.time() - app_state.start_time if app_state.start_time else 0

    services = {"api": "healthy"}

    if app_state.recorder is not None:
        healthy = await app_state.recorder.health_check()
        services["database"] = "healthy" if healthy else "unhealthy"
    else:
        services["database"] = "unknown"

    services["notifications"] = "configured" if app_state.notifier else "disabled"

    # The engine keeps serving with a broken store
    status = "healthy" if services["database"] == "healthy" else "degraded"

    return HealthResponse(
        status=status,
        version=__version__,
        uptime_seconds=uptime,
        services=services,
    )


@router.get("/stats", response_model=StatsResponse)
async def get_stats() -> StatsResponse:
    """Intake and alerting counters since startup."""
    intake = get_pipeline().get_stats()
    alerts = app_state.notifier.get_stats() if app_state.notifier else {}

    return StatsResponse(
        signals_accepted=intake["accepted"],
        signals_rejected=intake["rejected"],
        alerts_sent=alerts.get("alerts_sent", 0),
        alerts_failed=alerts.get("alerts_failed", 0),
    )
