"""Health check endpoints router for monitoring service availability."""

from typing import Any

from fastapi import APIRouter, Request
from starlette.responses import JSONResponse

from caretrek.api.http.app_data import ApplicationDependencies
from caretrek.runtime.context import get_config

router = APIRouter(prefix="/health", tags=["health"])


@router.get("")
async def health() -> dict[str, str]:
    """Liveness probe: 200 as long as the process is up. Checks no dependencies."""
    return {"status": "healthy", "service": get_config().app.name}


@router.get("/ready", response_model=None)
async def readiness(request: Request) -> dict[str, Any] | JSONResponse:
    """Readiness probe over the database and the scheduler.

    Returns 200 when every check passes, 503 otherwise.
    """
    app_deps: ApplicationDependencies | None = getattr(
        request.app.state, "app_dependencies", None
    )
    if app_deps is None:
        return JSONResponse(
            status_code=503,
            content={"status": "not_ready", "reason": "application not started"},
        )

    config = get_config()
    checks: dict[str, dict[str, Any]] = {}
    all_healthy = True

    try:
        db_healthy = app_deps.database_service.health_check()
        checks["database"] = {
            "status": "healthy" if db_healthy else "unhealthy",
            "type": "sqlite" if config.database.is_sqlite else "postgresql",
            "pool": app_deps.database_service.get_pool_status(),
        }
        all_healthy = all_healthy and db_healthy
    except Exception as e:
        checks["database"] = {"status": "unhealthy", "error": str(e)}
        all_healthy = False

    scheduler = app_deps.scheduler_service
    if config.scheduler.enabled:
        checks["scheduler"] = {
            "status": "healthy" if scheduler.running else "unhealthy",
            "jobs": scheduler.job_names,
        }
        all_healthy = all_healthy and scheduler.running
    else:
        checks["scheduler"] = {"status": "disabled"}

    body = {"status": "ready" if all_healthy else "not_ready", "checks": checks}
    if not all_healthy:
        return JSONResponse(status_code=503, content=body)
    return body
