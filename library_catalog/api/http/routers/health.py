"""Health check endpoints router for monitoring service availability."""

from typing import Any

from fastapi import APIRouter, Request
from starlette.responses import JSONResponse

from library_catalog.api.http.app_data import ApplicationDependencies
from library_catalog.runtime.context import get_config

SERVICE_NAME = "library-catalog"

router = APIRouter(prefix="/health", tags=["health"])


@router.get("")
async def health() -> dict[str, str]:
    """Liveness probe: 200 OK as long as the process is running."""
    return {"status": "healthy", "service": SERVICE_NAME}


@router.get("/ready", response_model=None)
def readiness(request: Request) -> dict[str, Any] | JSONResponse:
    """Readiness probe: 200 when the database answers, 503 otherwise."""
    app_deps: ApplicationDependencies | None = getattr(
        request.app.state, "app_dependencies", None
    )
    config = get_config()

    if app_deps is None:
        checks = {"database": {"status": "unhealthy", "error": "not initialized"}}
        db_healthy = False
    else:
        db_healthy = app_deps.database_service.health_check()
        checks = {
            "database": {
                "status": "healthy" if db_healthy else "unhealthy",
                "type": "sqlite" if config.database.is_sqlite else "server",
            }
        }

    body = {
        "status": "ready" if db_healthy else "not_ready",
        "service": SERVICE_NAME,
        "checks": checks,
    }
    if not db_healthy:
        return JSONResponse(status_code=503, content=body)
    return body
