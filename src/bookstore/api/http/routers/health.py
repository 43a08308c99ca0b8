"""Health check endpoints router for monitoring service availability."""

from typing import Any

from fastapi import APIRouter, Depends
from starlette.responses import JSONResponse

from src.bookstore.api.http.app_data import ApplicationDependencies
from src.bookstore.api.http.deps import get_app_dependencies

router = APIRouter(prefix="/health", tags=["health"])


@router.get("")
async def health() -> dict[str, str]:
    """Basic health check endpoint - checks if app is running.

    This is a liveness probe that returns 200 OK as long as the application
    process is running. It does not check dependencies.
    """
    return {"status": "healthy"}


@router.get("/ready", response_model=None)
def readiness(
    app_deps: ApplicationDependencies = Depends(get_app_dependencies),
) -> dict[str, Any] | JSONResponse:
    """Readiness check: pings the store for services that use one.

    Returns 200 when ready, 503 when the store does not answer or the books
    collection could not be created yet.
    """
    checks: dict[str, Any] = {}
    all_healthy = True

    if app_deps.database_service is not None:
        db_healthy = app_deps.database_service.health_check()
        checks["database"] = {"status": "healthy" if db_healthy else "unhealthy"}
        all_healthy = db_healthy

    if app_deps.schema is not None:
        collection_ready = all_healthy and app_deps.schema.ensure_collection()
        checks["collection"] = {"status": "ready" if collection_ready else "missing"}
        all_healthy = collection_ready

    if app_deps.read_client is not None:
        checks["read_service"] = {
            "status": "configured",
            "url": app_deps.read_client.base_url,
        }

    response = {
        "status": "ready" if all_healthy else "not_ready",
        "service": app_deps.profile.name,
        "checks": checks,
    }
    if not all_healthy:
        return JSONResponse(status_code=503, content=response)
    return response
