"""Liveness and readiness probes."""

from typing import Any

from fastapi import APIRouter, Request
from starlette.responses import JSONResponse

from src.pricebook.api.http.app_data import ApplicationDependencies
from src.pricebook.runtime.context import get_config

router = APIRouter(prefix="/health", tags=["health"])


def _database_check(deps: ApplicationDependencies) -> dict[str, Any]:
    backend = deps.database_service.engine.url.get_backend_name()
    try:
        healthy = deps.database_service.health_check()
    except Exception as e:
        return {"status": "unhealthy", "type": backend, "error": str(e)}
    return {"status": "healthy" if healthy else "unhealthy", "type": backend}


@router.get("")
async def health() -> dict[str, str]:
    """Answers while the process is up; no dependency is checked."""
    return {"status": "healthy", "service": "pricebook"}


@router.get("/ready", response_model=None)
async def readiness(request: Request) -> dict[str, Any] | JSONResponse:
    """200 when the database answers, 503 otherwise."""
    database = _database_check(request.app.state.app_dependencies)
    ready = database["status"] == "healthy"
    body = {
        "status": "ready" if ready else "not_ready",
        "environment": get_config().app.environment,
        "checks": {"database": database},
    }
    return body if ready else JSONResponse(status_code=503, content=body)
