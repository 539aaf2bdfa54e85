"""
Health Check Endpoints

Provides health and readiness checks for orchestration systems.
"""

from datetime import datetime, timezone
from typing import Any, Dict

from fastapi import APIRouter, Depends, Request, Response
from pydantic import BaseModel

from foodchop.config import Settings
from foodchop.serving.api.dependencies import get_settings_dependency

router = APIRouter()


class HealthResponse(BaseModel):
    """Health check response"""
    status: str
    version: str
    environment: str
    timestamp: datetime
    checks: Dict[str, Any]


async def _storage_health(request: Request) -> Dict[str, Any]:
    backend = getattr(request.app.state, "backend", None)
    if backend is None:
        return {"status": "unhealthy", "error": "storage not initialized"}
    health = await backend.health()
    return {"backend": backend.name, **health}


@router.get("/health", response_model=HealthResponse)
async def health_check(
    request: Request,
    settings: Settings = Depends(get_settings_dependency),
) -> HealthResponse:
    """
    Comprehensive health check endpoint.
    
    Checks:
    - Application status
    - Storage backend connectivity
    """
    storage = await _storage_health(request)
    overall_status = "healthy" if storage.get("status") == "healthy" else "unhealthy"
    
    return HealthResponse(
        status=overall_status,
        version=settings.version,
        environment=settings.app_env,
        timestamp=datetime.now(timezone.utc),
        checks={"storage": storage},
    )


@router.get("/health/live")
async def liveness_check() -> Dict[str, str]:
    """
    Kubernetes liveness probe endpoint.
    
    Returns 200 if the application is running.
    """
    return {"status": "alive"}


@router.get("/health/ready")
async def readiness_check(request: Request, response: Response) -> Dict[str, str]:
    """
    Kubernetes readiness probe endpoint.
    
    Returns 200 if the storage backend can serve requests.
    """
    storage = await _storage_health(request)
    if storage.get("status") != "healthy":
        response.status_code = 503
        return {"status": "not_ready", "reason": "storage_unavailable"}
    return {"status": "ready"}
