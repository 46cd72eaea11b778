"""
Health check endpoints.

Provides liveness and readiness probes with storage connectivity checks.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Request, Response, status
from pydantic import BaseModel

from pixelpack.db.store import DatabaseStore

router = APIRouter(tags=["health"])


def get_store(request: Request) -> DatabaseStore:
    """Dependency that provides the durable store."""
    store: DatabaseStore = request.app.state.store
    return store


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    database: str | None = None


@router.get("/health", response_model=HealthResponse)
async def health() -> HealthResponse:
    """
    Liveness probe.

    Returns healthy if the service is running.
    Does not check dependencies.
    """
    return HealthResponse(status="healthy")


@router.get(
    "/ready",
    response_model=HealthResponse,
    responses={503: {"model": HealthResponse}},
)
async def ready(
    response: Response,
    store: Annotated[DatabaseStore, Depends(get_store)],
) -> HealthResponse:
    """
    Readiness probe.

    Checks storage connectivity. Returns 503 if the database is unavailable.
    """
    try:
        await store.ping()
        return HealthResponse(status="ready", database="connected")
    except Exception:
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
        return HealthResponse(status="not ready", database="disconnected")
