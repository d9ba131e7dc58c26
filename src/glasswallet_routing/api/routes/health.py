"""Health check routes."""

from fastapi import APIRouter, Request

router = APIRouter(tags=["health"])


@router.get("/health")
async def health():
    return {"status": "healthy", "service": "glasswallet-routing-api", "version": "1.0.0"}


@router.get("/ready")
async def ready(request: Request):
    """Readiness check - at least one agent is registered."""
    agents = len(request.app.state.router.registry)
    if agents:
        return {"status": "ready", "agents": agents}
    return {"status": "not_ready", "detail": "No agents registered"}
