"""
Health check route.
"""
from fastapi import APIRouter, Request
from blockpaste.models import HealthCheck

router = APIRouter()


@router.get("/api/healthz", response_model=HealthCheck)
async def health_check(request: Request) -> HealthCheck:
    """
    Health check endpoint.
    Returns 200 with ok=true if the block store answers a ping.
    """
    is_healthy = await request.app.state.database.is_healthy()
    return HealthCheck(ok=is_healthy)
