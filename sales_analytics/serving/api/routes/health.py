"""
Health Check Endpoints

Liveness for the dashboard and a readiness probe for orchestration.
"""

from typing import Dict

from fastapi import APIRouter, Response, status

from sales_analytics.analytics.schemas import ApiResponse, HealthStatus
from sales_analytics.database.connection import check_database_health
from sales_analytics.database.models import utcnow

router = APIRouter()

HEALTH_MESSAGE = "Analytics API is running"


@router.get(
    "/health",
    response_model=ApiResponse[HealthStatus],
    response_model_exclude_none=True,
)
async def health_check() -> ApiResponse[HealthStatus]:
    """Returns 200 while the process is serving requests."""
    return ApiResponse(
        message=HEALTH_MESSAGE,
        data=HealthStatus(message=HEALTH_MESSAGE, timestamp=utcnow()),
    )


@router.get("/health/ready")
async def readiness_check(response: Response) -> Dict[str, str]:
    """
    Readiness probe.

    Returns 200 when the database answers, 503 otherwise.
    """
    db_health = await check_database_health()

    if db_health.get("status") != "healthy":
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
        return {"status": "not_ready", "reason": "database_unavailable"}

    return {"status": "ready"}
