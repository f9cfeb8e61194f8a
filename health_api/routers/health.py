"""
Health router.

``GET /health`` probes the database on every call. An unreachable database
is reported with HTTP 500 and ``success: false``; the probe itself never
raises.
"""

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from health_api.dependencies import get_health_service
from health_api.models.common import ApiResponse
from health_api.models.health import HealthReport, HealthStatus
from health_api.services.health_service import HealthService

health_router = APIRouter(tags=["Health"])


@health_router.get(
    "/health",
    response_model=ApiResponse[HealthReport],
    response_model_exclude_unset=True,
    summary="Health Check",
    responses={
        500: {"model": ApiResponse[HealthReport], "description": "Database unreachable"}
    }
)
async def health_check(
    health_service: HealthService = Depends(get_health_service)
):
    """
    Health check endpoint.

    Verifies database connectivity and reports service metadata.

    Returns:
        Health report envelope (500 when unhealthy)
    """
    report = await health_service.check()

    if report.status == HealthStatus.UNHEALTHY.value:
        body = ApiResponse[HealthReport](
            success=False,
            data=report,
            error="Database connection failed"
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=body.model_dump(mode="json", exclude_unset=True)
        )

    return ApiResponse[HealthReport](success=True, data=report)
