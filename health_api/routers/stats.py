"""Statistics router."""

from fastapi import APIRouter, Depends

from health_api.dependencies import get_current_user, get_stats_service
from health_api.models.auth import CurrentUser
from health_api.models.common import ApiResponse, ErrorResponse
from health_api.models.stats import UserStats
from health_api.services.stats_service import StatsService

stats_router = APIRouter(
    prefix="/stats",
    tags=["Statistics"],
    responses={
        401: {"model": ErrorResponse, "description": "Missing token"},
        403: {"model": ErrorResponse, "description": "Invalid or expired token"}
    }
)


@stats_router.get(
    "",
    response_model=ApiResponse[UserStats],
    response_model_exclude_unset=True,
    summary="User Statistics",
    description="""
    Summary of the authenticated user's records.

    **Success Response (200):**
    - counts: Number of symptoms and medications
    - intensity_stats: Symptom count and percentage per intensity level
    - recent_symptoms: The five newest symptoms
    - timestamp: Time the summary was computed
    """
)
async def get_stats(
    current_user: CurrentUser = Depends(get_current_user),
    stats_service: StatsService = Depends(get_stats_service)
) -> ApiResponse[UserStats]:
    stats = await stats_service.compute_stats(current_user.id)
    return ApiResponse[UserStats](success=True, data=stats)
