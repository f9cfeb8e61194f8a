"""
Symptom and medication routers.

Every endpoint requires a bearer token and only ever touches rows owned by
the authenticated user. Deleting a row that does not exist and deleting a
row owned by someone else both answer 404.
"""

from typing import List
from fastapi import APIRouter, Depends, Path, status

from health_api.dependencies import (
    get_current_user,
    get_medication_service,
    get_symptom_service
)
from health_api.models.auth import CurrentUser
from health_api.models.common import ApiResponse, ErrorResponse
from health_api.models.records import (
    MedicationCreate, MedicationRecord, SymptomCreate, SymptomRecord
)
from health_api.services.record_service import MedicationService, SymptomService

# Largest value of a PostgreSQL SERIAL column
MAX_RECORD_ID = 2147483647

_protected_responses = {
    401: {"model": ErrorResponse, "description": "Missing token"},
    403: {"model": ErrorResponse, "description": "Invalid or expired token"}
}

symptoms_router = APIRouter(
    prefix="/symptoms",
    tags=["Symptoms"],
    responses=_protected_responses
)

medications_router = APIRouter(
    prefix="/medications",
    tags=["Medications"],
    responses=_protected_responses
)


# ============================================================================
# SYMPTOM ENDPOINTS
# ============================================================================


@symptoms_router.get(
    "",
    response_model=ApiResponse[List[SymptomRecord]],
    response_model_exclude_unset=True,
    summary="List Symptoms",
    description="The user's symptoms, newest first, at most 100."
)
async def list_symptoms(
    current_user: CurrentUser = Depends(get_current_user),
    service: SymptomService = Depends(get_symptom_service)
) -> ApiResponse[List[SymptomRecord]]:
    symptoms = await service.list(current_user)
    return ApiResponse[List[SymptomRecord]](
        success=True,
        data=symptoms,
        count=len(symptoms)
    )


@symptoms_router.post(
    "",
    response_model=ApiResponse[SymptomRecord],
    response_model_exclude_unset=True,
    status_code=status.HTTP_201_CREATED,
    summary="Add Symptom",
    description="""
    Record a symptom for the authenticated user.

    **Request Body:**
    - description: Required, non-blank
    - intensity: 1 to 10 (default 5)
    - location, notes: Optional text

    **Error Responses:**
    - 400: Blank description or intensity out of range
    """,
    responses={400: {"model": ErrorResponse, "description": "Validation Error"}}
)
async def create_symptom(
    payload: SymptomCreate,
    current_user: CurrentUser = Depends(get_current_user),
    service: SymptomService = Depends(get_symptom_service)
) -> ApiResponse[SymptomRecord]:
    symptom = await service.create(current_user, payload)

    return ApiResponse[SymptomRecord](
        success=True,
        data=symptom,
        message="Symptom added successfully"
    )


@symptoms_router.delete(
    "/{record_id}",
    response_model=ApiResponse[None],
    response_model_exclude_unset=True,
    summary="Delete Symptom",
    responses={404: {"model": ErrorResponse, "description": "Symptom not found"}}
)
async def delete_symptom(
    record_id: int = Path(..., ge=1, le=MAX_RECORD_ID, description="Symptom ID"),
    current_user: CurrentUser = Depends(get_current_user),
    service: SymptomService = Depends(get_symptom_service)
) -> ApiResponse[None]:
    await service.delete(current_user, record_id)
    return ApiResponse[None](success=True, message="Symptom deleted successfully")


# ============================================================================
# MEDICATION ENDPOINTS
# ============================================================================


@medications_router.get(
    "",
    response_model=ApiResponse[List[MedicationRecord]],
    response_model_exclude_unset=True,
    summary="List Medications",
    description="The user's medications ordered by intake time (falling back to creation time), newest first, at most 100."
)
async def list_medications(
    current_user: CurrentUser = Depends(get_current_user),
    service: MedicationService = Depends(get_medication_service)
) -> ApiResponse[List[MedicationRecord]]:
    medications = await service.list(current_user)
    return ApiResponse[List[MedicationRecord]](
        success=True,
        data=medications,
        count=len(medications)
    )


@medications_router.post(
    "",
    response_model=ApiResponse[MedicationRecord],
    response_model_exclude_unset=True,
    status_code=status.HTTP_201_CREATED,
    summary="Add Medication",
    description="""
    Record a medication intake for the authenticated user.

    **Request Body:**
    - name: Required, non-blank
    - dosage, frequency, notes: Optional text
    - taken_at: ISO timestamp (default now)

    **Error Responses:**
    - 400: Blank name or unreadable timestamp
    """,
    responses={400: {"model": ErrorResponse, "description": "Validation Error"}}
)
async def create_medication(
    payload: MedicationCreate,
    current_user: CurrentUser = Depends(get_current_user),
    service: MedicationService = Depends(get_medication_service)
) -> ApiResponse[MedicationRecord]:
    medication = await service.create(current_user, payload)

    return ApiResponse[MedicationRecord](
        success=True,
        data=medication,
        message="Medication added successfully"
    )


@medications_router.delete(
    "/{record_id}",
    response_model=ApiResponse[None],
    response_model_exclude_unset=True,
    summary="Delete Medication",
    responses={404: {"model": ErrorResponse, "description": "Medication not found"}}
)
async def delete_medication(
    record_id: int = Path(..., ge=1, le=MAX_RECORD_ID, description="Medication ID"),
    current_user: CurrentUser = Depends(get_current_user),
    service: MedicationService = Depends(get_medication_service)
) -> ApiResponse[None]:
    await service.delete(current_user, record_id)
    return ApiResponse[None](success=True, message="Medication deleted successfully")
