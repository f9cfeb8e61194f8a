"""
Authentication router.

Provides REST API endpoints for:
- Account registration
- Login
- Profile of the authenticated user

Register and login are public; ``/auth/me`` requires a bearer token.
"""

from fastapi import APIRouter, Depends, status

from health_api.dependencies import get_auth_service, get_current_user
from health_api.models.auth import (
    AuthPayload, CurrentUser, LoginRequest, RegisterRequest, UserResponse
)
from health_api.models.common import ApiResponse, ErrorResponse
from health_api.services.auth_service import AuthService

auth_router = APIRouter(
    prefix="/auth",
    tags=["Authentication"],
    responses={
        400: {"model": ErrorResponse, "description": "Validation Error"}
    }
)


@auth_router.post(
    "/register",
    response_model=ApiResponse[AuthPayload],
    response_model_exclude_unset=True,
    status_code=status.HTTP_201_CREATED,
    summary="Register",
    description="""
    Create an account and return its first identity token.

    **Authentication:** Not required (public endpoint)

    **Request Body:**
    - email: Valid email address
    - password: At least 6 characters
    - full_name: Optional display name

    **Error Responses:**
    - 400: Missing fields, bad email format or short password
    - 409: Email already registered
    """,
    responses={
        409: {"model": ErrorResponse, "description": "Email already registered"}
    }
)
async def register(
    payload: RegisterRequest,
    auth_service: AuthService = Depends(get_auth_service)
) -> ApiResponse[AuthPayload]:
    result = await auth_service.register(payload)

    return ApiResponse[AuthPayload](
        success=True,
        data=result,
        message="User registered successfully"
    )


@auth_router.post(
    "/login",
    response_model=ApiResponse[AuthPayload],
    response_model_exclude_unset=True,
    status_code=status.HTTP_200_OK,
    summary="User Login",
    description="""
    Authenticate with email and password.

    Returns the user and a JWT identity token valid for 7 days.

    **Authentication:** Not required (public endpoint)

    **Error Responses:**
    - 400: Email or password missing
    - 401: Invalid email or password
    """,
    responses={
        401: {
            "description": "Invalid credentials",
            "model": ErrorResponse,
            "content": {
                "application/json": {
                    "example": {"success": False, "error": "Invalid email or password"}
                }
            }
        }
    }
)
async def login(
    payload: LoginRequest,
    auth_service: AuthService = Depends(get_auth_service)
) -> ApiResponse[AuthPayload]:
    """
    Authenticate user and return a JWT token.

    Args:
        payload: Login credentials
        auth_service: Authentication service

    Returns:
        Envelope with user and token
    """
    result = await auth_service.login(payload)

    return ApiResponse[AuthPayload](
        success=True,
        data=result,
        message="Login successful"
    )


@auth_router.get(
    "/me",
    response_model=ApiResponse[UserResponse],
    response_model_exclude_unset=True,
    summary="Current User",
    responses={
        401: {"model": ErrorResponse, "description": "Missing token"},
        403: {"model": ErrorResponse, "description": "Invalid or expired token"},
        404: {"model": ErrorResponse, "description": "User no longer exists"}
    }
)
async def me(
    current_user: CurrentUser = Depends(get_current_user),
    auth_service: AuthService = Depends(get_auth_service)
) -> ApiResponse[UserResponse]:
    """Profile of the user the token was issued to."""
    profile = await auth_service.get_profile(current_user.id)
    return ApiResponse[UserResponse](success=True, data=profile)
