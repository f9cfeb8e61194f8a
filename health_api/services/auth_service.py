"""
Authentication service: registration, login and profile lookup.

Combines the credential store (users and password hashes) with the token
service (identity tokens).
"""

import structlog
from typing import Optional

from health_api.config import Settings, get_settings
from health_api.errors import ValidationError
from health_api.models.auth import (
    AuthPayload, LoginRequest, RegisterRequest, UserResponse
)
from health_api.services.credential_store import CredentialStore
from health_api.services.token_service import TokenService

logger = structlog.get_logger(__name__)


class AuthService:
    """Service for account operations exposed under /auth."""

    def __init__(
        self,
        credential_store: CredentialStore,
        token_service: TokenService,
        settings: Optional[Settings] = None
    ):
        """
        Initialize auth service.

        Args:
            credential_store: Credential store
            token_service: Token service
            settings: Application settings
        """
        self.credential_store = credential_store
        self.token_service = token_service
        self.settings = settings or get_settings()

    async def register(self, request: RegisterRequest) -> AuthPayload:
        """
        Create an account and issue its first token.

        Args:
            request: Registration data

        Returns:
            Created user and identity token

        Raises:
            ValidationError: If the password is too short
            Conflict: If the email is already registered
        """
        min_length = self.settings.password_min_length
        if len(request.password) < min_length:
            raise ValidationError(f"Password must be at least {min_length} characters long")

        user = await self.credential_store.create_user(
            request.email,
            request.password,
            request.full_name
        )
        token = self.token_service.issue(user.id, user.email)

        logger.info("user_registered", user_id=user.id)
        return AuthPayload(user=user, token=token)

    async def login(self, request: LoginRequest) -> AuthPayload:
        """
        Check credentials and issue a token.

        Args:
            request: Login credentials

        Returns:
            User and identity token

        Raises:
            Unauthorized: If the credentials are invalid
        """
        user = await self.credential_store.authenticate(request.email, request.password)
        token = self.token_service.issue(user.id, user.email)

        logger.info("login_success", user_id=user.id)
        return AuthPayload(user=UserResponse.from_db(user), token=token)

    async def get_profile(self, user_id: int) -> UserResponse:
        """
        Load the profile of the authenticated user.

        Raises:
            NotFound: If the user no longer exists
        """
        user = await self.credential_store.find_by_id(user_id)
        return UserResponse.from_db(user)
