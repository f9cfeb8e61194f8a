"""
JWT authentication gateway for FastAPI.

Provides:
- Bearer token extraction from the Authorization header
- Token verification through the token service
- Request context enrichment with the authenticated identity

A missing or malformed header is rejected with 401; a token that fails
verification is rejected with 403. Verification is stateless per request.
"""

import structlog
from typing import Optional

from fastapi import Request

from health_api.errors import Forbidden, InvalidToken, Unauthorized
from health_api.models.auth import CurrentUser
from health_api.services.token_service import TokenService

logger = structlog.get_logger(__name__)


class AuthGateway:
    """Resolves the identity behind an Authorization header."""

    def __init__(self, token_service: TokenService):
        """
        Initialize auth gateway.

        Args:
            token_service: Token service used for verification
        """
        self.token_service = token_service

    def extract_token(self, authorization: Optional[str]) -> str:
        """
        Extract the token from a ``Bearer <token>`` header value.

        Args:
            authorization: Raw Authorization header (may be None)

        Returns:
            Token string

        Raises:
            Unauthorized: If the header is absent, uses another scheme,
                or carries no token
        """
        if not authorization:
            raise Unauthorized("Access token not provided")

        parts = authorization.split()

        if len(parts) != 2 or parts[0].lower() != "bearer":
            logger.warning("auth_malformed_header")
            raise Unauthorized("Access token not provided")

        return parts[1]

    def authenticate(self, authorization: Optional[str]) -> CurrentUser:
        """
        Verify the header's token and return the identity it carries.

        Raises:
            Unauthorized: If no bearer token is present
            Forbidden: If the token is invalid or expired
        """
        token = self.extract_token(authorization)

        try:
            payload = self.token_service.verify(token)
        except InvalidToken:
            raise Forbidden("Invalid or expired token")

        return CurrentUser(id=payload.user_id, email=payload.email)

    async def __call__(self, request: Request) -> CurrentUser:
        """
        Authenticate a request and attach the identity to ``request.state``.

        Args:
            request: HTTP request

        Returns:
            Current user
        """
        try:
            current_user = self.authenticate(request.headers.get("Authorization"))
        except (Unauthorized, Forbidden) as e:
            logger.warning(
                "auth_rejected",
                path=request.url.path,
                method=request.method,
                status_code=e.status_code,
                client=request.client.host if request.client else None
            )
            raise

        request.state.user = current_user
        logger.debug(
            "request_authenticated",
            path=request.url.path,
            method=request.method,
            user_id=current_user.id
        )
        return current_user


def get_current_user_from_request(request: Request) -> Optional[CurrentUser]:
    """
    Get the identity attached to a request by the gateway, if any.

    Args:
        request: HTTP request

    Returns:
        Current user or None if the request was not authenticated
    """
    return getattr(request.state, "user", None)
