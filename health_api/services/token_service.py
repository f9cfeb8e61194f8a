"""
Identity token issuance and verification (python-jose).

Tokens are stateless: validity is decided by signature and expiry alone.
Every verification failure is reported as the same ``InvalidToken`` error so
callers cannot tell an expired token from a forged or malformed one.
"""

import structlog
from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import JWTError, jwt
from pydantic import ValidationError as PydanticValidationError

from health_api.config import Settings, get_settings
from health_api.errors import InvalidToken
from health_api.models.auth import TokenPayload

logger = structlog.get_logger(__name__)


class TokenService:
    """Issues and verifies signed, time-limited identity tokens."""

    def __init__(self, settings: Optional[Settings] = None):
        """
        Initialize token service.

        Args:
            settings: Application settings holding the signing key
        """
        self.settings = settings or get_settings()
        self.lifetime = timedelta(days=self.settings.jwt_expire_days)

    @property
    def expires_in(self) -> int:
        """Token lifetime in seconds."""
        return int(self.lifetime.total_seconds())

    def issue(self, user_id: int, email: str, now: Optional[datetime] = None) -> str:
        """
        Create a signed identity token.

        Args:
            user_id: User ID
            email: User email
            now: Issue time (defaults to the current UTC time)

        Returns:
            JWT token string
        """
        issued_at = now or datetime.now(timezone.utc)
        expire = issued_at + self.lifetime

        payload = {
            "sub": str(user_id),
            "email": email,
            "iat": int(issued_at.timestamp()),
            "exp": int(expire.timestamp()),
        }

        token = jwt.encode(
            payload,
            self.settings.jwt_secret_key,
            algorithm=self.settings.jwt_algorithm
        )

        logger.info("identity_token_issued", user_id=user_id, expires_in=self.expires_in)
        return token

    def verify(self, token: str) -> TokenPayload:
        """
        Verify signature and expiry and return the claims.

        Args:
            token: JWT token string

        Returns:
            Decoded token payload

        Raises:
            InvalidToken: If the token is malformed, badly signed, expired
                or missing required claims
        """
        try:
            claims = jwt.decode(
                token,
                self.settings.jwt_secret_key,
                algorithms=[self.settings.jwt_algorithm],
                options={"require_exp": True, "require_iat": True, "require_sub": True}
            )
            payload = TokenPayload(**claims)
        except (JWTError, PydanticValidationError, TypeError) as e:
            logger.warning("token_verification_failed", reason=type(e).__name__)
            raise InvalidToken()

        logger.debug("token_verified", user_id=payload.user_id)
        return payload
