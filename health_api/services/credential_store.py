"""
Credential store: user persistence plus password hashing.

Passwords are hashed with bcrypt through passlib; each hash carries its own
random salt. Hashing is CPU bound, so the async entry points run it in the
threadpool instead of on the event loop.
"""

import structlog
from typing import Optional

from passlib.context import CryptContext
from starlette.concurrency import run_in_threadpool

from health_api.config import Settings, get_settings
from health_api.errors import Conflict, NotFound, Unauthorized
from health_api.models.auth import UserDB, UserResponse
from health_api.repositories.user_repo import UserRepository

logger = structlog.get_logger(__name__)

INVALID_CREDENTIALS = "Invalid email or password"


class CredentialStore:
    """Creates users and checks their passwords."""

    def __init__(self, user_repo: UserRepository, settings: Optional[Settings] = None):
        """
        Initialize credential store.

        Args:
            user_repo: User repository
            settings: Application settings (bcrypt cost)
        """
        self.user_repo = user_repo
        self.settings = settings or get_settings()

        self.pwd_context = CryptContext(
            schemes=["bcrypt"],
            deprecated="auto",
            bcrypt__rounds=self.settings.password_bcrypt_rounds
        )

    def hash_password(self, password: str) -> str:
        """
        Hash a password using bcrypt.

        Args:
            password: Plain text password

        Returns:
            Hashed password
        """
        return self.pwd_context.hash(password)

    def verify_password(self, plain_password: str, hashed_password: str) -> bool:
        """
        Verify a password against its hash.

        Args:
            plain_password: Plain text password
            hashed_password: Hashed password

        Returns:
            True if password matches, False otherwise (including unreadable hashes)
        """
        try:
            return self.pwd_context.verify(plain_password, hashed_password)
        except (ValueError, TypeError) as e:
            logger.error("password_verify_failed", error=str(e))
            return False

    async def create_user(
        self,
        email: str,
        password: str,
        full_name: Optional[str] = None
    ) -> UserResponse:
        """
        Register a new user.

        Args:
            email: Email address (stored as given)
            password: Plain text password
            full_name: Display name (optional)

        Returns:
            Created user, without the password hash

        Raises:
            Conflict: If the email is already registered
        """
        existing = await self.user_repo.get_user_by_email(email)
        if existing:
            logger.warning("registration_conflict")
            raise Conflict("User with this email already exists")

        password_hash = await run_in_threadpool(self.hash_password, password)
        user = await self.user_repo.create_user(email, password_hash, full_name)

        return UserResponse.from_db(user)

    async def find_by_email(self, email: str) -> UserDB:
        """
        Raises:
            NotFound: If no user has this email
        """
        user = await self.user_repo.get_user_by_email(email)
        if not user:
            raise NotFound("User not found")
        return user

    async def find_by_id(self, user_id: int) -> UserDB:
        """
        Raises:
            NotFound: If no user has this ID
        """
        user = await self.user_repo.get_user_by_id(user_id)
        if not user:
            raise NotFound("User not found")
        return user

    async def authenticate(self, email: str, password: str) -> UserDB:
        """
        Check an email/password pair.

        Unknown emails and wrong passwords fail with the same error; a
        dummy verification keeps their timing alike.

        Raises:
            Unauthorized: If the credentials do not match a user
        """
        user = await self.user_repo.get_user_by_email(email)

        if not user:
            await run_in_threadpool(self.pwd_context.dummy_verify)
            logger.warning("authentication_failed_user_not_found")
            raise Unauthorized(INVALID_CREDENTIALS)

        verified = await run_in_threadpool(self.verify_password, password, user.password_hash)
        if not verified:
            logger.warning("authentication_failed_invalid_password", user_id=user.id)
            raise Unauthorized(INVALID_CREDENTIALS)

        logger.info("user_authenticated", user_id=user.id)
        return user
