"""
User repository for database operations.

Provides async operations on the ``users`` table using asyncpg with
PostgreSQL. Email lookups compare the stored value exactly.
"""

import asyncpg
import structlog
from typing import Optional

from health_api.errors import Conflict
from health_api.models.auth import UserDB
from health_api.repositories.base import BaseRepository

logger = structlog.get_logger(__name__)

USER_COLUMNS = "id, email, password_hash, full_name, created_at"


def _to_user(row: asyncpg.Record) -> UserDB:
    return UserDB(
        id=row["id"],
        email=row["email"],
        password_hash=row["password_hash"],
        full_name=row["full_name"],
        created_at=row["created_at"]
    )


class UserRepository(BaseRepository):
    """Repository for user database operations."""

    async def create_user(
        self,
        email: str,
        password_hash: str,
        full_name: Optional[str] = None
    ) -> UserDB:
        """
        Insert a new user.

        Args:
            email: Email address
            password_hash: Hashed password
            full_name: Display name (optional)

        Returns:
            Created user

        Raises:
            Conflict: If the email already exists
            asyncpg.PostgresError: On database error
        """
        try:
            async with self.connection() as conn:
                row = await conn.fetchrow(
                    f"""
                    INSERT INTO users (email, password_hash, full_name)
                    VALUES ($1, $2, $3)
                    RETURNING {USER_COLUMNS}
                    """,
                    email,
                    password_hash,
                    full_name
                )
        except asyncpg.UniqueViolationError:
            logger.warning("email_already_exists")
            raise Conflict("User with this email already exists")
        except Exception as e:
            logger.error("user_create_failed", error=str(e))
            raise

        logger.info("user_created", user_id=row["id"])
        return _to_user(row)

    async def get_user_by_id(self, user_id: int) -> Optional[UserDB]:
        """
        Get user by ID.

        Args:
            user_id: User ID

        Returns:
            User or None if not found
        """
        try:
            async with self.connection() as conn:
                row = await conn.fetchrow(
                    f"""
                    SELECT {USER_COLUMNS}
                    FROM users
                    WHERE id = $1
                    """,
                    user_id
                )
        except Exception as e:
            logger.error("user_get_by_id_failed", error=str(e), user_id=user_id)
            raise

        if not row:
            logger.debug("user_not_found", user_id=user_id)
            return None

        return _to_user(row)

    async def get_user_by_email(self, email: str) -> Optional[UserDB]:
        """
        Get user by email.

        Args:
            email: Email address, matched case-sensitively

        Returns:
            User or None if not found
        """
        try:
            async with self.connection() as conn:
                row = await conn.fetchrow(
                    f"""
                    SELECT {USER_COLUMNS}
                    FROM users
                    WHERE email = $1
                    """,
                    email
                )
        except Exception as e:
            logger.error("user_get_by_email_failed", error=str(e))
            raise

        if not row:
            logger.debug("user_not_found_by_email")
            return None

        return _to_user(row)
