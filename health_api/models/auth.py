"""
Authentication and user models.

Provides Pydantic schemas for:
- Registration and login requests
- Stored users and their public representation
- JWT token payloads
- The authenticated identity attached to a request
"""

from datetime import datetime
from typing import Optional
import re

from pydantic import BaseModel, Field, field_validator

EMAIL_PATTERN = re.compile(r"[^\s@]+@[^\s@]+\.[^\s@]+")


# ============================================================================
# Pydantic Request Models
# ============================================================================


class RegisterRequest(BaseModel):
    """
    Registration request schema.

    The email is stored exactly as given; lookups are case-sensitive.
    Password length is checked by the auth service against settings.
    """
    email: str = Field(
        ...,
        min_length=1,
        max_length=255,
        description="Email address"
    )
    password: str = Field(
        ...,
        min_length=1,
        max_length=128,
        description="Password"
    )
    full_name: Optional[str] = Field(
        None,
        max_length=255,
        description="Display name"
    )

    @field_validator("email")
    @classmethod
    def validate_email(cls, v: str) -> str:
        """Validate email format."""
        if not EMAIL_PATTERN.fullmatch(v):
            raise ValueError("Invalid email format")
        return v

    @field_validator("full_name")
    @classmethod
    def normalize_full_name(cls, v: Optional[str]) -> Optional[str]:
        """Store blank names as missing."""
        if v is None or not v.strip():
            return None
        return v.strip()

    model_config = {
        "json_schema_extra": {
            "example": {
                "email": "a@b.com",
                "password": "abcdef",
                "full_name": "Ada Lovelace"
            }
        }
    }


class LoginRequest(BaseModel):
    """Login request schema."""
    email: str = Field(
        ...,
        min_length=1,
        description="Email address"
    )
    password: str = Field(
        ...,
        min_length=1,
        description="Password"
    )

    model_config = {
        "json_schema_extra": {
            "example": {
                "email": "a@b.com",
                "password": "abcdef"
            }
        }
    }


# ============================================================================
# User Models
# ============================================================================


class UserDB(BaseModel):
    """User row as stored, including the password hash."""
    id: int
    email: str
    password_hash: str
    full_name: Optional[str] = None
    created_at: Optional[datetime] = None

    model_config = {
        "from_attributes": True
    }


class UserResponse(BaseModel):
    """Public user representation (never carries the hash)."""
    id: int = Field(
        ...,
        description="User ID"
    )
    email: str = Field(
        ...,
        description="Email address"
    )
    full_name: Optional[str] = Field(
        None,
        description="Display name"
    )
    created_at: Optional[datetime] = Field(
        None,
        description="Registration timestamp"
    )

    @classmethod
    def from_db(cls, user: UserDB) -> "UserResponse":
        return cls(
            id=user.id,
            email=user.email,
            full_name=user.full_name,
            created_at=user.created_at
        )


class AuthPayload(BaseModel):
    """Body of a successful register or login."""
    user: UserResponse
    token: str = Field(
        ...,
        min_length=10,
        description="JWT identity token"
    )


# ============================================================================
# Token Models
# ============================================================================


class TokenPayload(BaseModel):
    """
    JWT token claims.

    ``sub`` carries the user ID as a string, as required by the JWT
    registered claim rules.
    """
    sub: str = Field(
        ...,
        pattern=r"^\d+$",
        description="Subject (user ID)"
    )
    email: str = Field(
        ...,
        description="Email address"
    )
    iat: int = Field(
        ...,
        description="Issued at timestamp (Unix epoch)"
    )
    exp: int = Field(
        ...,
        description="Expiration timestamp (Unix epoch)"
    )

    @property
    def user_id(self) -> int:
        return int(self.sub)


class CurrentUser(BaseModel):
    """
    Authenticated identity of the request.

    Injected into handlers by the auth gateway; every owner-scoped query
    takes its user ID from here.
    """
    id: int = Field(
        ...,
        description="User ID"
    )
    email: str = Field(
        ...,
        description="Email address"
    )

    model_config = {
        "frozen": True
    }
