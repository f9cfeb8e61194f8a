"""
SQLAlchemy table declarations for the health diary schema.

The service talks to PostgreSQL through asyncpg with hand-written SQL; these
declarative models document the expected tables and are compiled to DDL by
``health_api.repositories.schema`` when schema creation is enabled.

Uses SQLAlchemy 2.0 declarative syntax.
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import (
    CheckConstraint, DateTime, ForeignKey, Index, Integer, String, Text, text
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Base class for all table declarations."""
    pass


class User(Base):
    """
    User account.

    Email uniqueness is enforced by the database; lookups are
    case-sensitive on the stored value.
    """
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True
    )
    email: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        nullable=False
    )
    password_hash: Mapped[str] = mapped_column(
        String(255),
        nullable=False
    )
    full_name: Mapped[Optional[str]] = mapped_column(
        String(255),
        nullable=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=text("CURRENT_TIMESTAMP")
    )

    def __repr__(self) -> str:
        """String representation."""
        return f"<User(id={self.id}, email='{self.email}')>"


class Symptom(Base):
    """Symptom entry owned by a user."""
    __tablename__ = "symptoms"

    id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True
    )
    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False
    )
    description: Mapped[str] = mapped_column(
        Text,
        nullable=False
    )
    intensity: Mapped[Optional[int]] = mapped_column(
        Integer,
        nullable=True,
        server_default=text("5")
    )
    location: Mapped[Optional[str]] = mapped_column(
        String(255),
        nullable=True,
        server_default=text("''")
    )
    notes: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
        server_default=text("''")
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=text("CURRENT_TIMESTAMP")
    )

    __table_args__ = (
        CheckConstraint(
            "intensity IS NULL OR intensity BETWEEN 1 AND 10",
            name="ck_symptoms_intensity_range"
        ),
        Index("idx_symptoms_user_created", "user_id", "created_at"),
    )


class Medication(Base):
    """Medication intake entry owned by a user."""
    __tablename__ = "medications"

    id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True
    )
    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False
    )
    name: Mapped[str] = mapped_column(
        String(255),
        nullable=False
    )
    dosage: Mapped[Optional[str]] = mapped_column(
        String(100),
        nullable=True,
        server_default=text("''")
    )
    frequency: Mapped[Optional[str]] = mapped_column(
        String(100),
        nullable=True,
        server_default=text("''")
    )
    taken_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        nullable=True
    )
    notes: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
        server_default=text("''")
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=text("CURRENT_TIMESTAMP")
    )

    __table_args__ = (
        Index("idx_medications_user_id", "user_id"),
    )
