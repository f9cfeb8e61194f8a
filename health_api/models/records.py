"""
Symptom and medication schemas.

Create schemas ignore unknown fields, so a client-supplied ``user_id`` or
``id`` never reaches the repositories. Defaults for optional fields are
applied by the record services.
"""

from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, Field, field_validator

MIN_INTENSITY = 1
MAX_INTENSITY = 10
DEFAULT_INTENSITY = 5


def _required_text(value: str, label: str) -> str:
    stripped = value.strip()
    if not stripped:
        raise ValueError(f"{label} is required")
    return stripped


# ============================================================================
# Symptoms
# ============================================================================


class SymptomCreate(BaseModel):
    """Symptom creation request."""
    description: str = Field(
        ...,
        max_length=2000,
        description="What the user felt"
    )
    intensity: Optional[int] = Field(
        None,
        ge=MIN_INTENSITY,
        le=MAX_INTENSITY,
        description="Severity from 1 to 10 (default 5)"
    )
    location: Optional[str] = Field(
        None,
        max_length=255,
        description="Body location"
    )
    notes: Optional[str] = Field(
        None,
        description="Free-form notes"
    )

    @field_validator("description")
    @classmethod
    def validate_description(cls, v: str) -> str:
        return _required_text(v, "Symptom description")

    model_config = {
        "extra": "ignore",
        "json_schema_extra": {
            "example": {
                "description": "Headache",
                "intensity": 6,
                "location": "Forehead",
                "notes": "After lunch"
            }
        }
    }


class SymptomRecord(BaseModel):
    """Stored symptom."""
    id: int
    user_id: int
    description: str
    intensity: Optional[int] = None
    location: Optional[str] = None
    notes: Optional[str] = None
    created_at: datetime

    model_config = {
        "from_attributes": True
    }


# ============================================================================
# Medications
# ============================================================================


class MedicationCreate(BaseModel):
    """Medication intake request."""
    name: str = Field(
        ...,
        max_length=255,
        description="Medication name"
    )
    dosage: Optional[str] = Field(
        None,
        max_length=100,
        description="Dose taken, e.g. 200mg"
    )
    frequency: Optional[str] = Field(
        None,
        max_length=100,
        description="How often it is taken"
    )
    taken_at: Optional[datetime] = Field(
        None,
        description="Intake time (defaults to now)"
    )
    notes: Optional[str] = Field(
        None,
        description="Free-form notes"
    )

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        return _required_text(v, "Medication name")

    @field_validator("taken_at")
    @classmethod
    def assume_utc(cls, v: Optional[datetime]) -> Optional[datetime]:
        """Treat timestamps without an offset as UTC."""
        if v is not None and v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v

    model_config = {
        "extra": "ignore",
        "json_schema_extra": {
            "example": {
                "name": "Ibuprofen",
                "dosage": "200mg",
                "frequency": "twice a day",
                "taken_at": "2025-01-15T10:30:00Z"
            }
        }
    }


class MedicationRecord(BaseModel):
    """Stored medication intake."""
    id: int
    user_id: int
    name: str
    dosage: Optional[str] = None
    frequency: Optional[str] = None
    taken_at: Optional[datetime] = None
    notes: Optional[str] = None
    created_at: datetime

    model_config = {
        "from_attributes": True
    }
