"""Per-user statistics schemas."""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field


class StatsCounts(BaseModel):
    symptoms: int = Field(0, ge=0)
    medications: int = Field(0, ge=0)


class IntensityBucket(BaseModel):
    """Share of intensity-tagged symptoms at one intensity value."""
    intensity: int = Field(..., ge=1, le=10)
    count: int = Field(..., ge=1)
    percentage: float = Field(
        ...,
        ge=0,
        le=100,
        description="Share of tagged symptoms, rounded to 2 decimals"
    )


class RecentSymptom(BaseModel):
    id: int
    description: str
    intensity: Optional[int] = None
    created_at: datetime


class UserStats(BaseModel):
    """Aggregates returned by GET /api/stats."""
    counts: StatsCounts
    intensity_stats: List[IntensityBucket] = Field(default_factory=list)
    recent_symptoms: List[RecentSymptom] = Field(default_factory=list)
    timestamp: datetime
