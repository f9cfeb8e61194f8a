"""Health probe models."""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class HealthStatus(str, Enum):
    """Health status enum."""

    HEALTHY = "healthy"
    UNHEALTHY = "unhealthy"


class DatabaseStatus(str, Enum):
    CONNECTED = "connected"
    DISCONNECTED = "disconnected"


class DatabaseHealth(BaseModel):
    status: DatabaseStatus = Field(..., description="Database connectivity")
    time: Optional[datetime] = Field(None, description="Database server clock")
    version: Optional[str] = Field(None, description="Short server version")

    model_config = {
        "use_enum_values": True
    }


class HealthReport(BaseModel):
    """Service health including database connectivity."""

    status: HealthStatus = Field(..., description="Overall service status")
    timestamp: datetime = Field(..., description="Report time")
    service: str = Field(..., description="Service name")
    version: str = Field(..., description="Service version")
    environment: str = Field(..., description="Deployment environment")
    database: DatabaseHealth = Field(..., description="Database status")
    uptime_seconds: float = Field(..., ge=0, description="Process uptime in seconds")
    error: Optional[str] = Field(None, description="Probe failure detail (non-production only)")

    model_config = {
        "use_enum_values": True
    }
