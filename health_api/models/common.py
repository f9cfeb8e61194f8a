"""Response envelope shared by every endpoint."""

from typing import Generic, Optional, TypeVar

from pydantic import BaseModel, Field

DataT = TypeVar("DataT")


class ApiResponse(BaseModel, Generic[DataT]):
    """
    JSON envelope: ``{success, data?, count?, error?, message?}``.

    Routes serialize it with ``response_model_exclude_unset`` so fields
    that were never set are omitted from the body.
    """
    success: bool = Field(
        ...,
        description="Whether the request succeeded"
    )
    data: Optional[DataT] = Field(
        None,
        description="Response payload"
    )
    count: Optional[int] = Field(
        None,
        ge=0,
        description="Number of rows in data (list endpoints)"
    )
    error: Optional[str] = Field(
        None,
        description="Error message"
    )
    message: Optional[str] = Field(
        None,
        description="Human readable outcome"
    )


class ErrorResponse(BaseModel):
    """Error envelope, used for OpenAPI documentation."""
    success: bool = Field(
        default=False,
        description="Always false"
    )
    error: str = Field(
        ...,
        min_length=1,
        description="Error message"
    )
    message: Optional[str] = Field(
        None,
        description="Exception detail (non-production only)"
    )

    model_config = {
        "json_schema_extra": {
            "example": {
                "success": False,
                "error": "Invalid or expired token"
            }
        }
    }
