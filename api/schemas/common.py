"""Common Pydantic schemas shared across the API."""

from typing import Any, Optional
from pydantic import BaseModel, Field


class ErrorDetail(BaseModel):
    """Body of an error response."""

    code: str = Field(description="Error code for programmatic handling")
    message: str = Field(description="Sanitized, human-readable message")
    path: str = Field(description="Request path")
    method: str = Field(description="Request method")
    details: Optional[Any] = Field(None, description="Validation details, if any")
    request_id: Optional[str] = Field(None, description="Request correlation id")


class ErrorResponse(BaseModel):
    """Error response model."""

    error: ErrorDetail


ERROR_RESPONSES: dict[int | str, dict[str, Any]] = {
    403: {"model": ErrorResponse, "description": "Credential does not match the interview"},
    404: {"model": ErrorResponse, "description": "Interview not found"},
    409: {"model": ErrorResponse, "description": "Transition not allowed in the current state"},
    422: {"model": ErrorResponse, "description": "Request validation failed"},
}
