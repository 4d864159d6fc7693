"""Common Pydantic schemas shared across the API."""

from typing import Any, Optional
from pydantic import BaseModel, Field, field_validator

from core.utils.validators import validate_phone


class ErrorBody(BaseModel):
    """Body of the standard error envelope."""

    code: str = Field(description="Error code for programmatic handling")
    message: str = Field(description="Human readable error message")
    path: str = Field(description="Request path")
    method: str = Field(description="Request method")
    details: Optional[Any] = Field(None, description="Additional error information")


class ErrorResponse(BaseModel):
    """Error response model."""

    error: ErrorBody


class SuccessResponse(BaseModel):
    """Acknowledgement returned by delete operations."""

    success: bool = True


# Error responses documented on every guarded route
ERROR_RESPONSES: dict[int | str, dict[str, Any]] = {
    401: {"model": ErrorResponse, "description": "Not authenticated"},
    403: {"model": ErrorResponse, "description": "Insufficient team role"},
    404: {"model": ErrorResponse, "description": "Resource not found"},
    409: {"model": ErrorResponse, "description": "Conflicting state"},
}


def check_phone(v: Optional[str]) -> Optional[str]:
    """Shared phone validator for request schemas."""
    if v is None:
        return None
    phone = v.strip()
    is_valid, error = validate_phone(phone)
    if not is_valid:
        raise ValueError(error)
    return phone


def strip_text(v: Any) -> Any:
    if isinstance(v, str):
        return v.strip()
    return v


class StrippedModel(BaseModel):
    """Base model that strips surrounding whitespace from string fields."""

    @field_validator("*", mode="before")
    @classmethod
    def strip_strings(cls, v: Any) -> Any:
        return strip_text(v)
