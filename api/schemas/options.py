"""Predefined option schemas."""

from typing import Optional
from pydantic import Field

from api.schemas.common import StrippedModel


class PredefinedOptionCreate(StrippedModel):
    """Schema for adding an option to a category."""

    category: str = Field(..., min_length=1, max_length=100)
    value: str = Field(..., min_length=1, max_length=255)
    display_name: str = Field(..., min_length=1, max_length=255)
    is_active: bool = True
    order: Optional[int] = Field(None, ge=0, description="Defaults to the end of the category")


class PredefinedOptionUpdate(StrippedModel):
    """Partial option update."""

    display_name: Optional[str] = Field(None, min_length=1, max_length=255)
    is_active: Optional[bool] = None
    order: Optional[int] = Field(None, ge=0)
