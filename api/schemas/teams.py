"""Team API schemas."""

from typing import Optional
from pydantic import EmailStr, Field, field_validator

from api.schemas.common import StrippedModel, check_phone


class TeamCreate(StrippedModel):
    """Schema for creating a team."""

    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    industry: str = Field(..., min_length=1, max_length=100)
    size: Optional[str] = Field(None, max_length=50)
    location: str = Field(..., min_length=1, max_length=100)
    address: Optional[str] = Field(None, max_length=500)
    service_style: str = Field(..., min_length=1, max_length=100)
    contact_email: EmailStr
    contact_phone: Optional[str] = Field(None, max_length=30)

    @field_validator("contact_phone")
    @classmethod
    def validate_phone(cls, v: Optional[str]) -> Optional[str]:
        return check_phone(v)


class TeamUpdate(StrippedModel):
    """Partial team update; omitted or null fields are left unchanged."""

    name: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    industry: Optional[str] = Field(None, min_length=1, max_length=100)
    size: Optional[str] = Field(None, max_length=50)
    location: Optional[str] = Field(None, min_length=1, max_length=100)
    address: Optional[str] = Field(None, max_length=500)
    service_style: Optional[str] = Field(None, min_length=1, max_length=100)
    contact_email: Optional[EmailStr] = None
    contact_phone: Optional[str] = Field(None, max_length=30)

    @field_validator("contact_phone")
    @classmethod
    def validate_phone(cls, v: Optional[str]) -> Optional[str]:
        return check_phone(v)
