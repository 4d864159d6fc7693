"""Job posting API schemas."""

from typing import Literal, Optional
from pydantic import BaseModel, Field, field_validator

from api.schemas.common import StrippedModel
from core.utils.validators import normalize_weekly_schedule

PositionTypeLiteral = Literal["BOH", "FOH"]
CompensationTypeLiteral = Literal["hourly", "salary"]


class CompensationRange(BaseModel):
    """Pay range. Ordering (min <= max) is enforced by the posting service."""

    min: float = Field(..., ge=0)
    max: float = Field(..., ge=0)


class JobPostingCreate(StrippedModel):
    """Schema for creating a job posting."""

    title: str = Field(..., min_length=1, max_length=255)
    description: str = Field(..., min_length=1)
    service_style: str = Field(..., min_length=1, max_length=100)
    position_type: PositionTypeLiteral
    specific_position: str = Field(..., min_length=1, max_length=100)
    experience_required: str = Field(..., min_length=1, max_length=50)
    required_skills: list[str] = Field(default_factory=list, description="Skill names")
    shifts: dict[str, list[str]] = Field(
        default_factory=dict, description="Weekday -> required shifts"
    )
    compensation_type: CompensationTypeLiteral
    compensation_range: CompensationRange
    start_date: Optional[str] = Field(None, max_length=100)

    @field_validator("shifts")
    @classmethod
    def validate_shifts(cls, v: dict[str, list[str]]) -> dict[str, list[str]]:
        return normalize_weekly_schedule(v)


class JobPostingUpdate(StrippedModel):
    """Partial job posting update."""

    title: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = Field(None, min_length=1)
    service_style: Optional[str] = Field(None, min_length=1, max_length=100)
    position_type: Optional[PositionTypeLiteral] = None
    specific_position: Optional[str] = Field(None, min_length=1, max_length=100)
    experience_required: Optional[str] = Field(None, min_length=1, max_length=50)
    required_skills: Optional[list[str]] = None
    shifts: Optional[dict[str, list[str]]] = None
    compensation_type: Optional[CompensationTypeLiteral] = None
    compensation_range: Optional[CompensationRange] = None
    is_active: Optional[bool] = None
    start_date: Optional[str] = Field(None, max_length=100)

    @field_validator("shifts")
    @classmethod
    def validate_shifts(cls, v: Optional[dict[str, list[str]]]) -> Optional[dict[str, list[str]]]:
        if v is None:
            return None
        return normalize_weekly_schedule(v)
