"""Search filter schemas."""

from typing import Optional
from pydantic import BaseModel, Field, field_validator

from api.schemas.jobs import CompensationTypeLiteral, PositionTypeLiteral
from database.models.talent import WEEKDAYS


class AvailabilityFilter(BaseModel):
    """A single (weekday, shift) availability requirement."""

    day: str
    shift: str = Field(..., min_length=1)

    @field_validator("day")
    @classmethod
    def validate_day(cls, v: str) -> str:
        day = v.strip().lower()
        if day not in WEEKDAYS:
            raise ValueError(f"Day must be one of: {', '.join(WEEKDAYS)}")
        return day


class JobSearchFilters(BaseModel):
    """Filters for the advanced job posting search. Omitted filters match everything."""

    position_type: Optional[PositionTypeLiteral] = None
    specific_position: Optional[str] = None
    service_style: Optional[str] = None
    compensation_type: Optional[CompensationTypeLiteral] = None
    compensation_min: Optional[float] = Field(None, ge=0)
    compensation_max: Optional[float] = Field(None, ge=0)
    availability: Optional[AvailabilityFilter] = None
    required_skills: Optional[list[str]] = Field(
        None, description="Skill names; postings requiring any of them match"
    )
    location: Optional[str] = None


class TalentSearchFilters(BaseModel):
    """Filters for the applicant search. Omitted filters match everything."""

    position: Optional[str] = None
    location: Optional[str] = Field(None, description="Interested working area")
    experience_level: Optional[str] = None
    service_style: Optional[str] = None
    availability: Optional[AvailabilityFilter] = None
    skill_names: Optional[list[str]] = Field(
        None, description="Every name must exist; talent with any of them match"
    )
