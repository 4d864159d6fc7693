"""Talent profile API schemas."""

from typing import Optional
from pydantic import EmailStr, Field, field_validator

from api.schemas.common import StrippedModel, check_phone
from core.utils.validators import normalize_weekly_schedule


class TalentProfileRequest(StrippedModel):
    """
    Full talent profile. Saving replaces every field, skill and language.
    """

    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    phone: str = Field(..., max_length=30)
    profile_picture_url: Optional[str] = None

    last_four_ssn: str = Field(..., pattern=r"^\d{4}$", description="Last four SSN digits")
    legally_work_in_us: bool
    in_hospitality_industry: bool
    over_21: bool

    living_area: str = Field(..., min_length=1, max_length=100)
    interested_working_area: str = Field(..., min_length=1, max_length=100)
    commute_methods: list[str] = Field(default_factory=list)
    service_style_preferences: list[str] = Field(default_factory=list)
    position_preferences: list[str] = Field(default_factory=list)
    experience_level: str = Field(..., min_length=1, max_length=50)
    availability: dict[str, list[str]] = Field(
        default_factory=dict, description="Weekday -> available shifts"
    )

    last_job_name: Optional[str] = Field(None, max_length=255)
    last_job_position: Optional[str] = Field(None, max_length=100)
    last_job_duration: Optional[str] = Field(None, max_length=100)
    last_job_leave_reason: Optional[str] = None
    last_job_contactable: Optional[bool] = None

    desired_hourly_wage: Optional[float] = Field(None, ge=0)
    desired_yearly_salary: Optional[float] = Field(None, ge=0)
    start_date_preference: str = Field(..., min_length=1, max_length=100)

    skills: list[str] = Field(default_factory=list, description="Skill names")
    languages: list[str] = Field(default_factory=list)
    additional_notes: Optional[str] = None

    @field_validator("phone")
    @classmethod
    def validate_phone(cls, v: str) -> str:
        return check_phone(v)

    @field_validator("availability")
    @classmethod
    def validate_availability(cls, v: dict[str, list[str]]) -> dict[str, list[str]]:
        """Every weekday is present; unknown day names are rejected."""
        return normalize_weekly_schedule(v)

    @field_validator("languages")
    @classmethod
    def dedupe_languages(cls, v: list[str]) -> list[str]:
        languages: list[str] = []
        for language in v:
            language = language.strip()
            if language and language not in languages:
                languages.append(language)
        return languages
