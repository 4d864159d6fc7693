"""
Tests for request schemas and shared validators.

Tests:
- Weekly schedule normalization
- Phone validation
- Compensation range checks
- Profile, posting and search filter schemas
"""

import pytest
from pydantic import ValidationError

from api.schemas.jobs import JobPostingCreate, JobPostingUpdate
from api.schemas.search import AvailabilityFilter
from api.schemas.talent import TalentProfileRequest
from api.schemas.teams import TeamCreate
from core.exceptions import DomainValidationError
from core.utils.validators import (
    normalize_weekly_schedule,
    validate_compensation_range,
    validate_phone,
)
from tests.factories import posting_payload, profile_payload, team_payload


class TestWeeklySchedule:
    """Test weekday -> shifts normalization."""

    def test_every_weekday_present(self):
        schedule = normalize_weekly_schedule({"Friday": ["Nights", "Nights", "Swing"]})

        assert list(schedule) == [
            "monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday",
        ]
        assert schedule["friday"] == ["Nights", "Swing"]
        assert schedule["monday"] == []

    def test_empty(self):
        assert all(shifts == [] for shifts in normalize_weekly_schedule(None).values())

    def test_unknown_day(self):
        with pytest.raises(ValueError):
            normalize_weekly_schedule({"funday": ["Nights"]})


class TestValidators:
    """Test phone and compensation validators."""

    @pytest.mark.parametrize("phone,valid", [
        ("206-555-0100", True),
        ("+1 (206) 555-0100", True),
        ("555-01", False),
        ("call me", False),
        ("", False),
    ])
    def test_phone(self, phone, valid):
        is_valid, error = validate_phone(phone)
        assert is_valid is valid
        assert (error is None) is valid

    def test_compensation_range(self):
        validate_compensation_range(20, 20)

        with pytest.raises(DomainValidationError) as exc_info:
            validate_compensation_range(30, 20)
        assert exc_info.value.details == {"min": 30, "max": 20}


class TestProfileSchema:
    """Test the talent profile request."""

    def test_strips_and_normalizes(self):
        profile = TalentProfileRequest(
            **profile_payload(
                first_name="  Maria ",
                languages=["English", " English", "Spanish"],
            )
        )

        assert profile.first_name == "Maria"
        assert profile.languages == ["English", "Spanish"]
        assert profile.availability["sunday"] == []

    @pytest.mark.parametrize("field,value", [
        ("last_four_ssn", "12a4"),
        ("email", "not-an-email"),
        ("phone", "12"),
        ("desired_hourly_wage", -1),
        ("first_name", "   "),
    ])
    def test_rejects(self, field, value):
        with pytest.raises(ValidationError):
            TalentProfileRequest(**profile_payload(**{field: value}))


class TestPostingSchemas:
    """Test job posting requests."""

    def test_create(self):
        posting = JobPostingCreate(**posting_payload())

        assert posting.shifts["friday"] == ["Nights"]
        assert posting.compensation_range.min == 20

    @pytest.mark.parametrize("field,value", [
        ("position_type", "Kitchen"),
        ("compensation_type", "weekly"),
        ("compensation_range", {"min": -5, "max": 20}),
    ])
    def test_rejects(self, field, value):
        with pytest.raises(ValidationError):
            JobPostingCreate(**posting_payload(**{field: value}))

    def test_update_tracks_provided_fields(self):
        update = JobPostingUpdate(title="Grill Cook")
        assert update.model_dump(exclude_unset=True) == {"title": "Grill Cook"}

    def test_team_contact_phone(self):
        with pytest.raises(ValidationError):
            TeamCreate(**team_payload(contact_phone="abc"))


class TestAvailabilityFilter:
    """Test the (day, shift) search filter."""

    def test_day_is_normalized(self):
        assert AvailabilityFilter(day=" Monday ", shift="Morning").day == "monday"

    def test_unknown_day(self):
        with pytest.raises(ValidationError):
            AvailabilityFilter(day="someday", shift="Morning")
