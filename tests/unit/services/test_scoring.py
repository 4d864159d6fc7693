"""
Tests for compatibility scoring and match compensation.

Tests:
- Each scoring criterion in isolation
- Full and empty scores
- Stable ranking
- Compensation derivation for hourly and salaried postings
- Skill categorization
"""

import pytest

from api.services.scoring import (
    AVAILABILITY_POINTS,
    COMPENSATION_POINTS,
    LOCATION_POINTS,
    MAX_SCORE,
    POSITION_POINTS,
    SERVICE_STYLE_POINTS,
    calculate_match_score,
    derive_compensation_amount,
    has_availability_overlap,
    is_compensation_fit,
    rank_by_score,
)
from database.models.jobs import CompensationType, JobPosting, PositionType
from database.models.talent import SkillCategory, Talent, categorize_skill, empty_availability


def make_talent(**overrides) -> Talent:
    fields = {
        "position_preferences": [],
        "service_style_preferences": [],
        "interested_working_area": "Islands",
        "availability": empty_availability(),
        "desired_hourly_wage": None,
        "desired_yearly_salary": None,
    }
    fields.update(overrides)
    return Talent(**fields)


def make_posting(**overrides) -> JobPosting:
    fields = {
        "specific_position": "Server",
        "service_style": "Fast casual",
        "position_type": PositionType.FOH,
        "shifts": empty_availability(),
        "compensation_type": CompensationType.HOURLY,
        "compensation_min": 18.0,
        "compensation_max": 22.0,
    }
    fields.update(overrides)
    return JobPosting(**fields)


# ==================== Individual criteria ==================== #

class TestScoringCriteria:
    """Each criterion adds its fixed points."""

    def test_position_match(self):
        talent = make_talent(position_preferences=["Server"])
        assert calculate_match_score(talent, make_posting(), None) == POSITION_POINTS

    def test_service_style_match(self):
        talent = make_talent(service_style_preferences=["Fast casual"])
        assert calculate_match_score(talent, make_posting(), None) == SERVICE_STYLE_POINTS

    def test_location_match_uses_team_location(self):
        talent = make_talent(interested_working_area="Downtown/SLU")
        assert calculate_match_score(talent, make_posting(), "Downtown/SLU") == LOCATION_POINTS
        assert calculate_match_score(talent, make_posting(), "Islands") == 0

    def test_location_without_team_scores_nothing(self):
        talent = make_talent(interested_working_area="Downtown/SLU")
        assert calculate_match_score(talent, make_posting(), None) == 0

    def test_availability_overlap_on_any_day(self):
        availability = empty_availability()
        availability["tuesday"] = ["Swing"]
        shifts = empty_availability()
        shifts["tuesday"] = ["Morning", "Swing"]

        talent = make_talent(availability=availability)
        posting = make_posting(shifts=shifts)
        assert calculate_match_score(talent, posting, None) == AVAILABILITY_POINTS

    def test_same_shift_on_different_days_does_not_overlap(self):
        assert not has_availability_overlap({"monday": ["Nights"]}, {"tuesday": ["Nights"]})

    def test_overlap_tolerates_missing_days(self):
        assert has_availability_overlap({"friday": ["Nights"]}, {"friday": ["Nights"]})
        assert not has_availability_overlap(None, {"friday": ["Nights"]})


class TestCompensationFit:
    """Desired rate of the posting's compensation type within [min, max]."""

    @pytest.mark.parametrize("wage,fits", [
        (17.99, False),
        (18.0, True),
        (20.0, True),
        (22.0, True),
        (22.01, False),
    ])
    def test_hourly_bounds_are_inclusive(self, wage, fits):
        talent = make_talent(desired_hourly_wage=wage)
        assert is_compensation_fit(talent, make_posting()) is fits

    def test_salary_posting_reads_yearly_salary(self):
        posting = make_posting(
            compensation_type=CompensationType.SALARY,
            compensation_min=40000.0,
            compensation_max=60000.0,
        )
        talent = make_talent(desired_hourly_wage=20.0, desired_yearly_salary=50000.0)
        assert calculate_match_score(talent, posting, None) == COMPENSATION_POINTS

    def test_missing_desired_rate_never_fits(self):
        talent = make_talent(desired_yearly_salary=50000.0)
        assert not is_compensation_fit(talent, make_posting())


# ==================== Totals and ranking ==================== #

class TestScoreTotals:
    """Scores are additive between 0 and MAX_SCORE."""

    def test_all_criteria_score_100(self):
        availability = empty_availability()
        availability["friday"] = ["Nights"]
        talent = make_talent(
            position_preferences=["Server"],
            service_style_preferences=["Fast casual"],
            interested_working_area="Downtown/SLU",
            availability=availability,
            desired_hourly_wage=20.0,
        )
        posting = make_posting(shifts=dict(availability))

        assert MAX_SCORE == 100
        assert calculate_match_score(talent, posting, "Downtown/SLU") == 100

    def test_no_criteria_score_0(self):
        assert calculate_match_score(make_talent(), make_posting(), "Downtown/SLU") == 0


class TestRanking:
    """Ranking is descending and stable."""

    def test_descending_order(self):
        assert rank_by_score(["a", "b", "c"], [15, 100, 50]) == ["b", "c", "a"]

    def test_ties_keep_input_order(self):
        assert rank_by_score(["first", "second", "third"], [20, 50, 20]) == [
            "second",
            "first",
            "third",
        ]

    def test_empty(self):
        assert rank_by_score([], []) == []


# ==================== Compensation and skills ==================== #

class TestCompensationDerivation:
    """Amount recorded on a new match."""

    def test_hourly_uses_midpoint(self):
        assert derive_compensation_amount(CompensationType.HOURLY, 20, 28) == 24
        assert derive_compensation_amount(CompensationType.HOURLY, 18, 22) == 20

    def test_salary_uses_minimum(self):
        assert derive_compensation_amount(CompensationType.SALARY, 40000, 60000) == 40000


class TestSkillCategorization:
    """New skills are categorized from the static lists."""

    @pytest.mark.parametrize("name,category", [
        ("Knife skills", SkillCategory.BOH),
        ("Sauté", SkillCategory.BOH),
        ("Wine knowledge", SkillCategory.FOH),
        ("POS Toast", SkillCategory.FOH),
        ("Team player", SkillCategory.GENERAL),
        ("knife skills", SkillCategory.GENERAL),
    ])
    def test_categorize(self, name, category):
        assert categorize_skill(name) == category
