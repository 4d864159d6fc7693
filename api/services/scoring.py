"""
Talent / job posting compatibility scoring.

The score ranks search results and never filters them. Each criterion adds a
fixed number of points; a posting that satisfies all five scores 100.
"""

from typing import Iterable, Mapping, Optional, Sequence, TypeVar

from database.models.jobs import CompensationType, JobPosting
from database.models.talent import Talent, WEEKDAYS

POSITION_POINTS = 30
SERVICE_STYLE_POINTS = 20
LOCATION_POINTS = 20
AVAILABILITY_POINTS = 15
COMPENSATION_POINTS = 15

MAX_SCORE = (
    POSITION_POINTS
    + SERVICE_STYLE_POINTS
    + LOCATION_POINTS
    + AVAILABILITY_POINTS
    + COMPENSATION_POINTS
)

T = TypeVar("T")


def has_availability_overlap(
    available: Optional[Mapping[str, Iterable[str]]],
    required: Optional[Mapping[str, Iterable[str]]],
) -> bool:
    """True if on some weekday the talent offers a shift the posting needs."""
    available = available or {}
    required = required or {}
    for day in WEEKDAYS:
        if set(available.get(day) or ()) & set(required.get(day) or ()):
            return True
    return False


def desired_rate_for(talent: Talent, compensation_type: CompensationType) -> Optional[float]:
    if compensation_type == CompensationType.HOURLY:
        return talent.desired_hourly_wage
    return talent.desired_yearly_salary


def is_compensation_fit(talent: Talent, posting: JobPosting) -> bool:
    desired = desired_rate_for(talent, posting.compensation_type)
    if desired is None:
        return False
    return posting.compensation_min <= desired <= posting.compensation_max


def calculate_match_score(
    talent: Talent,
    posting: JobPosting,
    team_location: Optional[str],
) -> int:
    """
    Score how well a posting fits a talent's preferences.

    Args:
        talent: Talent doing the search
        posting: Candidate posting
        team_location: Location of the posting's team

    Returns:
        Additive score between 0 and MAX_SCORE
    """
    score = 0

    if posting.specific_position in (talent.position_preferences or []):
        score += POSITION_POINTS

    if posting.service_style in (talent.service_style_preferences or []):
        score += SERVICE_STYLE_POINTS

    if team_location is not None and talent.interested_working_area == team_location:
        score += LOCATION_POINTS

    if has_availability_overlap(talent.availability, posting.shifts):
        score += AVAILABILITY_POINTS

    if is_compensation_fit(talent, posting):
        score += COMPENSATION_POINTS

    return score


def rank_by_score(items: Sequence[T], scores: Sequence[int]) -> list[T]:
    """Order items by descending score, keeping input order on ties."""
    ranked = sorted(zip(items, scores), key=lambda pair: -pair[1])
    return [item for item, _ in ranked]


def derive_compensation_amount(
    compensation_type: CompensationType,
    minimum: float,
    maximum: float,
) -> float:
    """
    Compensation recorded on a new match.

    Hourly postings use the midpoint of the range, salaried postings the
    minimum.
    """
    if compensation_type == CompensationType.HOURLY:
        return (minimum + maximum) / 2
    return minimum
