"""
Search service functions.

Scalar filters run in SQL; filters on JSON columns (availability, shift
grids, preference lists) run on the loaded rows.
"""

from typing import Any, Dict, List, Optional, Sequence
import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from api.schemas.search import AvailabilityFilter, JobSearchFilters, TalentSearchFilters
from api.services.identity import resolve_caller
from api.services.jobs import serialize_posting_with_skills
from api.services.scoring import calculate_match_score, rank_by_score
from api.services.skills import resolve_skill_ids
from api.services.talent import load_talent_languages, load_talent_skills, serialize_public_talent
from core.exceptions import ForbiddenError
from core.middleware.authorization import TeamPermission, get_teams_with_permission
from core.security import CallerIdentity
from database.models.jobs import (
    CompensationType,
    JobPosting,
    PositionType,
    job_posting_skills,
)
from database.models.talent import Talent, TalentSkill
from database.models.teams import Team

logger = logging.getLogger(__name__)


def offers_shift(schedule: Optional[Dict[str, Sequence[str]]], wanted: AvailabilityFilter) -> bool:
    """True if the weekly schedule lists the wanted shift on the wanted day."""
    return wanted.shift in ((schedule or {}).get(wanted.day) or [])


def _team_summary(team: Team) -> Dict[str, Any]:
    return {
        "id": team.id,
        "name": team.name,
        "location": team.location,
        "service_style": team.service_style,
    }


def _active_postings_query(
    location: Optional[str] = None,
    position_type: Optional[str] = None,
    specific_position: Optional[str] = None,
    service_style: Optional[str] = None,
):
    query = (
        select(JobPosting, Team)
        .join(Team, Team.id == JobPosting.team_id)
        .options(selectinload(JobPosting.required_skills))
        .where(JobPosting.is_active.is_(True))
        .order_by(JobPosting.created_at, JobPosting.id)
    )
    if location:
        query = query.where(Team.location == location)
    if position_type:
        query = query.where(JobPosting.position_type == PositionType(position_type))
    if specific_position:
        query = query.where(JobPosting.specific_position == specific_position)
    if service_style:
        query = query.where(JobPosting.service_style == service_style)
    return query


async def search_job_postings_for_talent(
    db: AsyncSession,
    identity: Optional[CallerIdentity],
    location: Optional[str] = None,
    position_type: Optional[str] = None,
    specific_position: Optional[str] = None,
    service_style: Optional[str] = None,
) -> List[Dict[str, Any]]:
    """
    Active postings matching the filters, ranked by fit with the caller.

    Each posting carries its team and a ``match_score``; the score only
    orders the results, it never excludes a posting.
    """
    talent = await resolve_caller(db, identity)
    if talent is None:
        return []

    result = await db.execute(
        _active_postings_query(location, position_type, specific_position, service_style)
    )
    rows = result.all()

    items = []
    scores = []
    for posting, team in rows:
        score = calculate_match_score(talent, posting, team.location)
        item = serialize_posting_with_skills(posting)
        item["team"] = _team_summary(team)
        item["match_score"] = score
        items.append(item)
        scores.append(score)

    return rank_by_score(items, scores)


async def advanced_search_job_postings(
    db: AsyncSession,
    identity: Optional[CallerIdentity],
    filters: JobSearchFilters,
) -> List[Dict[str, Any]]:
    """
    Active postings matching every given filter.

    The compensation filters select postings whose range overlaps the
    requested one. Required skills match postings needing any of the named
    skills; names that do not exist are ignored.
    """
    if identity is None:
        return []

    query = _active_postings_query(
        filters.location,
        filters.position_type,
        filters.specific_position,
        filters.service_style,
    )
    if filters.compensation_type:
        query = query.where(
            JobPosting.compensation_type == CompensationType(filters.compensation_type)
        )
    if filters.compensation_min is not None:
        query = query.where(JobPosting.compensation_max >= filters.compensation_min)
    if filters.compensation_max is not None:
        query = query.where(JobPosting.compensation_min <= filters.compensation_max)
    if filters.required_skills:
        skill_ids, _ = await resolve_skill_ids(db, filters.required_skills)
        query = query.where(
            JobPosting.id.in_(
                select(job_posting_skills.c.job_posting_id).where(
                    job_posting_skills.c.skill_id.in_(skill_ids)
                )
            )
        )

    result = await db.execute(query)

    items = []
    for posting, team in result.all():
        if filters.availability and not offers_shift(posting.shifts, filters.availability):
            continue
        item = serialize_posting_with_skills(posting)
        item["team"] = _team_summary(team)
        items.append(item)
    return items


async def search_talent(
    db: AsyncSession,
    identity: Optional[CallerIdentity],
    filters: TalentSearchFilters,
) -> List[Dict[str, Any]]:
    """
    Search talent profiles for hiring. Owners and admins only.

    All given filters must hold. When skill names are given, every name
    must exist (otherwise nothing matches) and talent with any of those
    skills match. Contact details and eligibility data are never returned.
    Anonymous callers and callers without a profile get an empty list.

    Raises:
        ForbiddenError: If the caller manages no team
    """
    talent = await resolve_caller(db, identity)
    if talent is None:
        return []

    if not await get_teams_with_permission(db, talent.id, TeamPermission.TALENT_SEARCH):
        logger.warning(f"Talent {talent.id} attempted a talent search without managing a team")
        raise ForbiddenError("You don't have permission to search talent")

    query = select(Talent).order_by(Talent.id)
    if filters.location:
        query = query.where(Talent.interested_working_area == filters.location)
    if filters.experience_level:
        query = query.where(Talent.experience_level == filters.experience_level)
    if filters.skill_names:
        skill_ids, all_resolved = await resolve_skill_ids(db, filters.skill_names)
        if not all_resolved or not skill_ids:
            return []
        query = query.where(
            Talent.id.in_(
                select(TalentSkill.talent_id).where(TalentSkill.skill_id.in_(skill_ids))
            )
        )

    result = await db.execute(query)

    matched = []
    for profile in result.scalars().all():
        if filters.position and filters.position not in (profile.position_preferences or []):
            continue
        if filters.service_style and filters.service_style not in (
            profile.service_style_preferences or []
        ):
            continue
        if filters.availability and not offers_shift(profile.availability, filters.availability):
            continue
        matched.append(profile)

    ids = [profile.id for profile in matched]
    skills = await load_talent_skills(db, ids)
    languages = await load_talent_languages(db, ids)

    logger.info(f"Talent {talent.id} searched talent: {len(matched)} results")
    return [
        serialize_public_talent(profile, skills[profile.id], languages[profile.id])
        for profile in matched
    ]
