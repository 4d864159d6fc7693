"""Job posting service functions."""

from typing import Any, Dict, Iterable, List, Optional
import logging

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from api.schemas.jobs import JobPostingCreate, JobPostingUpdate
from api.services.identity import require_caller, resolve_caller
from api.services.skills import get_or_create_skills
from api.services.teams import get_team_or_404
from core.exceptions import NotFoundError
from core.middleware.authorization import TeamPermission, check_team_permission
from core.security import CallerIdentity
from core.utils.validators import validate_compensation_range
from database.models.applications import Application
from database.models.jobs import CompensationType, JobPosting, PositionType

logger = logging.getLogger(__name__)


async def get_posting_or_404(
    db: AsyncSession,
    posting_id: int,
    with_skills: bool = False,
) -> JobPosting:
    query = select(JobPosting).where(JobPosting.id == posting_id)
    if with_skills:
        query = query.options(selectinload(JobPosting.required_skills))
    result = await db.execute(query)
    posting = result.scalar_one_or_none()
    if posting is None:
        raise NotFoundError("Job posting not found")
    return posting


async def load_postings(db: AsyncSession, posting_ids: Iterable[int]) -> Dict[int, JobPosting]:
    ids = list(set(posting_ids))
    if not ids:
        return {}
    result = await db.execute(select(JobPosting).where(JobPosting.id.in_(ids)))
    return {posting.id: posting for posting in result.scalars().all()}


def serialize_posting_with_skills(posting: JobPosting) -> Dict[str, Any]:
    """Posting dict including required skills; the collection must be loaded."""
    posting_dict = posting.to_dict()
    posting_dict["required_skills"] = [skill.to_dict() for skill in posting.required_skills]
    return posting_dict


async def create_job_posting(
    db: AsyncSession,
    identity: Optional[CallerIdentity],
    team_id: int,
    data: JobPostingCreate,
) -> Dict[str, Any]:
    """
    Publish a job posting for a team. Owner or admin only.

    Required skills are given by name; unknown names become new skills.

    Returns:
        Dictionary with the job posting id

    Raises:
        DomainValidationError: If the compensation range is inverted
    """
    talent = await require_caller(db, identity)
    team = await get_team_or_404(db, team_id)
    await check_team_permission(db, talent, team.id, TeamPermission.POSTING_MANAGE)

    validate_compensation_range(data.compensation_range.min, data.compensation_range.max)
    skills = await get_or_create_skills(db, data.required_skills)

    posting = JobPosting(
        team_id=team.id,
        title=data.title,
        description=data.description,
        service_style=data.service_style,
        position_type=PositionType(data.position_type),
        specific_position=data.specific_position,
        experience_required=data.experience_required,
        shifts=data.shifts,
        compensation_type=CompensationType(data.compensation_type),
        compensation_min=data.compensation_range.min,
        compensation_max=data.compensation_range.max,
        is_active=True,
        start_date=data.start_date,
        required_skills=skills,
    )
    db.add(posting)
    await db.commit()

    logger.info(f"Talent {talent.id} created job posting {posting.id} for team {team.id}")
    return {"job_posting_id": posting.id}


async def update_job_posting(
    db: AsyncSession,
    identity: Optional[CallerIdentity],
    posting_id: int,
    data: JobPostingUpdate,
) -> Dict[str, Any]:
    """Partially update a job posting. Owner or admin of its team only."""
    talent = await require_caller(db, identity)
    posting = await get_posting_or_404(db, posting_id, with_skills=True)
    await check_team_permission(db, talent, posting.team_id, TeamPermission.POSTING_MANAGE)

    changes = data.model_dump(exclude_unset=True, exclude={"compensation_range", "required_skills"})
    changes = {field: value for field, value in changes.items() if value is not None}

    if data.compensation_range is not None:
        validate_compensation_range(data.compensation_range.min, data.compensation_range.max)
        changes["compensation_min"] = data.compensation_range.min
        changes["compensation_max"] = data.compensation_range.max

    if "position_type" in changes:
        changes["position_type"] = PositionType(changes["position_type"])
    if "compensation_type" in changes:
        changes["compensation_type"] = CompensationType(changes["compensation_type"])

    for field, value in changes.items():
        setattr(posting, field, value)

    if data.required_skills is not None:
        posting.required_skills = await get_or_create_skills(db, data.required_skills)
        changes["required_skills"] = data.required_skills

    if changes:
        await db.commit()
        logger.info(f"Talent {talent.id} updated job posting {posting.id}: {sorted(changes)}")

    return {"job_posting_id": posting.id}


async def deactivate_job_posting(
    db: AsyncSession,
    identity: Optional[CallerIdentity],
    posting_id: int,
) -> Dict[str, Any]:
    """
    Take a posting off the market.

    The row and its applications are kept; the posting just stops
    accepting applications and disappears from searches.
    """
    talent = await require_caller(db, identity)
    posting = await get_posting_or_404(db, posting_id)
    await check_team_permission(db, talent, posting.team_id, TeamPermission.POSTING_MANAGE)

    if posting.is_active:
        posting.is_active = False
        await db.commit()
        logger.info(f"Talent {talent.id} deactivated job posting {posting.id}")

    return {"job_posting_id": posting.id}


async def get_team_job_postings(
    db: AsyncSession,
    identity: Optional[CallerIdentity],
    team_id: int,
    active_only: bool = False,
) -> List[Dict[str, Any]]:
    """
    List a team's postings with required skills and application counts.

    Any member of the team may list them; anonymous callers get nothing.
    """
    talent = await resolve_caller(db, identity)
    if talent is None:
        return []
    await check_team_permission(db, talent, team_id, TeamPermission.POSTING_VIEW)

    query = (
        select(JobPosting)
        .options(selectinload(JobPosting.required_skills))
        .where(JobPosting.team_id == team_id)
        .order_by(JobPosting.created_at.desc(), JobPosting.id.desc())
    )
    if active_only:
        query = query.where(JobPosting.is_active.is_(True))

    result = await db.execute(query)
    postings = result.scalars().all()

    counts: Dict[int, int] = {}
    if postings:
        count_result = await db.execute(
            select(Application.job_posting_id, func.count(Application.id))
            .where(Application.job_posting_id.in_([p.id for p in postings]))
            .group_by(Application.job_posting_id)
        )
        counts = {posting_id: count for posting_id, count in count_result.all()}

    items = []
    for posting in postings:
        posting_dict = serialize_posting_with_skills(posting)
        posting_dict["application_count"] = counts.get(posting.id, 0)
        items.append(posting_dict)
    return items
