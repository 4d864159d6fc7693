"""
Application service functions.

Covers applying, the applicant's and the team's views of applications, and
the application lifecycle:

    (apply)  -> pending
    pending  -> withdrawn   applicant only
    pending  -> rejected    team owner/admin
    pending  -> matched     team owner/admin, creates a Match and a membership

Every other transition raises InvalidTransition.
"""

from typing import Any, Dict, List, Optional
import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from api.schemas.applications import ApplicationStatusUpdate, ApplyRequest
from api.services.identity import require_caller, resolve_caller
from api.services.jobs import get_posting_or_404, load_postings
from api.services.scoring import derive_compensation_amount
from api.services.talent import load_talent_languages, load_talent_skills, load_talents
from api.services.teams import load_teams
from core.exceptions import ConflictError, ForbiddenError, InvalidTransition, NotFoundError
from core.middleware.authorization import (
    MANAGER_ROLES,
    TeamPermission,
    can_act,
    check_team_permission,
    get_membership,
)
from core.security import CallerIdentity
from database.models.applications import Application, ApplicationStatus, Match, MatchStatus
from database.models.jobs import JobPosting
from database.models.teams import Team, TeamMember, TeamRole

logger = logging.getLogger(__name__)

DEFAULT_START_DATE = "Immediately"


async def get_application_or_404(db: AsyncSession, application_id: int) -> Application:
    result = await db.execute(select(Application).where(Application.id == application_id))
    application = result.scalar_one_or_none()
    if application is None:
        raise NotFoundError("Application not found")
    return application


def _team_summary(team: Optional[Team], with_contact: bool = False) -> Optional[Dict[str, Any]]:
    if team is None:
        return None
    summary = {
        "id": team.id,
        "name": team.name,
        "location": team.location,
        "service_style": team.service_style,
    }
    if with_contact:
        summary["contact_email"] = team.contact_email
        summary["contact_phone"] = team.contact_phone
    return summary


def _posting_summary(posting: JobPosting) -> Dict[str, Any]:
    return {
        "id": posting.id,
        "title": posting.title,
        "specific_position": posting.specific_position,
        "shifts": posting.shifts,
        "compensation_type": posting.compensation_type.value,
        "compensation_range": posting.compensation_range,
    }


# ==================== Talent side ==================== #

async def apply_to_job(
    db: AsyncSession,
    identity: Optional[CallerIdentity],
    data: ApplyRequest,
) -> Dict[str, Any]:
    """
    Apply the caller to an active job posting.

    Returns:
        Dictionary with the application id, job title and team name

    Raises:
        NotFoundError: If the posting does not exist or is inactive
        ConflictError: If the caller already applied to this posting
    """
    talent = await require_caller(db, identity)

    result = await db.execute(select(JobPosting).where(JobPosting.id == data.job_posting_id))
    posting = result.scalar_one_or_none()
    if posting is None or not posting.is_active:
        raise NotFoundError("Job posting not found or inactive")

    existing = await db.execute(
        select(Application.id).where(
            Application.talent_id == talent.id,
            Application.job_posting_id == posting.id,
        )
    )
    if existing.scalar_one_or_none() is not None:
        raise ConflictError("You have already applied to this job posting")

    application = Application(
        talent_id=talent.id,
        job_posting_id=posting.id,
        status=ApplicationStatus.PENDING,
        notes=data.notes,
    )
    db.add(application)
    await db.commit()

    teams = await load_teams(db, [posting.team_id])
    team = teams.get(posting.team_id)

    logger.info(
        f"Talent {talent.id} applied to job posting {posting.id} (application {application.id})",
        extra={"talent_id": talent.id},
    )
    return {
        "application_id": application.id,
        "job_title": posting.title,
        "team_name": team.name if team else None,
    }


async def get_my_applications(
    db: AsyncSession,
    identity: Optional[CallerIdentity],
) -> List[Dict[str, Any]]:
    """Caller's applications with their posting and team, newest first."""
    talent = await resolve_caller(db, identity)
    if talent is None:
        return []

    result = await db.execute(
        select(Application)
        .where(Application.talent_id == talent.id)
        .order_by(Application.created_at.desc(), Application.id.desc())
    )
    applications = result.scalars().all()

    postings = await load_postings(db, [a.job_posting_id for a in applications])
    teams = await load_teams(db, [p.team_id for p in postings.values()])

    items = []
    for application in applications:
        posting = postings.get(application.job_posting_id)
        if posting is None:
            continue
        item = application.to_dict()
        item["job_posting"] = _posting_summary(posting)
        item["team"] = _team_summary(teams.get(posting.team_id))
        items.append(item)
    return items


async def withdraw_application(
    db: AsyncSession,
    identity: Optional[CallerIdentity],
    application_id: int,
) -> Dict[str, Any]:
    """
    Withdraw one of the caller's own pending applications.

    Raises:
        ForbiddenError: If the application belongs to someone else
        InvalidTransition: If the application is no longer pending
    """
    talent = await require_caller(db, identity)
    application = await get_application_or_404(db, application_id)

    if application.talent_id != talent.id:
        logger.warning(
            f"Talent {talent.id} attempted to withdraw application {application.id} "
            f"of talent {application.talent_id}"
        )
        raise ForbiddenError("Not authorized to withdraw this application")

    if application.status != ApplicationStatus.PENDING:
        raise InvalidTransition(
            f"Cannot withdraw an application that is {application.status.value}",
            details={"from": application.status.value, "to": ApplicationStatus.WITHDRAWN.value},
        )

    application.status = ApplicationStatus.WITHDRAWN
    await db.commit()

    logger.info(f"Talent {talent.id} withdrew application {application.id}")
    return {"application_id": application.id}


async def get_application_details(
    db: AsyncSession,
    identity: Optional[CallerIdentity],
    application_id: int,
) -> Optional[Dict[str, Any]]:
    """
    Full view of one application, for the applicant or a team manager.

    The applicant's email and phone are only shown to the applicant
    themselves, or to the team once the application has led to a match.
    """
    talent = await resolve_caller(db, identity)
    if talent is None:
        return None

    application = await get_application_or_404(db, application_id)
    posting = await get_posting_or_404(db, application.job_posting_id)

    is_applicant = application.talent_id == talent.id
    if not is_applicant and not await can_act(db, talent.id, posting.team_id, MANAGER_ROLES):
        logger.warning(f"Talent {talent.id} denied access to application {application.id}")
        raise ForbiddenError("Not authorized to view this application")

    teams = await load_teams(db, [posting.team_id])
    applicants = await load_talents(db, [application.talent_id])
    applicant = applicants.get(application.talent_id)

    match_result = await db.execute(
        select(Match).where(Match.application_id == application.id).order_by(Match.id)
    )
    matches = match_result.scalars().all()

    applicant_view = None
    if applicant is not None:
        applicant_view = {
            "id": applicant.id,
            "first_name": applicant.first_name,
            "last_name": applicant.last_name,
        }
        if is_applicant or matches:
            applicant_view["email"] = applicant.email
            applicant_view["phone"] = applicant.phone

    details = application.to_dict()
    details["job_posting"] = posting.to_dict()
    details["team"] = _team_summary(teams.get(posting.team_id), with_contact=True)
    details["applicant"] = applicant_view
    details["matches"] = [match.to_dict() for match in matches]
    return details


# ==================== Team side ==================== #

async def get_team_applications(
    db: AsyncSession,
    identity: Optional[CallerIdentity],
    team_id: int,
    status: Optional[ApplicationStatus] = None,
) -> List[Dict[str, Any]]:
    """
    Applications to any of a team's postings, for owners and admins.

    Each entry carries the applicant's profile summary (contact details,
    skills, languages, wages) and the posting applied to.
    """
    talent = await resolve_caller(db, identity)
    if talent is None:
        return []
    await check_team_permission(db, talent, team_id, TeamPermission.APPLICATION_VIEW)

    query = (
        select(Application, JobPosting)
        .join(JobPosting, JobPosting.id == Application.job_posting_id)
        .where(JobPosting.team_id == team_id)
        .order_by(Application.created_at.desc(), Application.id.desc())
    )
    if status is not None:
        query = query.where(Application.status == status)

    result = await db.execute(query)
    rows = result.all()

    talent_ids = [application.talent_id for application, _ in rows]
    applicants = await load_talents(db, talent_ids)
    skills = await load_talent_skills(db, set(talent_ids))
    languages = await load_talent_languages(db, set(talent_ids))

    items = []
    for application, posting in rows:
        applicant = applicants.get(application.talent_id)
        if applicant is None:
            continue
        item = application.to_dict()
        item["applicant"] = {
            "id": applicant.id,
            "first_name": applicant.first_name,
            "last_name": applicant.last_name,
            "email": applicant.email,
            "phone": applicant.phone,
            "experience_level": applicant.experience_level,
            "position_preferences": applicant.position_preferences,
            "availability": applicant.availability,
            "skills": [skill.to_dict() for skill in skills[applicant.id]],
            "languages": languages[applicant.id],
            "desired_hourly_wage": applicant.desired_hourly_wage,
            "desired_yearly_salary": applicant.desired_yearly_salary,
        }
        item["job_posting"] = _posting_summary(posting)
        items.append(item)
    return items


async def update_application_status(
    db: AsyncSession,
    identity: Optional[CallerIdentity],
    application_id: int,
    data: ApplicationStatusUpdate,
) -> Dict[str, Any]:
    """
    Record a team decision on a pending application.

    Matching an application creates an active Match and, unless the
    applicant already belongs to the team, a ``member`` membership for
    the posting's position. Status ``pending`` only updates the notes.

    Raises:
        InvalidTransition: If the application is not pending
    """
    talent = await require_caller(db, identity)
    application = await get_application_or_404(db, application_id)
    posting = await get_posting_or_404(db, application.job_posting_id)
    await check_team_permission(db, talent, posting.team_id, TeamPermission.APPLICATION_DECIDE)

    target = ApplicationStatus(data.status)
    if application.status != ApplicationStatus.PENDING:
        raise InvalidTransition(
            f"Cannot move an application from {application.status.value} to {target.value}",
            details={"from": application.status.value, "to": target.value},
        )

    application.status = target
    if data.notes is not None:
        application.notes = data.notes

    if target == ApplicationStatus.MATCHED:
        db.add(
            Match(
                application_id=application.id,
                talent_id=application.talent_id,
                team_id=posting.team_id,
                job_posting_id=posting.id,
                start_date=posting.start_date or DEFAULT_START_DATE,
                position=posting.specific_position,
                compensation_type=posting.compensation_type,
                compensation_amount=derive_compensation_amount(
                    posting.compensation_type,
                    posting.compensation_min,
                    posting.compensation_max,
                ),
                status=MatchStatus.ACTIVE,
            )
        )
        membership = await get_membership(db, application.talent_id, posting.team_id)
        if membership is None:
            db.add(
                TeamMember(
                    talent_id=application.talent_id,
                    team_id=posting.team_id,
                    position=posting.specific_position,
                    role=TeamRole.MEMBER,
                )
            )

    await db.commit()

    logger.info(
        f"Talent {talent.id} set application {application.id} to {target.value}"
    )
    return {"application_id": application.id}
