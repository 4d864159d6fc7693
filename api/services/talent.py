"""Talent profile service functions."""

from typing import Any, Dict, Iterable, List, Optional
import logging

from sqlalchemy import select, delete, update
from sqlalchemy.ext.asyncio import AsyncSession

from api.schemas.talent import TalentProfileRequest
from api.services.identity import require_caller, require_identity, resolve_caller
from api.services.skills import get_or_create_skills
from core.security import CallerIdentity
from database.models.applications import Application, Match
from database.models.talent import Skill, Talent, TalentLanguage, TalentSkill
from database.models.teams import Team, TeamMember

logger = logging.getLogger(__name__)

# Columns copied verbatim from the profile request
PROFILE_FIELDS = (
    "first_name",
    "last_name",
    "email",
    "phone",
    "profile_picture_url",
    "last_four_ssn",
    "legally_work_in_us",
    "in_hospitality_industry",
    "over_21",
    "living_area",
    "interested_working_area",
    "commute_methods",
    "service_style_preferences",
    "position_preferences",
    "experience_level",
    "availability",
    "last_job_name",
    "last_job_position",
    "last_job_duration",
    "last_job_leave_reason",
    "last_job_contactable",
    "desired_hourly_wage",
    "desired_yearly_salary",
    "start_date_preference",
    "additional_notes",
)


# ==================== Loading helpers ==================== #

async def load_talent_skills(
    db: AsyncSession,
    talent_ids: Iterable[int],
) -> Dict[int, List[Skill]]:
    """Skills per talent id, for every id given (empty list when none)."""
    ids = list(talent_ids)
    skills: Dict[int, List[Skill]] = {talent_id: [] for talent_id in ids}
    if not ids:
        return skills

    result = await db.execute(
        select(TalentSkill.talent_id, Skill)
        .join(Skill, Skill.id == TalentSkill.skill_id)
        .where(TalentSkill.talent_id.in_(ids))
        .order_by(Skill.name)
    )
    for talent_id, skill in result.all():
        skills[talent_id].append(skill)
    return skills


async def load_talent_languages(
    db: AsyncSession,
    talent_ids: Iterable[int],
) -> Dict[int, List[str]]:
    """Languages per talent id, for every id given (empty list when none)."""
    ids = list(talent_ids)
    languages: Dict[int, List[str]] = {talent_id: [] for talent_id in ids}
    if not ids:
        return languages

    result = await db.execute(
        select(TalentLanguage.talent_id, TalentLanguage.language)
        .where(TalentLanguage.talent_id.in_(ids))
        .order_by(TalentLanguage.id)
    )
    for talent_id, language in result.all():
        languages[talent_id].append(language)
    return languages


async def load_talents(db: AsyncSession, talent_ids: Iterable[int]) -> Dict[int, Talent]:
    ids = list(set(talent_ids))
    if not ids:
        return {}
    result = await db.execute(select(Talent).where(Talent.id.in_(ids)))
    return {talent.id: talent for talent in result.scalars().all()}


# ==================== Serialization ==================== #

def serialize_talent_profile(
    talent: Talent,
    skills: List[Skill],
    languages: List[str],
) -> Dict[str, Any]:
    """Full profile, for the talent themselves."""
    profile = {"id": talent.id, "token_identifier": talent.token_identifier}
    for field in PROFILE_FIELDS:
        profile[field] = getattr(talent, field)
    profile.update(
        {
            "profile_complete": talent.profile_complete,
            "current_team_id": talent.current_team_id,
            "skills": [skill.to_dict() for skill in skills],
            "languages": languages,
            "created_at": talent.created_at.isoformat() if talent.created_at else None,
            "updated_at": talent.updated_at.isoformat() if talent.updated_at else None,
        }
    )
    return profile


def serialize_public_talent(
    talent: Talent,
    skills: List[Skill],
    languages: List[str],
) -> Dict[str, Any]:
    """
    Profile as shown to team managers searching for talent.

    Contact details, the token identifier, SSN digits and eligibility flags
    are never included.
    """
    return {
        "id": talent.id,
        "first_name": talent.first_name,
        "last_name": talent.last_name,
        "experience_level": talent.experience_level,
        "living_area": talent.living_area,
        "interested_working_area": talent.interested_working_area,
        "position_preferences": talent.position_preferences,
        "service_style_preferences": talent.service_style_preferences,
        "availability": talent.availability,
        "skills": [skill.to_dict() for skill in skills],
        "languages": languages,
        "desired_hourly_wage": talent.desired_hourly_wage,
        "desired_yearly_salary": talent.desired_yearly_salary,
        "start_date_preference": talent.start_date_preference,
    }


# ==================== Operations ==================== #

async def create_or_update_talent_profile(
    db: AsyncSession,
    identity: Optional[CallerIdentity],
    profile: TalentProfileRequest,
) -> Dict[str, Any]:
    """
    Create the caller's profile, or replace it when it already exists.

    Skills are looked up by name (created and categorized when new) and,
    like languages, fully replace the previous set.

    Args:
        db: Database session
        identity: Authenticated caller
        profile: Complete profile

    Returns:
        Dictionary with the talent id
    """
    identity = require_identity(identity)

    result = await db.execute(
        select(Talent).where(Talent.token_identifier == identity.token_identifier)
    )
    talent = result.scalar_one_or_none()
    created = talent is None

    if created:
        talent = Talent(token_identifier=identity.token_identifier)
        db.add(talent)

    for field in PROFILE_FIELDS:
        setattr(talent, field, getattr(profile, field))
    talent.profile_complete = True
    await db.flush()

    await db.execute(delete(TalentSkill).where(TalentSkill.talent_id == talent.id))
    for skill in await get_or_create_skills(db, profile.skills):
        db.add(TalentSkill(talent_id=talent.id, skill_id=skill.id))

    await db.execute(delete(TalentLanguage).where(TalentLanguage.talent_id == talent.id))
    for language in profile.languages:
        db.add(TalentLanguage(talent_id=talent.id, language=language))

    await db.commit()

    logger.info(
        f"{'Created' if created else 'Updated'} talent profile {talent.id}",
        extra={"talent_id": talent.id},
    )
    return {"talent_id": talent.id}


async def get_talent_profile(
    db: AsyncSession,
    identity: Optional[CallerIdentity],
) -> Optional[Dict[str, Any]]:
    """Caller's profile with skills and languages, or None."""
    talent = await resolve_caller(db, identity)
    if talent is None:
        return None

    skills = await load_talent_skills(db, [talent.id])
    languages = await load_talent_languages(db, [talent.id])
    return serialize_talent_profile(talent, skills[talent.id], languages[talent.id])


def get_current_user(identity: Optional[CallerIdentity]) -> Optional[Dict[str, Any]]:
    """Identity details as issued by the identity provider."""
    if identity is None:
        return None
    return identity.to_dict()


async def delete_talent_profile(
    db: AsyncSession,
    identity: Optional[CallerIdentity],
) -> Dict[str, Any]:
    """
    Delete the caller's profile and everything that references it.

    Memberships, skill and language links, applications and their matches
    are removed first; the talent row goes last. Teams the talent owned are
    kept with no owner.
    """
    talent = await require_caller(db, identity)

    application_ids = select(Application.id).where(Application.talent_id == talent.id)
    await db.execute(delete(Match).where(Match.application_id.in_(application_ids)))
    await db.execute(delete(Application).where(Application.talent_id == talent.id))
    await db.execute(delete(TeamMember).where(TeamMember.talent_id == talent.id))
    await db.execute(delete(TalentSkill).where(TalentSkill.talent_id == talent.id))
    await db.execute(delete(TalentLanguage).where(TalentLanguage.talent_id == talent.id))
    await db.execute(
        update(Team).where(Team.owner_id == talent.id).values(owner_id=None)
    )
    await db.execute(delete(Talent).where(Talent.id == talent.id))
    await db.commit()

    logger.info(f"Deleted talent profile {talent.id}", extra={"talent_id": talent.id})
    return {"success": True}
