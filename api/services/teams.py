"""Team service functions."""

from typing import Any, Dict, List, Optional
import logging

from sqlalchemy import select, delete, update
from sqlalchemy.ext.asyncio import AsyncSession

from api.schemas.teams import TeamCreate, TeamUpdate
from api.services.identity import require_caller, resolve_caller
from core.exceptions import NotFoundError
from core.middleware.authorization import TeamPermission, check_team_permission
from core.security import CallerIdentity
from database.models.applications import Application, Match
from database.models.jobs import JobPosting, job_posting_skills
from database.models.talent import Talent
from database.models.teams import Team, TeamMember, TeamRole

logger = logging.getLogger(__name__)

OWNER_POSITION = "Manager"


async def get_team_or_404(db: AsyncSession, team_id: int) -> Team:
    result = await db.execute(select(Team).where(Team.id == team_id))
    team = result.scalar_one_or_none()
    if team is None:
        raise NotFoundError("Team not found")
    return team


async def load_teams(db: AsyncSession, team_ids) -> Dict[int, Team]:
    ids = list(set(team_ids))
    if not ids:
        return {}
    result = await db.execute(select(Team).where(Team.id.in_(ids)))
    return {team.id: team for team in result.scalars().all()}


async def create_team(
    db: AsyncSession,
    identity: Optional[CallerIdentity],
    data: TeamCreate,
) -> Dict[str, Any]:
    """
    Create a team owned by the caller.

    The caller gets an owner membership and, if they have no current team
    yet, the new team becomes it.

    Returns:
        Dictionary with the team id
    """
    talent = await require_caller(db, identity)

    team = Team(owner_id=talent.id, **data.model_dump())
    db.add(team)
    await db.flush()

    db.add(
        TeamMember(
            talent_id=talent.id,
            team_id=team.id,
            position=OWNER_POSITION,
            role=TeamRole.OWNER,
        )
    )
    if talent.current_team_id is None:
        talent.current_team_id = team.id

    await db.commit()

    logger.info(f"Talent {talent.id} created team {team.id}")
    return {"team_id": team.id}


async def get_my_teams(
    db: AsyncSession,
    identity: Optional[CallerIdentity],
) -> List[Dict[str, Any]]:
    """Teams the caller belongs to, with their membership details."""
    talent = await resolve_caller(db, identity)
    if talent is None:
        return []

    result = await db.execute(
        select(Team, TeamMember)
        .join(TeamMember, TeamMember.team_id == Team.id)
        .where(TeamMember.talent_id == talent.id)
        .order_by(TeamMember.joined_at, Team.id)
    )

    teams = []
    for team, membership in result.all():
        team_dict = team.to_dict()
        team_dict["membership"] = membership.membership_dict()
        team_dict["is_current_team"] = talent.current_team_id == team.id
        teams.append(team_dict)
    return teams


async def update_team(
    db: AsyncSession,
    identity: Optional[CallerIdentity],
    team_id: int,
    data: TeamUpdate,
) -> Dict[str, Any]:
    """
    Update team details. Owner or admin only.

    Fields that are omitted or null are left unchanged; an update with
    nothing to change is a no-op.
    """
    talent = await require_caller(db, identity)
    team = await get_team_or_404(db, team_id)
    await check_team_permission(db, talent, team.id, TeamPermission.TEAM_UPDATE)

    changes = {
        field: value
        for field, value in data.model_dump(exclude_unset=True).items()
        if value is not None
    }
    if not changes:
        return {"team_id": team.id}

    for field, value in changes.items():
        setattr(team, field, value)
    await db.commit()

    logger.info(f"Talent {talent.id} updated team {team.id}: {sorted(changes)}")
    return {"team_id": team.id}


async def delete_team(
    db: AsyncSession,
    identity: Optional[CallerIdentity],
    team_id: int,
) -> Dict[str, Any]:
    """
    Delete a team. Owner only.

    Removes the team's job postings, their applications and those
    applications' matches, then every membership, and clears the current
    team of any talent pointing at it.
    """
    talent = await require_caller(db, identity)
    team = await get_team_or_404(db, team_id)
    await check_team_permission(db, talent, team.id, TeamPermission.TEAM_DELETE)

    posting_ids = select(JobPosting.id).where(JobPosting.team_id == team.id)
    application_ids = select(Application.id).where(
        Application.job_posting_id.in_(posting_ids)
    )

    await db.execute(delete(Match).where(Match.application_id.in_(application_ids)))
    await db.execute(delete(Application).where(Application.job_posting_id.in_(posting_ids)))
    await db.execute(
        delete(job_posting_skills).where(job_posting_skills.c.job_posting_id.in_(posting_ids))
    )
    await db.execute(delete(JobPosting).where(JobPosting.team_id == team.id))
    await db.execute(delete(TeamMember).where(TeamMember.team_id == team.id))
    await db.execute(
        update(Talent)
        .where(Talent.current_team_id == team.id)
        .values(current_team_id=None)
    )
    await db.execute(delete(Team).where(Team.id == team.id))
    await db.commit()

    logger.info(f"Talent {talent.id} deleted team {team_id}")
    return {"success": True}
