"""
Match service functions.

A match is either ``active`` or finished: ``active -> completed`` and
``active -> terminated`` are the only transitions.
"""

from typing import Any, Dict, List, Optional
import logging

from sqlalchemy import select, delete
from sqlalchemy.ext.asyncio import AsyncSession

from api.schemas.applications import MatchStatusUpdate
from api.services.identity import require_caller, resolve_caller
from api.services.jobs import load_postings
from api.services.talent import load_talents
from api.services.teams import load_teams
from core.config import settings
from core.exceptions import ForbiddenError, InvalidTransition, NotFoundError
from core.middleware.authorization import (
    TeamPermission,
    check_team_permission,
    get_membership,
    role_has_permission,
)
from core.security import CallerIdentity
from database.models.applications import Match, MatchStatus
from database.models.talent import Talent
from database.models.teams import TeamMember

logger = logging.getLogger(__name__)

ALLOWED_MATCH_TRANSITIONS: dict[MatchStatus, frozenset[MatchStatus]] = {
    MatchStatus.ACTIVE: frozenset({MatchStatus.COMPLETED, MatchStatus.TERMINATED}),
    MatchStatus.COMPLETED: frozenset(),
    MatchStatus.TERMINATED: frozenset(),
}


async def get_match_or_404(db: AsyncSession, match_id: int) -> Match:
    result = await db.execute(select(Match).where(Match.id == match_id))
    match = result.scalar_one_or_none()
    if match is None:
        raise NotFoundError("Match not found")
    return match


async def get_my_matches(
    db: AsyncSession,
    identity: Optional[CallerIdentity],
) -> List[Dict[str, Any]]:
    """Caller's matches with the team's contact details and the posting."""
    talent = await resolve_caller(db, identity)
    if talent is None:
        return []

    result = await db.execute(
        select(Match)
        .where(Match.talent_id == talent.id)
        .order_by(Match.created_at.desc(), Match.id.desc())
    )
    matches = result.scalars().all()

    teams = await load_teams(db, [m.team_id for m in matches])
    postings = await load_postings(db, [m.job_posting_id for m in matches])

    items = []
    for match in matches:
        team = teams.get(match.team_id)
        posting = postings.get(match.job_posting_id)
        if team is None or posting is None:
            continue
        item = match.to_dict()
        item["team"] = {
            "id": team.id,
            "name": team.name,
            "location": team.location,
            "service_style": team.service_style,
            "contact_email": team.contact_email,
            "contact_phone": team.contact_phone,
        }
        item["job_posting"] = {
            "id": posting.id,
            "title": posting.title,
            "description": posting.description,
            "shifts": posting.shifts,
        }
        items.append(item)
    return items


async def get_team_matches(
    db: AsyncSession,
    identity: Optional[CallerIdentity],
    team_id: int,
) -> List[Dict[str, Any]]:
    """A team's matches with the matched talent's contact details. Owner or admin only."""
    talent = await resolve_caller(db, identity)
    if talent is None:
        return []
    await check_team_permission(db, talent, team_id, TeamPermission.MATCH_VIEW)

    result = await db.execute(
        select(Match)
        .where(Match.team_id == team_id)
        .order_by(Match.created_at.desc(), Match.id.desc())
    )
    matches = result.scalars().all()

    matched = await load_talents(db, [m.talent_id for m in matches])
    postings = await load_postings(db, [m.job_posting_id for m in matches])

    items = []
    for match in matches:
        worker = matched.get(match.talent_id)
        posting = postings.get(match.job_posting_id)
        if worker is None or posting is None:
            continue
        item = match.to_dict()
        item["talent"] = {
            "id": worker.id,
            "first_name": worker.first_name,
            "last_name": worker.last_name,
            "email": worker.email,
            "phone": worker.phone,
        }
        item["job_posting"] = {
            "id": posting.id,
            "title": posting.title,
            "specific_position": posting.specific_position,
        }
        items.append(item)
    return items


async def _can_update_for_team(db: AsyncSession, talent_id: int, team_id: int) -> bool:
    membership = await get_membership(db, talent_id, team_id)
    if membership is None:
        return False
    return role_has_permission(membership.role, TeamPermission.MATCH_UPDATE)


async def _release_membership(db: AsyncSession, match: Match) -> bool:
    """
    Drop the talent's membership in the match's team once no other active
    match ties them to it. Returns True when the membership was released.
    """
    others = await db.execute(
        select(Match.id).where(
            Match.talent_id == match.talent_id,
            Match.team_id == match.team_id,
            Match.status == MatchStatus.ACTIVE,
            Match.id != match.id,
        ).limit(1)
    )
    if others.scalar_one_or_none() is not None:
        return False

    await db.execute(
        delete(TeamMember).where(
            TeamMember.talent_id == match.talent_id,
            TeamMember.team_id == match.team_id,
        )
    )
    result = await db.execute(select(Talent).where(Talent.id == match.talent_id))
    worker = result.scalar_one_or_none()
    if worker is not None and worker.current_team_id == match.team_id:
        worker.current_team_id = None
    return True


async def update_match_status(
    db: AsyncSession,
    identity: Optional[CallerIdentity],
    match_id: int,
    data: MatchStatusUpdate,
    cleanup_on_talent_termination: Optional[bool] = None,
) -> Dict[str, Any]:
    """
    Complete or terminate an active match.

    The matched talent or an owner/admin of the match's team may act; when
    the caller is both, they act as the talent. Terminating releases the
    talent's team membership (and current team) if no other active match
    remains, but only when the team terminates, unless
    ``cleanup_on_talent_termination`` (defaulting to the
    CLEANUP_MEMBERSHIP_ON_TALENT_TERMINATION setting) extends it to the
    talent side.

    Raises:
        ForbiddenError: If the caller is neither the talent nor a team manager
        InvalidTransition: If the match is not active
    """
    if cleanup_on_talent_termination is None:
        cleanup_on_talent_termination = settings.cleanup_membership_on_talent_termination

    talent = await require_caller(db, identity)
    match = await get_match_or_404(db, match_id)

    is_talent = match.talent_id == talent.id
    if not is_talent and not await _can_update_for_team(db, talent.id, match.team_id):
        logger.warning(f"Talent {talent.id} denied update of match {match.id}")
        raise ForbiddenError("You don't have permission to update this match")

    target = MatchStatus(data.status)
    if target not in ALLOWED_MATCH_TRANSITIONS[match.status]:
        raise InvalidTransition(
            f"Cannot move a match from {match.status.value} to {target.value}",
            details={"from": match.status.value, "to": target.value},
        )

    match.status = target

    released = False
    if target == MatchStatus.TERMINATED and (not is_talent or cleanup_on_talent_termination):
        released = await _release_membership(db, match)

    await db.commit()

    logger.info(
        f"Talent {talent.id} set match {match.id} to {target.value}"
        + (f"; released membership in team {match.team_id}" if released else "")
    )
    return {"match_id": match.id}
