"""
Team-scoped authorization.

Roles form a closed enum (owner, admin, member) and every guarded action maps
to an explicit permission. Checks run in the service layer against the
caller's TeamMember row:

1. No membership means no access, whatever else the caller owns.
2. owner and admin share the "manage team" permissions.
3. Deleting the team itself is reserved to the owner.
"""

import logging
from typing import Iterable, Set
from enum import Enum

from sqlalchemy import select, and_
from sqlalchemy.ext.asyncio import AsyncSession

from core.exceptions import ForbiddenError
from database.models.talent import Talent
from database.models.teams import TeamMember, TeamRole

logger = logging.getLogger(__name__)


class TeamPermission(str, Enum):
    """Actions guarded by team role."""

    TEAM_UPDATE = "team:update"
    TEAM_DELETE = "team:delete"
    POSTING_VIEW = "posting:view"
    POSTING_MANAGE = "posting:manage"
    APPLICATION_VIEW = "application:view"
    APPLICATION_DECIDE = "application:decide"
    MATCH_VIEW = "match:view"
    MATCH_UPDATE = "match:update"
    TALENT_SEARCH = "talent:search"


_MANAGER_PERMISSIONS: Set[TeamPermission] = {
    TeamPermission.TEAM_UPDATE,
    TeamPermission.POSTING_VIEW,
    TeamPermission.POSTING_MANAGE,
    TeamPermission.APPLICATION_VIEW,
    TeamPermission.APPLICATION_DECIDE,
    TeamPermission.MATCH_VIEW,
    TeamPermission.MATCH_UPDATE,
    TeamPermission.TALENT_SEARCH,
}

# Role to permission mapping
ROLE_PERMISSIONS: dict[TeamRole, Set[TeamPermission]] = {
    TeamRole.OWNER: _MANAGER_PERMISSIONS | {TeamPermission.TEAM_DELETE},
    TeamRole.ADMIN: set(_MANAGER_PERMISSIONS),
    TeamRole.MEMBER: {TeamPermission.POSTING_VIEW},
}

MANAGER_ROLES: frozenset[TeamRole] = frozenset({TeamRole.OWNER, TeamRole.ADMIN})


class AuthorizationError(ForbiddenError):
    """Raised when a talent may not act on a team resource."""
    pass


class TeamAccessDenied(AuthorizationError):
    """Raised when the talent has no membership in the team."""
    pass


class InsufficientTeamRole(AuthorizationError):
    """Raised when the talent's role lacks the required permission."""
    pass


def role_has_permission(role: TeamRole, permission: TeamPermission) -> bool:
    return permission in ROLE_PERMISSIONS.get(role, set())


async def get_membership(
    db: AsyncSession,
    talent_id: int,
    team_id: int,
) -> TeamMember | None:
    """Load the unique membership row for (talent, team), if any."""
    result = await db.execute(
        select(TeamMember).where(
            and_(
                TeamMember.talent_id == talent_id,
                TeamMember.team_id == team_id,
            )
        )
    )
    return result.scalar_one_or_none()


async def can_act(
    db: AsyncSession,
    talent_id: int,
    team_id: int,
    required_roles: Iterable[TeamRole],
) -> bool:
    """
    Check whether a talent holds one of the required roles in a team.

    Args:
        db: Database session
        talent_id: Talent to check
        team_id: Team the action targets
        required_roles: Roles allowed to act

    Returns:
        True iff a membership exists and its role is in required_roles
    """
    membership = await get_membership(db, talent_id, team_id)
    if membership is None:
        return False
    return membership.role in set(required_roles)


async def check_team_access(
    db: AsyncSession,
    talent: Talent,
    team_id: int,
) -> TeamMember:
    """
    Check that a talent belongs to a team.

    Raises:
        TeamAccessDenied: If the talent is not a member of the team
    """
    membership = await get_membership(db, talent.id, team_id)

    if not membership:
        logger.warning(
            f"Talent {talent.id} attempted to access team {team_id} "
            f"without membership"
        )
        raise TeamAccessDenied("You are not a member of this team")

    return membership


async def check_team_permission(
    db: AsyncSession,
    talent: Talent,
    team_id: int,
    permission: TeamPermission,
) -> TeamMember:
    """
    Check that a talent's team role grants a permission.

    Args:
        db: Database session
        talent: Acting talent
        team_id: Team the action targets
        permission: Permission required by the action

    Returns:
        The talent's membership in the team

    Raises:
        TeamAccessDenied: If the talent is not a member of the team
        InsufficientTeamRole: If the role lacks the permission
    """
    membership = await check_team_access(db, talent, team_id)

    if role_has_permission(membership.role, permission):
        return membership

    logger.warning(
        f"Talent {talent.id} with role {membership.role.value} lacks permission "
        f"{permission.value} in team {team_id}"
    )
    raise InsufficientTeamRole(
        f"Your role in this team does not allow {permission.value}"
    )


async def get_teams_with_permission(
    db: AsyncSession,
    talent_id: int,
    permission: TeamPermission,
) -> list[int]:
    """Return ids of the teams where the talent's role grants a permission."""
    allowed_roles = [
        role for role, perms in ROLE_PERMISSIONS.items() if permission in perms
    ]
    result = await db.execute(
        select(TeamMember.team_id).where(
            and_(
                TeamMember.talent_id == talent_id,
                TeamMember.role.in_(allowed_roles),
            )
        )
    )
    return list(result.scalars().all())
