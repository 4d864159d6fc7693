"""
Tests for team-scoped authorization.

Tests:
- Role to permission mapping
- can_act role checks
- check_team_permission access and role errors
- Teams where a permission is granted
"""

import pytest

from core.exceptions import ForbiddenError
from core.middleware.authorization import (
    MANAGER_ROLES,
    ROLE_PERMISSIONS,
    InsufficientTeamRole,
    TeamAccessDenied,
    TeamPermission,
    can_act,
    check_team_permission,
    get_teams_with_permission,
    role_has_permission,
)
from database.models.teams import TeamMember, TeamRole
from tests.factories import seed_talent, seed_team


@pytest.fixture
async def crew(db):
    """A team with an owner, an admin and a member, plus an outsider."""
    owner, owner_talent = await seed_talent(db, "owner")
    _, admin = await seed_talent(db, "admin")
    _, member = await seed_talent(db, "member")
    _, outsider = await seed_talent(db, "outsider")
    team_id = await seed_team(db, owner)
    db.add(TeamMember(talent_id=admin.id, team_id=team_id, position="Chef", role=TeamRole.ADMIN))
    db.add(TeamMember(talent_id=member.id, team_id=team_id, position="Server"))
    await db.commit()
    return {
        "team_id": team_id,
        "owner": owner_talent,
        "admin": admin,
        "member": member,
        "outsider": outsider,
    }


# ==================== Role mapping ==================== #

class TestRolePermissions:
    """Test the role to permission mapping."""

    def test_every_role_is_mapped(self):
        assert set(ROLE_PERMISSIONS) == set(TeamRole)

    def test_only_owner_deletes_team(self):
        assert role_has_permission(TeamRole.OWNER, TeamPermission.TEAM_DELETE)
        assert not role_has_permission(TeamRole.ADMIN, TeamPermission.TEAM_DELETE)
        assert not role_has_permission(TeamRole.MEMBER, TeamPermission.TEAM_DELETE)

    @pytest.mark.parametrize("permission", [
        TeamPermission.TEAM_UPDATE,
        TeamPermission.POSTING_MANAGE,
        TeamPermission.APPLICATION_DECIDE,
        TeamPermission.MATCH_UPDATE,
        TeamPermission.TALENT_SEARCH,
    ])
    def test_managers_share_permissions(self, permission):
        assert role_has_permission(TeamRole.OWNER, permission)
        assert role_has_permission(TeamRole.ADMIN, permission)
        assert not role_has_permission(TeamRole.MEMBER, permission)

    def test_members_only_view_postings(self):
        assert ROLE_PERMISSIONS[TeamRole.MEMBER] == {TeamPermission.POSTING_VIEW}

    def test_errors_are_forbidden(self):
        assert issubclass(TeamAccessDenied, ForbiddenError)
        assert issubclass(InsufficientTeamRole, ForbiddenError)


# ==================== Membership checks ==================== #

class TestCanAct:
    """Test role checks against stored memberships."""

    async def test_managers(self, db, crew):
        team_id = crew["team_id"]
        assert await can_act(db, crew["owner"].id, team_id, MANAGER_ROLES)
        assert await can_act(db, crew["admin"].id, team_id, MANAGER_ROLES)
        assert not await can_act(db, crew["member"].id, team_id, MANAGER_ROLES)

    async def test_no_membership(self, db, crew):
        assert not await can_act(db, crew["outsider"].id, crew["team_id"], TeamRole)

    async def test_unknown_team(self, db, crew):
        assert not await can_act(db, crew["owner"].id, 999, MANAGER_ROLES)


class TestCheckTeamPermission:
    """Test the service-layer permission check."""

    async def test_returns_membership(self, db, crew):
        membership = await check_team_permission(
            db, crew["admin"], crew["team_id"], TeamPermission.POSTING_MANAGE
        )
        assert membership.role == TeamRole.ADMIN

    async def test_member_lacks_role(self, db, crew):
        with pytest.raises(InsufficientTeamRole):
            await check_team_permission(
                db, crew["member"], crew["team_id"], TeamPermission.APPLICATION_VIEW
            )

    async def test_outsider_denied(self, db, crew):
        with pytest.raises(TeamAccessDenied):
            await check_team_permission(
                db, crew["outsider"], crew["team_id"], TeamPermission.POSTING_VIEW
            )


class TestTeamsWithPermission:
    """Test listing the teams a talent manages."""

    async def test_owner_and_admin(self, db, crew):
        team_id = crew["team_id"]
        search = TeamPermission.TALENT_SEARCH

        assert await get_teams_with_permission(db, crew["owner"].id, search) == [team_id]
        assert await get_teams_with_permission(db, crew["admin"].id, search) == [team_id]
        assert await get_teams_with_permission(db, crew["member"].id, search) == []
        assert await get_teams_with_permission(db, crew["outsider"].id, search) == []
