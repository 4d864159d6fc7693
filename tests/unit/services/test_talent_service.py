"""
Tests for talent profile services.

Tests:
- Profile creation and full replacement
- Skill get-or-create with categorization
- Anonymous and profile-less callers
- Profile deletion cascade
"""

import pytest
from sqlalchemy import select, func

from api.schemas.applications import ApplicationStatusUpdate, ApplyRequest
from api.schemas.talent import TalentProfileRequest
from api.services.applications import apply_to_job, update_application_status
from api.services.talent import (
    create_or_update_talent_profile,
    delete_talent_profile,
    get_current_user,
    get_talent_profile,
)
from core.exceptions import NotFoundError, UnauthenticatedError
from database.models.applications import Application, Match
from database.models.talent import Skill, SkillCategory, Talent, TalentLanguage, TalentSkill
from database.models.teams import Team, TeamMember
from tests.factories import (
    make_identity,
    profile_payload,
    seed_posting,
    seed_talent,
    seed_team,
)


async def total(db, model) -> int:
    result = await db.execute(select(func.count()).select_from(model))
    return result.scalar_one()


class TestSaveProfile:
    """Test creating and replacing profiles."""

    async def test_create(self, db):
        identity = make_identity("maria")

        result = await create_or_update_talent_profile(
            db, identity, TalentProfileRequest(**profile_payload())
        )

        talent = await db.get(Talent, result["talent_id"])
        assert talent.token_identifier == identity.token_identifier
        assert talent.profile_complete is True
        assert talent.availability["monday"] == ["Morning"]
        assert talent.availability["sunday"] == []

    async def test_save_again_replaces_profile(self, db):
        identity = make_identity("maria")
        first = await create_or_update_talent_profile(
            db, identity, TalentProfileRequest(**profile_payload())
        )

        second = await create_or_update_talent_profile(
            db,
            identity,
            TalentProfileRequest(
                **profile_payload(
                    first_name="Mariana",
                    skills=["Wine knowledge"],
                    languages=["French"],
                )
            ),
        )

        assert first == second
        assert await total(db, Talent) == 1
        profile = await get_talent_profile(db, identity)
        assert profile["first_name"] == "Mariana"
        assert [skill["name"] for skill in profile["skills"]] == ["Wine knowledge"]
        assert profile["languages"] == ["French"]

    async def test_skills_are_created_once_and_categorized(self, db):
        await seed_talent(db, "a", skills=["Grill", "Coffee skills", "Patience"])
        await seed_talent(db, "b", skills=["Grill"])

        result = await db.execute(select(Skill).order_by(Skill.name))
        skills = {skill.name: skill.category for skill in result.scalars().all()}
        assert skills == {
            "Coffee skills": SkillCategory.FOH,
            "Grill": SkillCategory.BOH,
            "Patience": SkillCategory.GENERAL,
        }
        assert await total(db, TalentSkill) == 4

    async def test_anonymous_cannot_save(self, db):
        with pytest.raises(UnauthenticatedError):
            await create_or_update_talent_profile(
                db, None, TalentProfileRequest(**profile_payload())
            )


class TestReadProfile:
    """Test profile queries."""

    async def test_profile_includes_skills_and_languages(self, db):
        identity, _ = await seed_talent(db, "maria")

        profile = await get_talent_profile(db, identity)

        assert {skill["name"] for skill in profile["skills"]} == {"Knife skills", "Grill"}
        assert all(skill["category"] == "BOH" for skill in profile["skills"])
        assert profile["languages"] == ["English", "Spanish"]
        assert profile["last_four_ssn"] == "1234"

    async def test_missing_profile_is_none(self, db):
        assert await get_talent_profile(db, None) is None
        assert await get_talent_profile(db, make_identity("nobody")) is None

    def test_current_user(self):
        identity = make_identity("maria")

        assert get_current_user(None) is None
        assert get_current_user(identity) == {
            "id": "maria",
            "name": "Maria",
            "email": "maria@example.com",
            "token_identifier": identity.token_identifier,
        }


class TestDeleteProfile:
    """Test the talent deletion cascade."""

    async def test_cascade(self, db):
        owner, _ = await seed_talent(db, "owner")
        worker, worker_talent = await seed_talent(db, "worker")
        team_id = await seed_team(db, owner)
        posting_id = await seed_posting(db, owner, team_id)
        applied = await apply_to_job(db, worker, ApplyRequest(job_posting_id=posting_id))
        await update_application_status(
            db, owner, applied["application_id"], ApplicationStatusUpdate(status="matched")
        )

        result = await delete_talent_profile(db, worker)

        assert result == {"success": True}
        assert await db.get(Talent, worker_talent.id) is None
        assert await total(db, Application) == 0
        assert await total(db, Match) == 0
        remaining = await db.execute(
            select(TeamMember.talent_id).where(TeamMember.talent_id == worker_talent.id)
        )
        assert remaining.first() is None
        skills = await db.execute(
            select(TalentSkill.id).where(TalentSkill.talent_id == worker_talent.id)
        )
        assert skills.first() is None
        languages = await db.execute(
            select(TalentLanguage.id).where(TalentLanguage.talent_id == worker_talent.id)
        )
        assert languages.first() is None

        # The owner's side is untouched
        assert await total(db, TeamMember) == 1
        assert await db.get(Team, team_id) is not None

    async def test_owned_teams_lose_their_owner(self, db):
        owner, _ = await seed_talent(db, "owner")
        team_id = await seed_team(db, owner)

        await delete_talent_profile(db, owner)

        team = await db.get(Team, team_id)
        assert team is not None
        assert team.owner_id is None

    async def test_requires_profile(self, db):
        with pytest.raises(NotFoundError):
            await delete_talent_profile(db, make_identity("nobody"))
