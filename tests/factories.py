"""Payload builders, identities and seed helpers shared by the tests."""

import time
from typing import Any, Optional

import jwt
from sqlalchemy.ext.asyncio import AsyncSession

from api.schemas.jobs import JobPostingCreate
from api.schemas.talent import TalentProfileRequest
from api.schemas.teams import TeamCreate
from api.services.identity import resolve_talent
from api.services.jobs import create_job_posting
from api.services.talent import create_or_update_talent_profile
from api.services.teams import create_team
from core.config import settings
from core.security import CallerIdentity

TEST_ISSUER = "https://auth.test.local"


# ==================== Identities and tokens ==================== #

def make_identity(subject: str, name: Optional[str] = None) -> CallerIdentity:
    return CallerIdentity(
        subject=subject,
        token_identifier=f"{TEST_ISSUER}|{subject}",
        name=name or subject.title(),
        email=f"{subject}@example.com",
    )


def make_token(subject: str, expires_in: int = 3600, **claims: Any) -> str:
    """Sign a provider-style token with the test secret."""
    now = int(time.time())
    payload = {
        "sub": subject,
        "iss": TEST_ISSUER,
        "iat": now,
        "exp": now + expires_in,
        "name": subject.title(),
        "email": f"{subject}@example.com",
    }
    payload.update(claims)
    return jwt.encode(payload, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def auth_headers(subject: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {make_token(subject)}"}


# ==================== Payload builders ==================== #

def profile_payload(**overrides: Any) -> dict[str, Any]:
    payload = {
        "first_name": "Maria",
        "last_name": "Lopez",
        "email": "maria@example.com",
        "phone": "206-555-0100",
        "last_four_ssn": "1234",
        "legally_work_in_us": True,
        "in_hospitality_industry": True,
        "over_21": True,
        "living_area": "Capitol Hill/Madison Park",
        "interested_working_area": "Downtown/SLU",
        "commute_methods": ["I use the bus/train"],
        "service_style_preferences": ["Fine dining"],
        "position_preferences": ["Line cook"],
        "experience_level": "3-5 years",
        "availability": {"monday": ["Morning"], "friday": ["Nights"]},
        "desired_hourly_wage": 24.0,
        "desired_yearly_salary": 52000.0,
        "start_date_preference": "Immediately",
        "skills": ["Knife skills", "Grill"],
        "languages": ["English", "Spanish"],
    }
    payload.update(overrides)
    return payload


def team_payload(**overrides: Any) -> dict[str, Any]:
    payload = {
        "name": "Harbor Kitchen",
        "industry": "Restaurant",
        "location": "Downtown/SLU",
        "service_style": "Fine dining",
        "contact_email": "jobs@harborkitchen.com",
        "contact_phone": "206-555-0199",
    }
    payload.update(overrides)
    return payload


def posting_payload(**overrides: Any) -> dict[str, Any]:
    payload = {
        "title": "Line Cook",
        "description": "Grill station, dinner service",
        "service_style": "Fine dining",
        "position_type": "BOH",
        "specific_position": "Line cook",
        "experience_required": "1-2 years",
        "required_skills": ["Grill"],
        "shifts": {"friday": ["Nights"], "saturday": ["Nights"]},
        "compensation_type": "hourly",
        "compensation_range": {"min": 20, "max": 28},
    }
    payload.update(overrides)
    return payload


# ==================== Seed helpers ==================== #

async def seed_talent(db: AsyncSession, subject: str, **overrides: Any):
    """Create a profile for ``subject`` and return (identity, talent)."""
    identity = make_identity(subject)
    await create_or_update_talent_profile(
        db, identity, TalentProfileRequest(**profile_payload(**overrides))
    )
    talent = await resolve_talent(db, identity.token_identifier)
    return identity, talent


async def seed_team(db: AsyncSession, owner: CallerIdentity, **overrides: Any) -> int:
    result = await create_team(db, owner, TeamCreate(**team_payload(**overrides)))
    return result["team_id"]


async def seed_posting(
    db: AsyncSession,
    manager: CallerIdentity,
    team_id: int,
    **overrides: Any,
) -> int:
    result = await create_job_posting(
        db, manager, team_id, JobPostingCreate(**posting_payload(**overrides))
    )
    return result["job_posting_id"]
