"""
Talent profile endpoints.

Provides REST API for the caller's own profile and for the ranked job search.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from api.dependencies import get_identity
from api.schemas.common import ERROR_RESPONSES, SuccessResponse
from api.schemas.jobs import PositionTypeLiteral
from api.schemas.talent import TalentProfileRequest
from api.services import search as search_service
from api.services import talent as talent_service
from core.security import CallerIdentity
from database.engine import get_db

router = APIRouter(responses=ERROR_RESPONSES)


@router.put(
    "/profile",
    summary="Save Talent Profile",
    description="Create the caller's profile or replace it entirely. Skills are given by name.",
)
async def save_profile(
    profile: TalentProfileRequest,
    identity: Optional[CallerIdentity] = Depends(get_identity),
    db: AsyncSession = Depends(get_db),
):
    """Create or fully replace the caller's talent profile."""
    return await talent_service.create_or_update_talent_profile(db, identity, profile)


@router.get(
    "/profile",
    summary="Get Talent Profile",
    description="The caller's profile with skills and languages, or null.",
)
async def get_profile(
    identity: Optional[CallerIdentity] = Depends(get_identity),
    db: AsyncSession = Depends(get_db),
):
    return await talent_service.get_talent_profile(db, identity)


@router.delete(
    "/profile",
    response_model=SuccessResponse,
    summary="Delete Talent Profile",
    description="Delete the caller's profile with its memberships, applications and matches.",
)
async def delete_profile(
    identity: Optional[CallerIdentity] = Depends(get_identity),
    db: AsyncSession = Depends(get_db),
):
    return await talent_service.delete_talent_profile(db, identity)


@router.get(
    "/me",
    summary="Current User",
    description="Identity details of the caller as issued by the identity provider, or null.",
)
async def get_me(identity: Optional[CallerIdentity] = Depends(get_identity)):
    return talent_service.get_current_user(identity)


@router.get(
    "/job-search",
    summary="Ranked Job Search",
    description="Active job postings ranked by how well they fit the caller's profile.",
)
async def search_jobs(
    location: Optional[str] = Query(None, description="Team location"),
    position_type: Optional[PositionTypeLiteral] = Query(None, description="BOH or FOH"),
    specific_position: Optional[str] = Query(None),
    service_style: Optional[str] = Query(None),
    identity: Optional[CallerIdentity] = Depends(get_identity),
    db: AsyncSession = Depends(get_db),
):
    """Each posting carries its team and a match_score between 0 and 100."""
    return await search_service.search_job_postings_for_talent(
        db,
        identity,
        location=location,
        position_type=position_type,
        specific_position=specific_position,
        service_style=service_style,
    )
