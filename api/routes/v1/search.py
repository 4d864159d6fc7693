"""
Search endpoints.

Filter-based search over active job postings and, for team managers,
over talent profiles.
"""

from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from api.dependencies import get_identity
from api.schemas.common import ERROR_RESPONSES
from api.schemas.search import JobSearchFilters, TalentSearchFilters
from api.services import search as search_service
from core.security import CallerIdentity
from database.engine import get_db

router = APIRouter(responses=ERROR_RESPONSES)


@router.post(
    "/jobs",
    summary="Search Job Postings",
    description="Active job postings matching every given filter.",
)
async def search_jobs(
    filters: JobSearchFilters,
    identity: Optional[CallerIdentity] = Depends(get_identity),
    db: AsyncSession = Depends(get_db),
):
    return await search_service.advanced_search_job_postings(db, identity, filters)


@router.post(
    "/talent",
    summary="Search Talent",
    description=(
        "Talent profiles matching every given filter, without contact or "
        "eligibility details. Requires owner or admin role in at least one team."
    ),
)
async def search_talent(
    filters: TalentSearchFilters,
    identity: Optional[CallerIdentity] = Depends(get_identity),
    db: AsyncSession = Depends(get_db),
):
    return await search_service.search_talent(db, identity, filters)
