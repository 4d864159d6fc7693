"""
Team management endpoints.

Provides REST API for teams and the team-scoped views of postings,
applications and matches. Role checks happen in the service layer.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Path, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from api.dependencies import get_identity
from api.schemas.common import ERROR_RESPONSES, SuccessResponse
from api.schemas.jobs import JobPostingCreate
from api.schemas.teams import TeamCreate, TeamUpdate
from api.services import applications as application_service
from api.services import jobs as job_service
from api.services import matches as match_service
from api.services import teams as team_service
from core.security import CallerIdentity
from database.engine import get_db
from database.models.applications import ApplicationStatus

router = APIRouter(responses=ERROR_RESPONSES)


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    summary="Create Team",
    description="Create a team. The caller becomes its owner.",
)
async def create_team(
    data: TeamCreate,
    identity: Optional[CallerIdentity] = Depends(get_identity),
    db: AsyncSession = Depends(get_db),
):
    return await team_service.create_team(db, identity, data)


@router.get(
    "/mine",
    summary="My Teams",
    description="Teams the caller belongs to, with role and position.",
)
async def get_my_teams(
    identity: Optional[CallerIdentity] = Depends(get_identity),
    db: AsyncSession = Depends(get_db),
):
    return await team_service.get_my_teams(db, identity)


@router.patch(
    "/{team_id}",
    summary="Update Team",
    description="Update team details. Requires owner or admin role.",
)
async def update_team(
    data: TeamUpdate,
    team_id: int = Path(..., description="Team ID"),
    identity: Optional[CallerIdentity] = Depends(get_identity),
    db: AsyncSession = Depends(get_db),
):
    return await team_service.update_team(db, identity, team_id, data)


@router.delete(
    "/{team_id}",
    response_model=SuccessResponse,
    summary="Delete Team",
    description="Delete a team with its postings, applications, matches and memberships. Owner only.",
)
async def delete_team(
    team_id: int = Path(..., description="Team ID"),
    identity: Optional[CallerIdentity] = Depends(get_identity),
    db: AsyncSession = Depends(get_db),
):
    return await team_service.delete_team(db, identity, team_id)


@router.post(
    "/{team_id}/postings",
    status_code=status.HTTP_201_CREATED,
    summary="Create Job Posting",
    description="Publish a job posting for the team. Requires owner or admin role.",
)
async def create_job_posting(
    data: JobPostingCreate,
    team_id: int = Path(..., description="Team ID"),
    identity: Optional[CallerIdentity] = Depends(get_identity),
    db: AsyncSession = Depends(get_db),
):
    return await job_service.create_job_posting(db, identity, team_id, data)


@router.get(
    "/{team_id}/postings",
    summary="List Team Job Postings",
    description="The team's postings with required skills and application counts. Any member.",
)
async def list_job_postings(
    team_id: int = Path(..., description="Team ID"),
    active_only: bool = Query(False, description="Only postings accepting applications"),
    identity: Optional[CallerIdentity] = Depends(get_identity),
    db: AsyncSession = Depends(get_db),
):
    return await job_service.get_team_job_postings(db, identity, team_id, active_only)


@router.get(
    "/{team_id}/applications",
    summary="List Team Applications",
    description="Applications to the team's postings. Requires owner or admin role.",
)
async def list_applications(
    team_id: int = Path(..., description="Team ID"),
    application_status: Optional[ApplicationStatus] = Query(
        None, alias="status", description="Filter by status"
    ),
    identity: Optional[CallerIdentity] = Depends(get_identity),
    db: AsyncSession = Depends(get_db),
):
    return await application_service.get_team_applications(
        db, identity, team_id, status=application_status
    )


@router.get(
    "/{team_id}/matches",
    summary="List Team Matches",
    description="The team's matches with the matched talent. Requires owner or admin role.",
)
async def list_matches(
    team_id: int = Path(..., description="Team ID"),
    identity: Optional[CallerIdentity] = Depends(get_identity),
    db: AsyncSession = Depends(get_db),
):
    return await match_service.get_team_matches(db, identity, team_id)
