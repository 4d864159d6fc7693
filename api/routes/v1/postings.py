"""Job posting endpoints addressed by posting id."""

from typing import Optional

from fastapi import APIRouter, Depends, Path
from sqlalchemy.ext.asyncio import AsyncSession

from api.dependencies import get_identity
from api.schemas.common import ERROR_RESPONSES
from api.schemas.jobs import JobPostingUpdate
from api.services import jobs as job_service
from core.security import CallerIdentity
from database.engine import get_db

router = APIRouter(responses=ERROR_RESPONSES)


@router.patch(
    "/{posting_id}",
    summary="Update Job Posting",
    description="Update a job posting. Requires owner or admin role in its team.",
)
async def update_job_posting(
    data: JobPostingUpdate,
    posting_id: int = Path(..., description="Job posting ID"),
    identity: Optional[CallerIdentity] = Depends(get_identity),
    db: AsyncSession = Depends(get_db),
):
    return await job_service.update_job_posting(db, identity, posting_id, data)


@router.delete(
    "/{posting_id}",
    summary="Deactivate Job Posting",
    description="Stop a posting from accepting applications. The posting is kept.",
)
async def deactivate_job_posting(
    posting_id: int = Path(..., description="Job posting ID"),
    identity: Optional[CallerIdentity] = Depends(get_identity),
    db: AsyncSession = Depends(get_db),
):
    return await job_service.deactivate_job_posting(db, identity, posting_id)
