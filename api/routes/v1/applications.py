"""
Application endpoints.

Provides REST API for applying to job postings and moving applications
through their lifecycle.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Path, status
from sqlalchemy.ext.asyncio import AsyncSession

from api.dependencies import get_identity
from api.schemas.applications import ApplicationStatusUpdate, ApplyRequest
from api.schemas.common import ERROR_RESPONSES
from api.services import applications as application_service
from core.security import CallerIdentity
from database.engine import get_db

router = APIRouter(responses=ERROR_RESPONSES)


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    summary="Apply To Job",
    description="Apply to an active job posting. Each posting accepts one application per talent.",
)
async def apply_to_job(
    data: ApplyRequest,
    identity: Optional[CallerIdentity] = Depends(get_identity),
    db: AsyncSession = Depends(get_db),
):
    return await application_service.apply_to_job(db, identity, data)


@router.get(
    "/mine",
    summary="My Applications",
    description="The caller's applications with posting and team.",
)
async def get_my_applications(
    identity: Optional[CallerIdentity] = Depends(get_identity),
    db: AsyncSession = Depends(get_db),
):
    return await application_service.get_my_applications(db, identity)


@router.get(
    "/{application_id}",
    summary="Get Application Details",
    description="Full application view for the applicant or an owner/admin of the posting's team.",
)
async def get_application(
    application_id: int = Path(..., description="Application ID"),
    identity: Optional[CallerIdentity] = Depends(get_identity),
    db: AsyncSession = Depends(get_db),
):
    return await application_service.get_application_details(db, identity, application_id)


@router.post(
    "/{application_id}/withdraw",
    summary="Withdraw Application",
    description="Withdraw one of the caller's pending applications.",
)
async def withdraw_application(
    application_id: int = Path(..., description="Application ID"),
    identity: Optional[CallerIdentity] = Depends(get_identity),
    db: AsyncSession = Depends(get_db),
):
    return await application_service.withdraw_application(db, identity, application_id)


@router.patch(
    "/{application_id}/status",
    summary="Decide On Application",
    description=(
        "Match or reject a pending application. Matching creates the match "
        "and adds the talent to the team. Requires owner or admin role."
    ),
)
async def update_application_status(
    data: ApplicationStatusUpdate,
    application_id: int = Path(..., description="Application ID"),
    identity: Optional[CallerIdentity] = Depends(get_identity),
    db: AsyncSession = Depends(get_db),
):
    return await application_service.update_application_status(db, identity, application_id, data)
