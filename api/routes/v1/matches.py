"""Match endpoints."""

from typing import Optional

from fastapi import APIRouter, Depends, Path
from sqlalchemy.ext.asyncio import AsyncSession

from api.dependencies import get_identity
from api.schemas.applications import MatchStatusUpdate
from api.schemas.common import ERROR_RESPONSES
from api.services import matches as match_service
from core.security import CallerIdentity
from database.engine import get_db

router = APIRouter(responses=ERROR_RESPONSES)


@router.get(
    "/mine",
    summary="My Matches",
    description="The caller's matches with team contact details and posting.",
)
async def get_my_matches(
    identity: Optional[CallerIdentity] = Depends(get_identity),
    db: AsyncSession = Depends(get_db),
):
    return await match_service.get_my_matches(db, identity)


@router.patch(
    "/{match_id}/status",
    summary="Update Match Status",
    description="Complete or terminate an active match. The matched talent or a team owner/admin.",
)
async def update_match_status(
    data: MatchStatusUpdate,
    match_id: int = Path(..., description="Match ID"),
    identity: Optional[CallerIdentity] = Depends(get_identity),
    db: AsyncSession = Depends(get_db),
):
    return await match_service.update_match_status(db, identity, match_id, data)
