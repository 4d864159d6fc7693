"""Predefined option endpoints backing the form choice fields."""

from typing import Optional

from fastapi import APIRouter, Depends, Path, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from api.dependencies import get_identity
from api.schemas.common import ERROR_RESPONSES
from api.schemas.options import PredefinedOptionCreate, PredefinedOptionUpdate
from api.services import options as option_service
from core.security import CallerIdentity
from database.engine import get_db

router = APIRouter(responses=ERROR_RESPONSES)


@router.get(
    "",
    summary="List Options",
    description="Options of a category sorted by display order.",
)
async def list_options(
    category: str = Query(..., min_length=1),
    active_only: bool = Query(False),
    db: AsyncSession = Depends(get_db),
):
    return await option_service.get_predefined_options(db, category, active_only)


@router.get("/categories", summary="List Option Categories")
async def list_categories(db: AsyncSession = Depends(get_db)):
    return await option_service.get_option_categories(db)


@router.get(
    "/search",
    summary="Search Options",
    description="Options of a category whose name or value contains the term.",
)
async def search_options(
    category: str = Query(..., min_length=1),
    q: str = Query(..., min_length=1, description="Search term"),
    active_only: bool = Query(False),
    db: AsyncSession = Depends(get_db),
):
    return await option_service.search_predefined_options(
        db, category, q, active_only=active_only
    )


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    summary="Add Option",
)
async def add_option(
    data: PredefinedOptionCreate,
    identity: Optional[CallerIdentity] = Depends(get_identity),
    db: AsyncSession = Depends(get_db),
):
    return await option_service.add_predefined_option(db, identity, data)


@router.patch("/{option_id}", summary="Update Option")
async def update_option(
    data: PredefinedOptionUpdate,
    option_id: int = Path(..., description="Option ID"),
    identity: Optional[CallerIdentity] = Depends(get_identity),
    db: AsyncSession = Depends(get_db),
):
    return await option_service.update_predefined_option(db, identity, option_id, data)
