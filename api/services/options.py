"""Predefined option service functions."""

from typing import Any, Dict, List, Optional
import logging

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from api.schemas.options import PredefinedOptionCreate, PredefinedOptionUpdate
from api.services.identity import require_identity
from core.exceptions import ConflictError, NotFoundError
from core.security import CallerIdentity
from database.models.options import PredefinedOption

logger = logging.getLogger(__name__)


async def get_predefined_options(
    db: AsyncSession,
    category: str,
    active_only: bool = False,
) -> List[Dict[str, Any]]:
    """Options of a category, sorted by display order."""
    query = (
        select(PredefinedOption)
        .where(PredefinedOption.category == category)
        .order_by(PredefinedOption.order, PredefinedOption.id)
    )
    if active_only:
        query = query.where(PredefinedOption.is_active.is_(True))

    result = await db.execute(query)
    return [option.to_dict() for option in result.scalars().all()]


async def get_option_categories(db: AsyncSession) -> List[str]:
    result = await db.execute(
        select(PredefinedOption.category).distinct().order_by(PredefinedOption.category)
    )
    return list(result.scalars().all())


async def search_predefined_options(
    db: AsyncSession,
    category: str,
    term: str,
    active_only: bool = False,
) -> List[Dict[str, Any]]:
    """
    Options of a category whose display name or value contains the term,
    ignoring case. Inactive options are included unless
    ``active_only`` is set.
    """
    needle = term.strip().lower()
    query = (
        select(PredefinedOption)
        .where(PredefinedOption.category == category)
        .where(
            func.lower(PredefinedOption.display_name).contains(needle, autoescape=True)
            | func.lower(PredefinedOption.value).contains(needle, autoescape=True)
        )
        .order_by(PredefinedOption.order, PredefinedOption.id)
    )
    if active_only:
        query = query.where(PredefinedOption.is_active.is_(True))

    result = await db.execute(query)
    return [option.to_dict() for option in result.scalars().all()]


async def add_predefined_option(
    db: AsyncSession,
    identity: Optional[CallerIdentity],
    data: PredefinedOptionCreate,
) -> Dict[str, Any]:
    """
    Add an option to a category.

    Without an explicit order the option goes after the last one of its
    category.

    Raises:
        ConflictError: If the category already has this value
    """
    identity = require_identity(identity)

    existing = await db.execute(
        select(PredefinedOption.id).where(
            PredefinedOption.category == data.category,
            PredefinedOption.value == data.value,
        )
    )
    if existing.scalar_one_or_none() is not None:
        raise ConflictError(
            f"Option {data.value!r} already exists in category {data.category!r}"
        )

    order = data.order
    if order is None:
        result = await db.execute(
            select(func.max(PredefinedOption.order)).where(
                PredefinedOption.category == data.category
            )
        )
        order = (result.scalar() or 0) + 1

    option = PredefinedOption(
        category=data.category,
        value=data.value,
        display_name=data.display_name,
        is_active=data.is_active,
        order=order,
    )
    db.add(option)
    await db.commit()

    logger.info(f"Subject {identity.subject} added option {option.id} to {data.category}")
    return {"option_id": option.id}


async def update_predefined_option(
    db: AsyncSession,
    identity: Optional[CallerIdentity],
    option_id: int,
    data: PredefinedOptionUpdate,
) -> Dict[str, Any]:
    identity = require_identity(identity)

    result = await db.execute(select(PredefinedOption).where(PredefinedOption.id == option_id))
    option = result.scalar_one_or_none()
    if option is None:
        raise NotFoundError("Option not found")

    changes = {
        field: value
        for field, value in data.model_dump(exclude_unset=True).items()
        if value is not None
    }
    if not changes:
        return {"option_id": option.id}

    for field, value in changes.items():
        setattr(option, field, value)
    await db.commit()

    logger.info(f"Subject {identity.subject} updated option {option.id}: {sorted(changes)}")
    return {"option_id": option.id}
