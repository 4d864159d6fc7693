"""Resolve authenticated callers to talent profiles."""

from typing import Optional
import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from core.exceptions import NotFoundError, UnauthenticatedError
from core.security import CallerIdentity
from database.models.talent import Talent

logger = logging.getLogger(__name__)


async def resolve_talent(db: AsyncSession, token_identifier: str) -> Optional[Talent]:
    """Look up the talent whose stored token identifier matches."""
    result = await db.execute(
        select(Talent).where(Talent.token_identifier == token_identifier)
    )
    return result.scalar_one_or_none()


async def resolve_caller(
    db: AsyncSession,
    identity: Optional[CallerIdentity],
) -> Optional[Talent]:
    """
    Resolve the caller to a talent.

    Returns None for anonymous callers and for callers without a profile,
    which read-only queries treat as an empty result.
    """
    if identity is None:
        return None
    return await resolve_talent(db, identity.token_identifier)


def require_identity(identity: Optional[CallerIdentity]) -> CallerIdentity:
    if identity is None:
        raise UnauthenticatedError("Not authenticated")
    return identity


async def require_caller(
    db: AsyncSession,
    identity: Optional[CallerIdentity],
) -> Talent:
    """
    Resolve the caller for a mutation.

    Raises:
        UnauthenticatedError: If the request carries no identity
        NotFoundError: If the caller has not created a talent profile yet
    """
    identity = require_identity(identity)
    talent = await resolve_talent(db, identity.token_identifier)
    if talent is None:
        logger.info(f"No talent profile for subject {identity.subject}")
        raise NotFoundError("Talent profile not found")
    return talent
