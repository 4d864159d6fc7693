"""FastAPI dependencies for dependency injection."""

from typing import Optional
from fastapi import Request

from core.middleware.authentication import get_caller_identity
from core.security import CallerIdentity


async def get_identity(request: Request) -> Optional[CallerIdentity]:
    """
    Get the caller identity resolved by the authentication middleware.

    This is optional - returns None for anonymous requests. Services decide
    whether an anonymous caller gets an empty result or a 401.
    """
    return get_caller_identity(request)
