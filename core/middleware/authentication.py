"""
Authentication middleware for verifying caller identity.

This middleware:
1. Reads the bearer token from the Authorization header
2. Verifies it against the identity provider's signing key
3. Places the resulting CallerIdentity in the request scope

Requests without a token continue anonymously; read endpoints then return
empty results and mutations fail with 401. A token that is present but
invalid is always rejected.
"""

import logging
from typing import Callable, Optional
from datetime import datetime, timezone
import jwt
from fastapi import Request, status
from fastapi.responses import JSONResponse

from core.security import CallerIdentity, identity_from_payload, verify_jwt_token

logger = logging.getLogger(__name__)

# Endpoints that never look at credentials
PUBLIC_ENDPOINTS = [
    "/",
    "/health",
    "/ready",
    "/docs",
    "/redoc",
    "/openapi.json",
]


class AuthenticationError(Exception):
    """Base exception for authentication errors."""
    pass


class TokenExpiredError(AuthenticationError):
    """Raised when JWT token has expired."""
    pass


class TokenInvalidError(AuthenticationError):
    """Raised when JWT token is invalid."""
    pass


class AuthenticationMiddleware:
    """
    Authentication middleware that resolves the caller identity.

    Features:
    - JWT token validation
    - Anonymous pass-through when no token is sent
    - Request context injection (``scope["identity"]``)
    """

    def __init__(
        self,
        app: Callable,
        jwt_secret: str,
        jwt_algorithm: str = "HS256",
        jwt_audience: Optional[str] = None,
    ):
        """
        Initialize authentication middleware.

        Args:
            app: ASGI application
            jwt_secret: Secret key for JWT verification
            jwt_algorithm: JWT signing algorithm
            jwt_audience: Expected audience claim, if any
        """
        self.app = app
        self.jwt_secret = jwt_secret
        self.jwt_algorithm = jwt_algorithm
        self.jwt_audience = jwt_audience

    async def __call__(self, scope: dict, receive: Callable, send: Callable) -> None:
        """
        Process requests with authentication validation.

        Args:
            scope: ASGI scope dictionary
            receive: ASGI receive function
            send: ASGI send function
        """
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        request = Request(scope)
        scope["identity"] = None

        if self._is_public_endpoint(request.url.path):
            await self.app(scope, receive, send)
            return

        token = self._extract_token(request)
        if token is None:
            await self.app(scope, receive, send)
            return

        try:
            identity = self._authenticate(token)
        except TokenExpiredError:
            await self._send_error_response(
                scope,
                receive,
                send,
                code="TOKEN_EXPIRED",
                message="Authentication token has expired. Please sign in again.",
            )
            return
        except TokenInvalidError as e:
            logger.warning(f"Invalid token: {str(e)}")
            await self._send_error_response(
                scope,
                receive,
                send,
                code="TOKEN_INVALID",
                message="Invalid authentication token.",
            )
            return

        scope["identity"] = identity
        await self.app(scope, receive, send)

    def _authenticate(self, token: str) -> CallerIdentity:
        """
        Verify a token and build the caller identity.

        Raises:
            TokenExpiredError: If the token has expired
            TokenInvalidError: If the token fails verification
        """
        try:
            payload = verify_jwt_token(
                token, self.jwt_secret, self.jwt_algorithm, self.jwt_audience
            )
        except jwt.ExpiredSignatureError:
            raise TokenExpiredError("Token has expired")
        except jwt.InvalidTokenError as e:
            raise TokenInvalidError(f"Invalid token: {str(e)}")
        return identity_from_payload(payload)

    def _is_public_endpoint(self, path: str) -> bool:
        """
        Check if endpoint is public (no auth required).

        Args:
            path: Request path

        Returns:
            True if endpoint is public
        """
        if path in PUBLIC_ENDPOINTS:
            return True

        public_prefixes = ["/health", "/ready", "/docs", "/redoc", "/openapi"]
        return any(path.startswith(prefix) for prefix in public_prefixes)

    def _extract_token(self, request: Request) -> Optional[str]:
        """
        Extract JWT token from Authorization header.

        Args:
            request: FastAPI request

        Returns:
            JWT token or None
        """
        auth_header = request.headers.get("Authorization")

        if auth_header and auth_header.startswith("Bearer "):
            return auth_header[7:] or None

        return None

    async def _send_error_response(
        self,
        scope: dict,
        receive: Callable,
        send: Callable,
        code: str,
        message: str,
    ) -> None:
        """
        Send a 401 response for authentication failures.

        Args:
            scope: ASGI scope dictionary
            receive: ASGI receive function
            send: ASGI send function
            code: Error code
            message: Error message
        """
        error_response = {
            "error": {
                "code": code,
                "message": message,
                "path": scope.get("path", "unknown"),
                "method": scope.get("method", "unknown"),
                "timestamp": datetime.now(timezone.utc).isoformat(),
            }
        }

        response = JSONResponse(
            status_code=status.HTTP_401_UNAUTHORIZED,
            content=error_response,
            headers={"WWW-Authenticate": "Bearer"},
        )

        await response(scope, receive, send)


def get_caller_identity(request: Request) -> Optional[CallerIdentity]:
    """
    Get the caller identity placed in the request scope, if any.

    Args:
        request: FastAPI request

    Returns:
        CallerIdentity or None for anonymous requests
    """
    return request.scope.get("identity")
