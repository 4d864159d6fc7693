"""
Core middleware package.

This package provides the middleware components of the API:
- Error handling with sensitive data sanitization
- Structured logging with PII masking
- Authentication with provider-issued JWTs
- Team-scoped authorization with explicit role permissions
"""

from core.middleware.error_handling import (
    ErrorHandlingMiddleware,
    setup_error_handlers,
    sanitize_error_message,
)

from core.middleware.logging import (
    StructuredLoggingMiddleware,
    setup_logging,
)

from core.middleware.authentication import (
    AuthenticationMiddleware,
    get_caller_identity,
    AuthenticationError,
)

from core.middleware.authorization import (
    TeamPermission,
    ROLE_PERMISSIONS,
    MANAGER_ROLES,
    can_act,
    check_team_access,
    check_team_permission,
    AuthorizationError,
    TeamAccessDenied,
    InsufficientTeamRole,
)

__all__ = [
    # Error handling
    "ErrorHandlingMiddleware",
    "setup_error_handlers",
    "sanitize_error_message",
    # Logging
    "StructuredLoggingMiddleware",
    "setup_logging",
    # Authentication
    "AuthenticationMiddleware",
    "get_caller_identity",
    "AuthenticationError",
    # Authorization
    "TeamPermission",
    "ROLE_PERMISSIONS",
    "MANAGER_ROLES",
    "can_act",
    "check_team_access",
    "check_team_permission",
    "AuthorizationError",
    "TeamAccessDenied",
    "InsufficientTeamRole",
]
