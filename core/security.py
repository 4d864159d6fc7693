"""
Caller identity from identity-provider tokens.

Tokens are issued by the external authentication provider; this service only
verifies them and derives the token identifier used to look up talent
profiles.
"""

import logging
from dataclasses import dataclass
from typing import Any, Optional, TypedDict

import jwt

logger = logging.getLogger(__name__)


class JWTPayload(TypedDict, total=False):
    """Claims read from provider tokens."""

    sub: str
    iss: str
    aud: str
    exp: int
    iat: int
    name: str
    email: str


@dataclass(frozen=True)
class CallerIdentity:
    """Authenticated caller as seen by the service layer."""

    subject: str
    token_identifier: str
    name: Optional[str] = None
    email: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.subject,
            "name": self.name,
            "email": self.email,
            "token_identifier": self.token_identifier,
        }


def verify_jwt_token(
    token: str,
    secret: str,
    algorithm: str = "HS256",
    audience: Optional[str] = None,
) -> JWTPayload:
    """
    Verify a JWT and return its claims.

    Args:
        token: Encoded JWT
        secret: Verification key
        algorithm: Signing algorithm
        audience: Expected ``aud`` claim, if any

    Returns:
        Decoded payload

    Raises:
        jwt.ExpiredSignatureError: If the token has expired
        jwt.InvalidTokenError: If the token is malformed or badly signed
    """
    options = {"require": ["sub"], "verify_aud": audience is not None}
    return jwt.decode(
        token,
        secret,
        algorithms=[algorithm],
        audience=audience,
        options=options,
    )


def build_token_identifier(payload: JWTPayload) -> str:
    """Token identifier is ``issuer|subject``, or the bare subject without an issuer."""
    issuer = payload.get("iss")
    subject = payload["sub"]
    return f"{issuer}|{subject}" if issuer else subject


def identity_from_payload(payload: JWTPayload) -> CallerIdentity:
    return CallerIdentity(
        subject=payload["sub"],
        token_identifier=build_token_identifier(payload),
        name=payload.get("name"),
        email=payload.get("email"),
    )
