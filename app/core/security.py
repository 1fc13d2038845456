"""Bearer token verification.

Tokens are minted by the identity provider; this service only checks them and
reads the caller's user id from ``sub``.
"""

from datetime import UTC, datetime, timedelta
from typing import Any
from uuid import UUID

from jose import JWTError, jwt

from app.config import settings
from app.core.exceptions import AuthenticationError

ACCESS_TOKEN_TYPE = "access"


def create_access_token(
    data: dict[str, Any],
    expires_delta: timedelta | None = None,
) -> str:
    """Mint an access token signed with the shared secret (tooling and tests)."""
    claims = {
        **data,
        "exp": datetime.now(UTC) + (expires_delta or timedelta(minutes=settings.access_token_expire_minutes)),
        "type": ACCESS_TOKEN_TYPE,
    }
    return jwt.encode(claims, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def verify_token(token: str, token_type: str = ACCESS_TOKEN_TYPE) -> dict[str, Any]:
    """Verify signature and expiry; return the claims."""
    try:
        claims = jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])
    except JWTError as e:
        raise AuthenticationError(f"Token validation failed: {e}")
    if claims.get("type") != token_type:
        raise AuthenticationError("Invalid token type")
    return claims


def token_subject(token: str) -> UUID:
    """User id carried by a valid access token."""
    subject = verify_token(token).get("sub")
    try:
        return UUID(str(subject))
    except ValueError:
        raise AuthenticationError("Invalid token subject")
