"""Bearer-token helpers (PyJWT).

Tokens are issued by the identity provider; ``create_access_token`` exists
for local development, seeding and tests.
"""

from datetime import datetime, timedelta, timezone
from typing import Any

import jwt

from palate.config import get_settings


class InvalidTokenError(Exception):
    """The bearer token is missing a subject, expired or malformed."""


def create_access_token(
    account_id: str,
    claims: dict[str, Any] | None = None,
    expires_minutes: int = 60,
) -> str:
    """Sign a token whose ``sub`` is the account id."""
    settings = get_settings()
    now = datetime.now(timezone.utc)
    payload = {
        **(claims or {}),
        "sub": str(account_id),
        "iat": int(now.timestamp()),
        "exp": now + timedelta(minutes=expires_minutes),
    }
    return jwt.encode(payload, settings.AUTH_JWT_SECRET, algorithm=settings.AUTH_JWT_ALGORITHM)


def decode_access_token(token: str) -> dict[str, Any]:
    """Verify signature and expiry; return the claims."""
    settings = get_settings()
    try:
        claims = jwt.decode(
            token,
            settings.AUTH_JWT_SECRET,
            algorithms=[settings.AUTH_JWT_ALGORITHM],
            options={"require": ["exp", "sub"]},
            leeway=settings.AUTH_JWT_LEEWAY_SECONDS,
        )
    except jwt.ExpiredSignatureError as exc:
        raise InvalidTokenError("Token expired") from exc
    except jwt.InvalidTokenError as exc:
        raise InvalidTokenError("Invalid token") from exc

    if not claims.get("sub"):
        raise InvalidTokenError("Token has no subject")
    return claims
