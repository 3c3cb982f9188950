"""Session token handling.

Sign-in lives with the external identity provider. It hands out HS256 JWTs
carrying ``sub``, ``email`` and ``role``; this module verifies them and, for
scripts and tests, can mint equivalent tokens.
"""

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Any

from jose import JWTError, jwt

from app.config import settings
from app.core.exceptions import AuthenticationError


@dataclass(frozen=True)
class SessionUser:
    """Identity carried by a verified session token."""

    email: str | None
    role: str = "guest"
    subject: str | None = None

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"


def create_access_token(
    data: dict[str, Any],
    expires_delta: timedelta | None = None,
) -> str:
    """Create a JWT access token."""
    to_encode = data.copy()
    expire = datetime.now(UTC) + (
        expires_delta or timedelta(minutes=settings.access_token_expire_minutes)
    )
    to_encode.update({"exp": expire, "type": "access"})
    return jwt.encode(to_encode, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def verify_token(token: str, token_type: str = "access") -> dict[str, Any]:
    """Verify and decode a JWT token."""
    try:
        payload = jwt.decode(
            token,
            settings.jwt_secret_key,
            algorithms=[settings.jwt_algorithm],
        )
        if payload.get("type") != token_type:
            raise AuthenticationError("Invalid token type")
        return payload
    except JWTError as e:
        raise AuthenticationError(f"Token validation failed: {str(e)}")


def session_from_token(token: str) -> SessionUser:
    """Build a ``SessionUser`` from a verified access token."""
    payload = verify_token(token, token_type="access")
    return SessionUser(
        email=payload.get("email"),
        role=payload.get("role") or "guest",
        subject=payload.get("sub"),
    )


def create_session_token(email: str, role: str = "guest", subject: str | None = None) -> str:
    """Mint a session token the way the identity provider does."""
    return create_access_token({"sub": subject or email, "email": email, "role": role})
