"""JWT helpers shared by the API layer and tooling."""
from __future__ import annotations

from datetime import UTC, datetime, timedelta

from jose import jwt

from chartroom.core.settings import settings


def create_access_token(subject: str, extra_claims: dict[str, str] | None = None) -> str:
    """Create a JWT access token whose ``sub`` claim is the user id."""
    to_encode: dict[str, object] = {"sub": subject}
    if extra_claims:
        to_encode.update(extra_claims)
    expire = datetime.now(UTC) + timedelta(minutes=settings.access_token_expire_minutes)
    to_encode["exp"] = expire
    encoded_jwt: str = jwt.encode(
        to_encode,
        settings.secret_key,
        algorithm=settings.jwt_algorithm,
    )
    return encoded_jwt


def decode_access_token(token: str) -> dict[str, object]:
    """Decode and verify an access token.

    Raises:
        jose.JWTError: If the signature or expiry check fails.
    """
    return jwt.decode(token, settings.secret_key, algorithms=[settings.jwt_algorithm])
