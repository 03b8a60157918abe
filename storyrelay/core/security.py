"""Password hashing and JWT issuance/verification for cookie-based authentication."""

import logging
from datetime import UTC, datetime, timedelta
from typing import Any

import bcrypt
import jwt

from storyrelay.core.config import settings

logger = logging.getLogger(__name__)

BEARER_PREFIX = "Bearer "


def hash_password(plain_password: str) -> str:
    """Hash a plain-text password for storage. Do not store plain passwords."""
    # bcrypt has a 72-byte limit; truncate to avoid errors.
    pw_bytes = plain_password.encode("utf-8")[:72]
    return bcrypt.hashpw(pw_bytes, bcrypt.gensalt(rounds=settings.BCRYPT_ROUNDS)).decode("utf-8")


def verify_password(plain_password: str, hashed: str) -> bool:
    """Verify a plain password against a stored hash."""
    pw_bytes = plain_password.encode("utf-8")[:72]
    try:
        return bcrypt.checkpw(pw_bytes, hashed.encode("utf-8"))
    except (ValueError, TypeError):
        return False


def issue_access_token(user_id: int, expire_minutes: int | None = None) -> str:
    """
    Create a signed JWT whose only identity claim is sub (the user id).

    An exp claim is added only when the effective expiry is positive;
    JWT_EXPIRE_MINUTES=0 issues tokens that are valid for the lifetime of the secret.
    """
    if expire_minutes is None:
        expire_minutes = settings.JWT_EXPIRE_MINUTES
    now = datetime.now(UTC)
    payload: dict[str, Any] = {"sub": str(user_id), "iat": now}
    if expire_minutes > 0:
        payload["exp"] = now + timedelta(minutes=expire_minutes)
    return jwt.encode(
        payload,
        settings.JWT_SECRET.get_secret_value(),
        algorithm=settings.JWT_ALGORITHM,
    )


def verify_access_token(token: str | None) -> int | None:
    """
    Return the user id embedded in a valid token, or None.

    None covers an absent token, a bad signature, malformed input, an expired
    token and a sub claim that is not an integer. Never raises.
    """
    if not token:
        return None
    try:
        payload = jwt.decode(
            token,
            settings.JWT_SECRET.get_secret_value(),
            algorithms=[settings.JWT_ALGORITHM],
        )
    except jwt.PyJWTError as e:
        logger.debug("Token rejected: %s", e)
        return None
    try:
        return int(payload.get("sub"))
    except (TypeError, ValueError):
        return None


def parse_bearer(value: str | None) -> str | None:
    """Extract the token from a 'Bearer <token>' value; None if absent or wrongly prefixed."""
    if not value or not value.startswith(BEARER_PREFIX):
        return None
    token = value[len(BEARER_PREFIX):].strip()
    return token or None
