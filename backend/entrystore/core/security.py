"""
Security utilities for password hashing and session token management.
"""
from datetime import datetime, timedelta, timezone
from functools import lru_cache
from typing import Any

from jose import JWTError, jwt
from passlib.context import CryptContext

from entrystore.config import Settings, get_settings


@lru_cache
def _get_pwd_context(schemes: tuple[str, ...]) -> CryptContext:
    # Schemes after the first are kept so older digests still verify
    return CryptContext(schemes=list(schemes), deprecated="auto")


def get_pwd_context(settings: Settings | None = None) -> CryptContext:
    """Return the password hashing context for the configured schemes."""
    settings = settings or get_settings()
    return _get_pwd_context(tuple(settings.password_schemes))


def hash_password(plain_password: str, settings: Settings | None = None) -> str:
    """
    Hash a plain password with the default scheme.

    Args:
        plain_password: The plain text password to hash
        settings: Optional settings overriding the cached ones

    Returns:
        Hashed password string
    """
    return get_pwd_context(settings).hash(plain_password)


def verify_password(
    plain_password: str,
    hashed_password: str,
    settings: Settings | None = None,
) -> bool:
    """
    Verify a plain password against a stored hash.

    Hashes in a format no configured scheme recognises never verify.

    Args:
        plain_password: The plain text password to verify
        hashed_password: The stored hash to compare against
        settings: Optional settings overriding the cached ones

    Returns:
        True if password matches, False otherwise
    """
    try:
        return get_pwd_context(settings).verify(plain_password, hashed_password)
    except ValueError:
        return False


def create_session_token(
    username: str,
    expires_delta: timedelta | None = None,
    settings: Settings | None = None,
) -> str:
    """
    Create a signed session token for an authenticated user.

    Args:
        username: Authenticated identity
        expires_delta: Optional custom lifetime
        settings: Optional settings overriding the cached ones

    Returns:
        Encoded JWT string
    """
    settings = settings or get_settings()

    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.session_expire_minutes)

    now = datetime.now(timezone.utc)
    payload = {
        "sub": username,
        "iat": now,
        "exp": now + expires_delta,
    }

    return jwt.encode(
        payload,
        settings.session_secret_key,
        algorithm=settings.session_algorithm,
    )


def decode_session_token(token: str, settings: Settings | None = None) -> dict[str, Any]:
    """
    Decode and validate a session token.

    Raises:
        JWTError: If token is invalid or expired
    """
    settings = settings or get_settings()

    return jwt.decode(
        token,
        settings.session_secret_key,
        algorithms=[settings.session_algorithm],
    )


__all__ = [
    "JWTError",
    "get_pwd_context",
    "hash_password",
    "verify_password",
    "create_session_token",
    "decode_session_token",
]
