from datetime import datetime, timedelta, timezone
from typing import Optional, Any

from jose import JWTError, jwt

from app.config import settings


# Tokens are issued by the food-ordering service with an integer "sub";
# python-jose only accepts string subjects unless this check is disabled.
DECODE_OPTIONS = {"verify_sub": False}


def create_access_token(
    user_id: int,
    expires_delta: Optional[timedelta] = None,
    additional_claims: Optional[dict[str, Any]] = None
) -> str:
    """
    Create a JWT access token in the food-ordering service's format.

    Used by tests and local tooling; production tokens come from upstream.

    Args:
        user_id: Food-ordering user ID, stored as the integer subject
        expires_delta: Optional custom expiration time
        additional_claims: Optional additional claims to include

    Returns:
        Encoded JWT token string
    """
    if expires_delta:
        expire = datetime.now(timezone.utc) + expires_delta
    else:
        expire = datetime.now(timezone.utc) + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)

    to_encode = {
        "sub": user_id,
        "exp": expire,
        "iat": datetime.now(timezone.utc),
    }

    if additional_claims:
        to_encode.update(additional_claims)

    return jwt.encode(
        to_encode,
        settings.JWT_SECRET,
        algorithm=settings.ALGORITHM
    )


def decode_token(token: str) -> Optional[dict[str, Any]]:
    """
    Decode and validate a JWT token.

    Returns:
        Decoded token payload or None if invalid or expired
    """
    try:
        return jwt.decode(
            token,
            settings.JWT_SECRET,
            algorithms=[settings.ALGORITHM],
            options=DECODE_OPTIONS,
        )
    except JWTError:
        return None


def verify_access_token(token: str) -> Optional[int]:
    """
    Verify an access token and return the subject (user ID).

    Returns:
        Integer user ID or None if the token or its subject is invalid
    """
    payload = decode_token(token)
    if payload is None:
        return None

    sub = payload.get("sub")
    if isinstance(sub, bool):
        return None
    if isinstance(sub, int):
        return sub
    if isinstance(sub, str) and sub.isdigit():
        return int(sub)
    return None
