"""
Authentication Service

Token issuance lives with the platform's identity service; this module only
validates access tokens and mints them for scripts and tests.
"""
from datetime import timedelta
from typing import Optional

from teamaccess.models.user import User
from teamaccess.utils.security import create_access_token, decode_token, verify_token_type


def create_user_token(user: User, expires_delta: Optional[timedelta] = None) -> str:
    """
    Create an access token for a user

    Args:
        user: User object
        expires_delta: Optional expiration time delta

    Returns:
        Encoded JWT access token
    """
    token_data = {
        "sub": str(user.id),
        "email": user.email,
        "superadmin": bool(user.is_superadmin),
    }
    return create_access_token(token_data, expires_delta)


def decode_access_token(token: str) -> Optional[dict]:
    """
    Decode and validate an access token

    Args:
        token: JWT access token

    Returns:
        Decoded payload or None if invalid
    """
    payload = decode_token(token)

    if payload is None:
        return None

    if not verify_token_type(payload, "access"):
        return None

    return payload
