"""Security utilities - password hashing, JWT access tokens, refresh token values"""

from datetime import datetime, timedelta, timezone
from typing import Optional, Dict, Any
from jose import JWTError, jwt
import bcrypt
from postbox.config import settings
from postbox.core.exceptions import HashingFailedError
import logging
import secrets

logger = logging.getLogger(__name__)

REFRESH_TOKEN_BYTES = 32


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """
    Verify a password against its hash

    Malformed digests and encoding problems count as a mismatch, so callers
    cannot tell a broken digest apart from a wrong password.

    Args:
        plain_password: Plain text password
        hashed_password: Hashed password

    Returns:
        bool: True if password matches
    """
    try:
        return bcrypt.checkpw(
            plain_password.encode('utf-8'),
            hashed_password.encode('utf-8')
        )
    except (ValueError, TypeError, AttributeError):
        return False


def get_password_hash(password: str, rounds: Optional[int] = None) -> str:
    """
    Hash a password using bcrypt

    Args:
        password: Plain text password
        rounds: bcrypt cost factor, defaults to settings.BCRYPT_ROUNDS

    Returns:
        str: Hashed password

    Raises:
        HashingFailedError: If bcrypt rejects the input
    """
    try:
        return bcrypt.hashpw(
            password.encode('utf-8'),
            bcrypt.gensalt(rounds or settings.BCRYPT_ROUNDS)
        ).decode('utf-8')
    except (ValueError, TypeError, AttributeError) as e:
        logger.error(f"Password hashing failed: {e}")
        raise HashingFailedError() from e


def create_access_token(user_id: int, expires_delta: Optional[timedelta] = None) -> str:
    """
    Create JWT access token

    Args:
        user_id: Subject of the token
        expires_delta: Token expiration time

    Returns:
        str: Encoded JWT token
    """
    now = datetime.now(timezone.utc)
    if expires_delta is None:
        expires_delta = timedelta(seconds=settings.ACCESS_TOKEN_EXPIRE_SECONDS)

    to_encode = {
        "iss": settings.JWT_ISSUER,
        "sub": str(user_id),
        "iat": now,
        "exp": now + expires_delta,
    }

    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_access_token(token: str) -> Optional[Dict[str, Any]]:
    """
    Decode and verify JWT token

    Args:
        token: JWT token string

    Returns:
        Optional[Dict]: Decoded token data or None if invalid
    """
    try:
        return jwt.decode(
            token,
            settings.SECRET_KEY,
            algorithms=[settings.ALGORITHM],
            issuer=settings.JWT_ISSUER,
        )
    except JWTError:
        return None


def generate_refresh_token() -> str:
    """
    Generate an opaque refresh token value

    Returns:
        str: 64 hex characters (256 bits of randomness)
    """
    return secrets.token_hex(REFRESH_TOKEN_BYTES)
