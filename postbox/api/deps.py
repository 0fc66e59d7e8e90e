"""API dependencies - store access and authentication"""

from fastapi import Depends, Header, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from typing import Optional
import secrets

from postbox.config import settings
from postbox.core.database import RecordStore
from postbox.core.security import decode_access_token
from postbox.core.exceptions import AuthenticationError, TokenInvalidError
from postbox.services.post_service import PostService
from postbox.services.token_service import TokenService
from postbox.services.user_service import UserService

# HTTP Bearer token scheme; missing headers are reported by bearer_token()
security = HTTPBearer(auto_error=False)


def get_store(request: Request) -> RecordStore:
    """The store created by the app factory"""
    return request.app.state.store


def get_post_service(store: RecordStore = Depends(get_store)) -> PostService:
    return PostService(store)


def get_user_service(store: RecordStore = Depends(get_store)) -> UserService:
    return UserService(store)


def get_token_service(store: RecordStore = Depends(get_store)) -> TokenService:
    return TokenService(store)


def bearer_token(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security)
) -> str:
    """
    Raw bearer token from the Authorization header

    Raises:
        AuthenticationError: If the header is missing
    """
    if not credentials or not credentials.credentials:
        raise AuthenticationError("Authorization header is required")
    return credentials.credentials


def get_current_user_id(token: str = Depends(bearer_token)) -> int:
    """
    Get the authenticated user id from a JWT access token

    Args:
        token: Bearer token

    Returns:
        User id taken from the ``sub`` claim

    Raises:
        TokenInvalidError: If the token is invalid, expired or malformed
    """
    payload = decode_access_token(token)
    if not payload:
        raise TokenInvalidError("Invalid or expired token")

    try:
        return int(payload.get("sub"))
    except (TypeError, ValueError):
        raise TokenInvalidError("Invalid token claims")


def require_webhook_key(authorization: Optional[str] = Header(default=None)) -> None:
    """
    Check the ``ApiKey <key>`` header sent by the payment provider

    Raises:
        AuthenticationError: If the header is missing or the key is wrong
    """
    if not authorization:
        raise AuthenticationError("Authorization header is required")

    scheme, _, key = authorization.partition(" ")
    expected = settings.WEBHOOK_API_KEY
    if scheme != "ApiKey" or not expected or not secrets.compare_digest(key.strip(), expected):
        raise AuthenticationError("Incorrect API key")
