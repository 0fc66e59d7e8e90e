"""Pydantic schemas for API validation"""

from postbox.schemas.post import PostCreate, PostResponse
from postbox.schemas.user import (
    UserCredentials,
    UserResponse,
    LoginResponse,
    AccessTokenResponse,
)
from postbox.schemas.webhook import WebhookEvent, WebhookData
from postbox.schemas.response import ErrorResponse

__all__ = [
    "PostCreate", "PostResponse",
    "UserCredentials", "UserResponse", "LoginResponse", "AccessTokenResponse",
    "WebhookEvent", "WebhookData",
    "ErrorResponse"
]
