"""Persisted entity models"""

from postbox.models.post import Post
from postbox.models.user import User
from postbox.models.refresh_token import RefreshToken
from postbox.models.document import Document

__all__ = ["Post", "User", "RefreshToken", "Document"]
