"""Refresh token issue, lookup and revocation service."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Callable, Optional
import logging

from postbox.config import settings
from postbox.core.database import RecordStore
from postbox.core.exceptions import ResourceNotFoundError
from postbox.core.security import generate_refresh_token
from postbox.models.refresh_token import RefreshToken

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TokenService:
    """
    Manage refresh-token records.

    Records are keyed by user id, so issuing a token replaces the user's
    previous one. Lookups scan by token value. Expired records stay in the
    document until revoked; callers check ``RefreshToken.is_expired``.
    """

    def __init__(
        self,
        store: RecordStore,
        clock: Callable[[], datetime] = _utcnow,
        lifetime: Optional[timedelta] = None,
    ):
        self.store = store
        self.clock = clock
        self.lifetime = lifetime or timedelta(days=settings.REFRESH_TOKEN_EXPIRE_DAYS)

    def issue_refresh_token(self, user_id: int) -> RefreshToken:
        record = RefreshToken(
            user_id=user_id,
            token=generate_refresh_token(),
            expires_at=self.clock() + self.lifetime,
        )
        with self.store.edit() as document:
            document.refresh_tokens[user_id] = record

        logger.info(f"Issued refresh token for user {user_id}")
        return record

    def get_refresh_token(self, token: str) -> RefreshToken:
        for record in self.store.read().refresh_tokens.values():
            if record.token == token:
                return record
        raise ResourceNotFoundError("Refresh token")

    def revoke_refresh_token(self, token: str) -> None:
        with self.store.edit() as document:
            key = next(
                (k for k, record in document.refresh_tokens.items() if record.token == token),
                None,
            )
            if key is None:
                raise ResourceNotFoundError("Refresh token")
            del document.refresh_tokens[key]

        logger.info(f"Revoked refresh token for user {key}")

    def is_active(self, record: RefreshToken) -> bool:
        return not record.is_expired(self.clock())
