"""Refresh token model"""

from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, field_validator


class RefreshToken(BaseModel):
    """Refresh token record, looked up by ``token`` value"""

    user_id: int
    token: str
    expires_at: datetime

    @field_validator("expires_at")
    @classmethod
    def _assume_utc(cls, value: datetime) -> datetime:
        # Naive timestamps in older documents were written in UTC.
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        now = now or datetime.now(timezone.utc)
        return self.expires_at <= now
