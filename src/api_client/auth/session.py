"""Session-local token expiry state."""

from datetime import datetime, timedelta, timezone
from typing import Optional

import structlog

logger = structlog.get_logger()


def _to_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class SessionState:
    """Tracks when the current access token expires.

    Updated after every successful token fetch and cleared whenever a fetch
    fails, so a known-bad token is never treated as live.
    """

    def __init__(self) -> None:
        self._expires_at: Optional[datetime] = None
        self._active = False

    @property
    def expires_at(self) -> Optional[datetime]:
        return self._expires_at

    @property
    def is_active(self) -> bool:
        return self._active

    def update_with_access_token(self, expires_at: Optional[datetime]) -> None:
        """Record a freshly issued token's expiry (None if unknown)."""
        self._expires_at = _to_utc(expires_at) if expires_at is not None else None
        self._active = True

    def expire(self) -> None:
        """Drop any cached expiry so the next request re-acquires a token."""
        if self._active:
            logger.info("session_expired", expires_at=self._expires_at)
        self._expires_at = None
        self._active = False

    def is_expired(self, skew_seconds: float = 0.0, now: Optional[datetime] = None) -> bool:
        """Check whether the session token is expired or within ``skew_seconds`` of it.

        An inactive session counts as expired. An active session with no known
        expiry never does.
        """
        if not self._active:
            return True
        if self._expires_at is None:
            return False
        current = _to_utc(now) if now is not None else datetime.now(timezone.utc)
        return current + timedelta(seconds=skew_seconds) >= self._expires_at
