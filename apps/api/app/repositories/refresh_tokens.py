"""Process-wide registry of refresh tokens that may still be exchanged."""

from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, datetime
import logging
import threading

from app.core.logging_safety import safe_log_identifier, token_fingerprint

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(UTC)


class RefreshTokenRegistry:
    """Lock-guarded set of active refresh tokens keyed by fingerprint.

    Entries carry the token expiry and are evicted once it passes, so the
    set only ever holds tokens that could still verify.
    """

    def __init__(self, *, clock: Callable[[], datetime] = _utcnow) -> None:
        self._clock = clock
        self._lock = threading.Lock()
        self._expiry_by_fingerprint: dict[str, datetime] = {}

    def record(self, token: str, expires_at: datetime) -> None:
        fingerprint = token_fingerprint(token)
        with self._lock:
            self._prune_locked(self._clock())
            self._expiry_by_fingerprint[fingerprint] = expires_at
            size = len(self._expiry_by_fingerprint)
        logger.debug(
            "refresh_registry.recorded token=%s active=%s",
            safe_log_identifier(fingerprint, prefix="rt"),
            size,
        )

    def is_active(self, token: str) -> bool:
        fingerprint = token_fingerprint(token)
        with self._lock:
            expires_at = self._expiry_by_fingerprint.get(fingerprint)
            if expires_at is None:
                return False
            if expires_at <= self._clock():
                del self._expiry_by_fingerprint[fingerprint]
                return False
            return True

    def revoke(self, token: str) -> bool:
        fingerprint = token_fingerprint(token)
        with self._lock:
            removed = self._expiry_by_fingerprint.pop(fingerprint, None) is not None
        if removed:
            logger.debug(
                "refresh_registry.revoked token=%s",
                safe_log_identifier(fingerprint, prefix="rt"),
            )
        return removed

    def prune(self, now: datetime | None = None) -> int:
        """Drop expired entries and return how many were evicted."""
        with self._lock:
            return self._prune_locked(now or self._clock())

    def _prune_locked(self, now: datetime) -> int:
        expired = [key for key, expires_at in self._expiry_by_fingerprint.items() if expires_at <= now]
        for key in expired:
            del self._expiry_by_fingerprint[key]
        return len(expired)

    def __len__(self) -> int:
        with self._lock:
            return len(self._expiry_by_fingerprint)


__all__ = ["RefreshTokenRegistry"]
