"""Rate limiting for expensive endpoints.

Fixed-window counters keyed by an identifier (usually the user id). The
counter state lives in a RateLimitStore that is injected into the limiter,
so the in-process default can be swapped for a shared backend.
"""

from __future__ import annotations

import logging
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from threading import Lock
from typing import Callable

logger = logging.getLogger(__name__)

# Purge expired entries once every this many checks
PURGE_INTERVAL = 100


@dataclass(frozen=True)
class RateLimitConfig:
    """Allow ``max_requests`` per ``window_seconds``."""
    max_requests: int
    window_seconds: float


@dataclass
class RateLimitEntry:
    count: int
    reset_at: float


@dataclass
class RateLimitResult:
    """Outcome of a rate limit check."""
    allowed: bool
    limit: int
    remaining: int
    reset_at: float

    def headers(self) -> dict[str, str]:
        """X-RateLimit-* response headers."""
        return {
            "X-RateLimit-Limit": str(self.limit),
            "X-RateLimit-Remaining": str(self.remaining),
            "X-RateLimit-Reset": str(int(self.reset_at)),
        }


RATE_LIMITS: dict[str, RateLimitConfig] = {
    "AI_GENERATION": RateLimitConfig(max_requests=10, window_seconds=60),
    "EMAIL_SEND": RateLimitConfig(max_requests=50, window_seconds=60 * 60),
    "CHAT": RateLimitConfig(max_requests=30, window_seconds=60),
    "API_GENERAL": RateLimitConfig(max_requests=100, window_seconds=60),
}


class RateLimitStore(ABC):
    """Counter storage used by RateLimiter."""

    @abstractmethod
    def get(self, key: str) -> RateLimitEntry | None:
        pass

    @abstractmethod
    def set(self, key: str, entry: RateLimitEntry) -> None:
        pass

    @abstractmethod
    def purge_expired(self, now: float) -> int:
        """Drop entries whose window has ended; return how many were removed."""
        pass


class InMemoryRateLimitStore(RateLimitStore):
    """Process-local store. Resets on restart and is not shared between processes."""

    def __init__(self):
        self._entries: dict[str, RateLimitEntry] = {}
        self._lock = Lock()

    def get(self, key: str) -> RateLimitEntry | None:
        with self._lock:
            return self._entries.get(key)

    def set(self, key: str, entry: RateLimitEntry) -> None:
        with self._lock:
            self._entries[key] = entry

    def purge_expired(self, now: float) -> int:
        with self._lock:
            expired = [k for k, e in self._entries.items() if e.reset_at <= now]
            for key in expired:
                del self._entries[key]
            return len(expired)

    def __len__(self) -> int:
        return len(self._entries)


class RateLimiter:
    """Fixed-window rate limiter."""

    def __init__(
        self,
        store: RateLimitStore | None = None,
        *,
        clock: Callable[[], float] = time.time,
    ):
        self.store = store if store is not None else InMemoryRateLimitStore()
        self._clock = clock
        self._lock = Lock()
        self._checks = 0

    def check(self, identifier: str, config: RateLimitConfig) -> RateLimitResult:
        """Count one request for ``identifier`` and say whether it is allowed."""
        now = self._clock()
        with self._lock:
            self._checks += 1
            if self._checks % PURGE_INTERVAL == 0:
                self.store.purge_expired(now)

            entry = self.store.get(identifier)
            if entry is None or entry.reset_at <= now:
                entry = RateLimitEntry(count=1, reset_at=now + config.window_seconds)
                self.store.set(identifier, entry)
                return RateLimitResult(
                    allowed=True,
                    limit=config.max_requests,
                    remaining=config.max_requests - 1,
                    reset_at=entry.reset_at,
                )

            if entry.count >= config.max_requests:
                logger.info("[rate-limit] refused id=%s limit=%d", identifier, config.max_requests)
                return RateLimitResult(
                    allowed=False,
                    limit=config.max_requests,
                    remaining=0,
                    reset_at=entry.reset_at,
                )

            entry = RateLimitEntry(count=entry.count + 1, reset_at=entry.reset_at)
            self.store.set(identifier, entry)
            return RateLimitResult(
                allowed=True,
                limit=config.max_requests,
                remaining=config.max_requests - entry.count,
                reset_at=entry.reset_at,
            )
