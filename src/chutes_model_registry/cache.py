"""Time-boxed in-memory cache for the fetched model list.

The cache holds at most one snapshot. Expiry is observed lazily: ``get()``
drops an expired snapshot when it is read, there is no background timer.
"""

import time
from typing import Callable, Iterable, List, Optional

from .logging import LogEvent, log_debug
from .types import CachedModelData, ChutesModel

DEFAULT_TTL_SECONDS = 3600


class ModelCache:
    """Single-snapshot cache with a fixed TTL.

    All timestamps, ages and TTL values are in milliseconds.
    """

    def __init__(self, ttl_seconds: float = DEFAULT_TTL_SECONDS, clock: Optional[Callable[[], float]] = None):
        """Initialize the cache.

        Args:
            ttl_seconds: Lifetime of a snapshot in seconds; fractions are honored
            clock: Callable returning the current time in seconds
                   (defaults to ``time.time``)

        Raises:
            ValueError: If ``ttl_seconds`` is not positive
        """
        if ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be positive")
        self._ttl_ms = ttl_seconds * 1000
        self._clock = clock or time.time
        self._cache: Optional[CachedModelData] = None

    @property
    def ttl_ms(self) -> float:
        """Configured snapshot lifetime in milliseconds."""
        return self._ttl_ms

    def _now(self) -> float:
        return self._clock() * 1000

    def set(self, models: Iterable[ChutesModel]) -> None:
        """Replace the stored snapshot with ``models``."""
        now = self._now()
        self._cache = CachedModelData(models=tuple(models), fetched_at=now, expires_at=now + self._ttl_ms)
        log_debug(LogEvent.MODEL_CACHE, "Cache snapshot stored", count=len(self._cache.models))

    def get(self) -> Optional[CachedModelData]:
        """Return the snapshot, clearing it first if it has expired."""
        if self._cache is None:
            return None

        if self._now() > self._cache.expires_at:
            log_debug(LogEvent.MODEL_CACHE, "Cache snapshot expired")
            self._cache = None
            return None

        return self._cache

    def get_models(self) -> Optional[List[ChutesModel]]:
        """Return a copy of the cached models, or None when no valid snapshot exists."""
        cached = self.get()
        return list(cached.models) if cached is not None else None

    def is_valid(self) -> bool:
        """Check for a valid snapshot. Clears an expired one as a side effect."""
        return self.get() is not None

    def is_stale(self) -> bool:
        """Check whether the snapshot is missing or expired without clearing it."""
        if self._cache is None:
            return True
        return self._now() > self._cache.expires_at

    def clear(self) -> None:
        """Drop the stored snapshot."""
        self._cache = None

    def get_age(self) -> Optional[float]:
        """Milliseconds since the stored snapshot was fetched."""
        if self._cache is None:
            return None
        return self._now() - self._cache.fetched_at

    def get_remaining_ttl(self) -> Optional[float]:
        """Milliseconds until the stored snapshot expires, never negative."""
        if self._cache is None:
            return None
        remaining = self._cache.expires_at - self._now()
        return remaining if remaining > 0 else 0
