"""Render Cache & Build Coordinator.

Keeps recently built countdown animations in memory for a short TTL and makes
sure concurrent requests for the same parameters share one build instead of
each rendering their own copy.

Waitress serves requests from a thread pool, so the cache and in-flight maps
are guarded by one lock. The lock is only held for the check-then-insert
bookkeeping, never while rendering; waiters block on a shared Future.
"""

import logging
import threading
import time
from concurrent.futures import Future
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional, Tuple

logger = logging.getLogger(__name__)

# Request limits (pixels / seconds)
WIDTH_MIN, WIDTH_MAX, WIDTH_DEFAULT = 320, 1200, 640
HEIGHT_MIN, HEIGHT_MAX, HEIGHT_DEFAULT = 140, 600, 200
DURATION_MIN, DURATION_MAX, DURATION_DEFAULT = 10, 120, 60

CacheKey = Tuple[int, int, Optional[int]]


def clamp(value: int, low: int, high: int) -> int:
    return min(max(value, low), high)


@dataclass(frozen=True)
class RenderRequest:
    """Normalized render parameters; build through ``static`` or ``animation``."""

    width: int
    height: int
    duration_seconds: Optional[int] = None

    @classmethod
    def static(cls, width: int = WIDTH_DEFAULT, height: int = HEIGHT_DEFAULT) -> 'RenderRequest':
        return cls(
            width=clamp(width, WIDTH_MIN, WIDTH_MAX),
            height=clamp(height, HEIGHT_MIN, HEIGHT_MAX),
        )

    @classmethod
    def animation(cls, width: int = WIDTH_DEFAULT, height: int = HEIGHT_DEFAULT,
                  duration_seconds: int = DURATION_DEFAULT) -> 'RenderRequest':
        return cls(
            width=clamp(width, WIDTH_MIN, WIDTH_MAX),
            height=clamp(height, HEIGHT_MIN, HEIGHT_MAX),
            duration_seconds=clamp(duration_seconds, DURATION_MIN, DURATION_MAX),
        )

    @property
    def cache_key(self) -> CacheKey:
        return self.width, self.height, self.duration_seconds


@dataclass(frozen=True)
class CacheEntry:
    payload: bytes
    expires_at: float  # clock() seconds


class RenderCoordinator:
    """In-memory animation cache with single-flight builds per cache key."""

    def __init__(
        self,
        builder: Callable[[RenderRequest], bytes],
        ttl_seconds: float,
        max_entries: int = 256,
        clock: Callable[[], float] = time.monotonic,
    ):
        if ttl_seconds <= 0:
            raise ValueError(f"ttl_seconds must be positive, got {ttl_seconds}")
        if max_entries < 1:
            raise ValueError(f"max_entries must be at least 1, got {max_entries}")

        self._builder = builder
        self.ttl_seconds = ttl_seconds
        self.max_entries = max_entries
        self._clock = clock

        self._cache: Dict[CacheKey, CacheEntry] = {}
        self._in_flight: Dict[CacheKey, Future] = {}
        self._lock = threading.Lock()

        self._hits = 0
        self._misses = 0
        self._joins = 0
        self._builds = 0
        self._failures = 0
        logger.info(f"RenderCoordinator initialized (ttl={ttl_seconds}s, max_entries={max_entries})")

    def get_or_build_animation(self, request: RenderRequest) -> bytes:
        """Return the animation for ``request``, building it at most once at a time.

        1. An unexpired cache entry is returned as-is.
        2. If a build for the same key is already running, wait for it and
           share its bytes (or its exception).
        3. Otherwise register a new in-flight build, run the builder, cache
           the result, and always drop the in-flight marker afterwards.

        Raises:
            Exception: Whatever the builder raised, for the caller that
                started the build and for every caller that joined it.
        """
        key = request.cache_key

        with self._lock:
            entry = self._cache.get(key)
            if entry is not None:
                if self._clock() < entry.expires_at:
                    self._hits += 1
                    logger.debug(f"Render cache hit for {key}")
                    return entry.payload
                del self._cache[key]

            self._misses += 1
            future = self._in_flight.get(key)
            if future is None:
                future = Future()
                self._in_flight[key] = future
                self._builds += 1
                is_owner = True
            else:
                self._joins += 1
                is_owner = False

        if not is_owner:
            logger.debug(f"Joining in-flight build for {key}")
            return future.result()

        return self._run_build(key, request, future)

    def _run_build(self, key: CacheKey, request: RenderRequest, future: Future) -> bytes:
        logger.debug(f"Starting build for {key}")
        try:
            payload = self._builder(request)
        except BaseException as exc:
            with self._lock:
                self._failures += 1
                self._in_flight.pop(key, None)
            logger.error(f"Build failed for {key}: {exc}", exc_info=True)
            future.set_exception(exc)
            raise

        with self._lock:
            self._store(key, payload)
            self._in_flight.pop(key, None)
        future.set_result(payload)
        return payload

    def _store(self, key: CacheKey, payload: bytes) -> None:
        """Insert an entry; caller holds the lock."""
        now = self._clock()
        if key not in self._cache and len(self._cache) >= self.max_entries:
            for stale_key in [k for k, e in self._cache.items() if e.expires_at <= now]:
                del self._cache[stale_key]
            if len(self._cache) >= self.max_entries:
                oldest = min(self._cache, key=lambda k: self._cache[k].expires_at)
                logger.debug(f"Render cache full, evicting {oldest}")
                del self._cache[oldest]

        self._cache[key] = CacheEntry(payload=payload, expires_at=now + self.ttl_seconds)

    def clear(self) -> None:
        """Drop every cached entry. Builds already running are left alone."""
        with self._lock:
            self._cache.clear()
        logger.info("Render cache cleared")

    def stats(self) -> Dict[str, Any]:
        with self._lock:
            return {
                'hits': self._hits,
                'misses': self._misses,
                'joins': self._joins,
                'builds': self._builds,
                'failures': self._failures,
                'cached_entries': len(self._cache),
                'in_flight': len(self._in_flight),
                'ttl_seconds': self.ttl_seconds,
            }
