"""In-memory response cache for question listings.

Entries are keyed by request path plus query string and expire after a fixed
window. Question mutations invalidate by path prefix.
"""

import logging
import threading
from datetime import datetime, timedelta
from typing import Any, Callable, Dict, Optional, Tuple

import pytz

from config import QUESTION_CACHE_TTL_SECONDS

logger = logging.getLogger(__name__)


class ResponseCache:
    """Thread-safe TTL cache of JSON-ready payloads."""

    def __init__(
        self,
        ttl_seconds: int = QUESTION_CACHE_TTL_SECONDS,
        clock: Callable[[], datetime] = lambda: datetime.now(pytz.utc),
    ):
        """Initialize ResponseCache.

        Args:
            ttl_seconds: Lifetime of an entry.
            clock: Returns the current time; injectable for tests.
        """
        self._entries: Dict[str, Tuple[Any, datetime]] = {}
        self._lock = threading.Lock()
        self._ttl = timedelta(seconds=ttl_seconds)
        self.clock = clock

    def get(self, key: str) -> Optional[Any]:
        """Return the cached payload, or None when missing or expired."""
        now = self.clock()
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            payload, expires_at = entry
            if now >= expires_at:
                del self._entries[key]
                logger.debug("Cache entry expired: %s", key)
                return None
        logger.info("Cache hit for %s", key)
        return payload

    def set(self, key: str, payload: Any) -> None:
        with self._lock:
            self._entries[key] = (payload, self.clock() + self._ttl)
        logger.debug("Cached %s", key)

    def invalidate_prefix(self, prefix: str) -> int:
        """Drop every entry whose key starts with ``prefix``; returns the count."""
        with self._lock:
            keys = [k for k in self._entries if k.startswith(prefix)]
            for key in keys:
                del self._entries[key]
        logger.info("Invalidated %d cache entries under %s", len(keys), prefix)
        return len(keys)

    def clear(self) -> None:
        with self._lock:
            count = len(self._entries)
            self._entries.clear()
        logger.info("Cache cleared (%d entries removed)", count)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
