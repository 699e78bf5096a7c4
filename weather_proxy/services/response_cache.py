#  Weather Proxy - Response Cache
#
#  In-memory TTL cache for relayed upstream responses.
#  Entries expire passively: an expired entry is dropped when it is next read.
#  No capacity bound and no invalidation API; each worker process has its own copy.
#
#  Depends on: config.py
#  Used by:    container.py, routes/proxy.py

import logging
import math
import time
from dataclasses import dataclass
from typing import Callable

from weather_proxy.config import ProxySettings

logger = logging.getLogger("weather_proxy.cache")


@dataclass
class CachedResponse:
    body: bytes
    status_code: int
    media_type: str
    expires_at: float


class ResponseCache:
    """Response store keyed by request path + raw query string."""

    def __init__(self, settings: ProxySettings, clock: Callable[[], float] = time.monotonic):
        self._ttl = settings.cache_duration
        self._clock = clock
        self._entries: dict[str, CachedResponse] = {}

    @property
    def enabled(self) -> bool:
        return self._ttl > 0

    @property
    def ttl(self) -> int:
        return self._ttl

    @staticmethod
    def cache_key(path: str, query_string: str) -> str:
        """Key from the path and the query string exactly as received.

        Parameter order is significant: ?a=1&b=2 and ?b=2&a=1 are distinct keys.
        """
        return f"{path}?{query_string}" if query_string else path

    def get(self, key: str) -> CachedResponse | None:
        entry = self._entries.get(key)
        if entry is None:
            return None
        if self._clock() >= entry.expires_at:
            del self._entries[key]
            logger.debug("Cache entry expired: %s", key)
            return None
        return entry

    def set(
        self,
        key: str,
        body: bytes,
        status_code: int = 200,
        media_type: str = "application/json",
    ) -> CachedResponse:
        entry = CachedResponse(
            body=body,
            status_code=status_code,
            media_type=media_type,
            expires_at=self._clock() + self._ttl,
        )
        if self.enabled:
            self._entries[key] = entry
        return entry

    def remaining_ttl(self, entry: CachedResponse) -> int:
        """Whole seconds until `entry` expires (never negative)."""
        return max(0, math.ceil(entry.expires_at - self._clock()))

    def clear(self):
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: str) -> bool:
        return self.get(key) is not None
