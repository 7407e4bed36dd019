from __future__ import annotations

import threading
import time
from typing import Any, Callable, Hashable, Optional

from cachetools import TTLCache

from ..core.constants import DEFAULT_CACHE_ENTRIES


class ResponseCache:
    """Short-lived cache for assembled dashboard payloads.

    A ttl of 0 disables caching. ``TTLCache`` is not thread-safe on its own,
    so every access goes through one lock.
    """

    def __init__(
        self,
        ttl_seconds: float,
        *,
        clock: Callable[[], float] = time.monotonic,
        max_entries: int = DEFAULT_CACHE_ENTRIES,
    ):
        ttl = float(ttl_seconds)
        self._entries: Optional[TTLCache] = (
            TTLCache(maxsize=int(max_entries), ttl=ttl, timer=clock) if ttl > 0 else None
        )
        self._lock = threading.Lock()

    @property
    def enabled(self) -> bool:
        return self._entries is not None

    def get(self, key: Hashable) -> Optional[Any]:
        if self._entries is None:
            return None
        with self._lock:
            return self._entries.get(key)

    def put(self, key: Hashable, value: Any) -> None:
        if self._entries is None:
            return
        with self._lock:
            self._entries[key] = value

    def clear(self) -> None:
        if self._entries is None:
            return
        with self._lock:
            self._entries.clear()
