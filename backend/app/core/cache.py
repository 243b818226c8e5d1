# backend/app/core/cache.py

import threading
import time
from typing import Any, Callable, Dict, Optional, Tuple


class TTLCache:
    """
    Process-local key/value cache with per-entry expiry.

    Only get/set/evict/clear are used by callers, so a shared store can be
    dropped in behind the same methods.
    """

    def __init__(self, ttl_seconds: float, clock: Callable[[], float] = time.monotonic):
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._data: Dict[str, Tuple[float, Any]] = {}
        self._lock = threading.Lock()

    @staticmethod
    def normalize_key(key: str) -> str:
        return key.strip().lower()

    def get(self, key: str) -> Optional[Any]:
        key = self.normalize_key(key)
        with self._lock:
            entry = self._data.get(key)
            if entry is None:
                return None
            stored_at, value = entry
            if self._clock() - stored_at >= self.ttl_seconds:
                del self._data[key]
                return None
            return value

    def set(self, key: str, value: Any) -> None:
        with self._lock:
            self._data[self.normalize_key(key)] = (self._clock(), value)

    def evict(self, key: Optional[str] = None) -> int:
        """Drop one key, or every expired entry when no key is given."""
        with self._lock:
            if key is not None:
                return 1 if self._data.pop(self.normalize_key(key), None) is not None else 0
            now = self._clock()
            expired = [k for k, (ts, _) in self._data.items() if now - ts >= self.ttl_seconds]
            for k in expired:
                del self._data[k]
            return len(expired)

    def clear(self) -> None:
        with self._lock:
            self._data.clear()

    def __len__(self) -> int:
        return len(self._data)
