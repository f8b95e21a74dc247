"""Time-bounded response cache shared by connector gateway calls."""

import json
import threading
import time
from collections import OrderedDict
from typing import Any, Optional, Tuple

DEFAULT_MAX_ENTRIES = 1024


def canonical_json(value: Any) -> str:
    """Serialize with sorted keys and no whitespace so equal params give equal keys."""
    return json.dumps(value, sort_keys=True, separators=(",", ":"), default=str)


class ResponseCache:
    """
    In-process key/payload store whose entries expire after a per-entry TTL.

    Expired entries are purged on every write, and once max_entries is reached
    the least recently used entry is evicted, so applicant-specific keys that
    are never read again do not accumulate.
    """

    def __init__(self, max_entries: int = DEFAULT_MAX_ENTRIES):
        self.max_entries = max_entries
        self._entries: "OrderedDict[str, Tuple[float, Any]]" = OrderedDict()
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    @staticmethod
    def build_key(connector_id: str, params: dict[str, Any]) -> str:
        return f"connector:{connector_id}:{canonical_json(params)}"

    def get(self, key: str) -> Optional[Any]:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            expires_at, payload = entry
            if expires_at <= time.monotonic():
                del self._entries[key]
                return None
            self._entries.move_to_end(key)
            return payload

    def set(self, key: str, payload: Any, ttl_seconds: float) -> None:
        if ttl_seconds <= 0:
            return
        with self._lock:
            now = time.monotonic()
            self._purge_expired(now)
            self._entries[key] = (now + ttl_seconds, payload)
            self._entries.move_to_end(key)
            while len(self._entries) > self.max_entries:
                self._entries.popitem(last=False)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def _purge_expired(self, now: float) -> None:
        expired = [key for key, (expires_at, _) in self._entries.items() if expires_at <= now]
        for key in expired:
            del self._entries[key]


# Process-wide cache used by gateways that are not given their own
response_cache = ResponseCache()
