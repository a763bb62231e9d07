import time
from typing import Any, Callable, Dict, Optional, Tuple

from ..config import Settings, get_settings


class InMemoryCache:
    """TTL cache for GitHub lookups, keyed case-insensitively by ``owner/repo``."""

    def __init__(self, settings: Optional[Settings] = None, clock: Callable[[], float] = time.time):
        self.ttl = (settings or get_settings()).cache_ttl_seconds
        self.clock = clock
        self.store: Dict[str, Tuple[float, Any]] = {}

    @staticmethod
    def _key(key: str) -> str:
        # GitHub owner and repo names are case-insensitive
        return key.lower()

    def get(self, key: str):
        entry = self.store.get(self._key(key))
        if entry is None:
            return None
        expires_at, value = entry
        if self.clock() > expires_at:
            self.store.pop(self._key(key), None)
            return None
        return value

    def set(self, key: str, value: Any):
        self.store[self._key(key)] = (self.clock() + self.ttl, value)

    def __len__(self) -> int:
        return len(self.store)
