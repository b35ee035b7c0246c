"""In-process key/value caches with per-entry time-to-live."""

import time


class TTLCache:
    """Dict-backed cache whose entries expire ``ttl`` seconds after being set.

    ``clock`` defaults to ``time.monotonic``; tests pass a fake clock to step
    time forward deterministically. Reads and writes are idempotent, so no
    locking is done: two requests racing to fill the same key both store an
    equally valid value.
    """

    def __init__(self, ttl: float, clock=None):
        self.ttl = ttl
        self._clock = clock or time.monotonic
        self._entries = {}

    def get(self, key, default=None):
        entry = self._entries.get(key)
        if entry is None:
            return default
        value, stored_at = entry
        if self._clock() - stored_at >= self.ttl:
            self._entries.pop(key, None)
            return default
        return value

    def set(self, key, value):
        self._entries[key] = (value, self._clock())

    def clear(self):
        self._entries.clear()

    def __contains__(self, key) -> bool:
        sentinel = object()
        return self.get(key, sentinel) is not sentinel

    def __len__(self) -> int:
        return len(self._entries)


class NullCache:
    """A cache that never stores anything."""

    ttl = 0

    def get(self, key, default=None):
        return default

    def set(self, key, value):
        pass

    def clear(self):
        pass

    def __contains__(self, key) -> bool:
        return False

    def __len__(self) -> int:
        return 0
