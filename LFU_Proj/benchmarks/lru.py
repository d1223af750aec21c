from cachetools import LRUCache as CacheToolsLRUCache
from typing import Any, Optional
from metrics.monitor import MetricsMonitor


class _RecordingLRUCache(CacheToolsLRUCache):
    def __init__(self, maxsize: int, monitor: MetricsMonitor):
        super().__init__(maxsize=maxsize)
        self.monitor = monitor

    def popitem(self):
        key, value = super().popitem()
        self.monitor.record_eviction("capacity", key)
        return key, value


class LRUCache:
    def __init__(self, max_size: int):
        """Initialize LRU cache with a maximum size."""
        self.max_size = max_size
        self.monitor = MetricsMonitor()
        self.cache = _RecordingLRUCache(max_size, self.monitor)

    def __len__(self) -> int:
        return len(self.cache)

    def reset(self) -> None:
        self.cache.clear()
        self.monitor.reset()

    def get(self, key: str) -> Optional[Any]:
        """Get a value from the cache."""
        try:
            value = self.cache[key]
        except KeyError:
            self.monitor.record_operation("get", key, False)
            return None
        self.monitor.record_operation("get", key, True)
        return value

    def put(self, key: str, value: Any) -> None:
        """Put a value into the cache."""
        self.cache[key] = value

    def summary(self) -> dict:
        """Return cache performance summary."""
        return self.monitor.summary()
