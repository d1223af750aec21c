from cachetools import LFUCache as CacheToolsLFUCache
from typing import Any, Optional
from metrics.monitor import MetricsMonitor


class _RecordingLFUCache(CacheToolsLFUCache):
    def __init__(self, maxsize: int, monitor: MetricsMonitor):
        super().__init__(maxsize=maxsize)
        self.monitor = monitor

    def popitem(self):
        key, value = super().popitem()
        self.monitor.record_eviction("capacity", key)
        return key, value


class LFUCacheWrapper:
    """Plain LFU without expiration, the baseline for the LFU-TTL store."""

    def __init__(self, max_size: int):
        self.max_size = max_size
        self.monitor = MetricsMonitor()
        self.cache = _RecordingLFUCache(max_size, self.monitor)

    def __len__(self) -> int:
        return len(self.cache)

    def reset(self) -> None:
        self.cache.clear()
        self.monitor.reset()

    def get(self, key: str) -> Optional[Any]:
        try:
            value = self.cache[key]
        except KeyError:
            self.monitor.record_operation("get", key, False)
            return None
        self.monitor.record_operation("get", key, True)
        return value

    def put(self, key: str, value: Any) -> None:
        self.cache[key] = value

    def summary(self) -> dict:
        return self.monitor.summary()
