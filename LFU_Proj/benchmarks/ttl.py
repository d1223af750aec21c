from cachetools import TTLCache as CacheToolsTTLCache
from typing import Any, Callable, Optional
from lfu_cache.clock import current_millis
from metrics.monitor import MetricsMonitor


class _RecordingTTLCache(CacheToolsTTLCache):
    def __init__(self, maxsize: int, ttl: float, timer: Callable[[], float], monitor: MetricsMonitor):
        super().__init__(maxsize=maxsize, ttl=ttl, timer=timer)
        self.monitor = monitor

    def popitem(self):
        key, value = super().popitem()
        self.monitor.record_eviction("capacity", key)
        return key, value

    def expire(self, time=None):
        expired = super().expire(time)
        for key, _ in expired:
            self.monitor.record_eviction("expired", key)
        return expired


class TTLCacheWrapper:
    """LRU bounded by size with per-entry TTL, using the same ms clock as LFUTTLCache."""

    def __init__(self, max_size: int, ttl_ms: float, clock: Optional[Callable[[], float]] = None):
        self.max_size = max_size
        self.ttl_ms = ttl_ms
        self.monitor = MetricsMonitor()
        self.cache = _RecordingTTLCache(max_size, ttl_ms, clock or current_millis, self.monitor)

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
