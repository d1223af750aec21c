from typing import Any, Dict
from metrics.monitor import MetricsMonitor


class FIFOCache:
    def __init__(self, max_size: int):
        """Initialize FIFO cache with a maximum size."""
        self.cache: Dict[str, Any] = {}  # dict keeps insertion order
        self.max_size = max_size
        self.monitor = MetricsMonitor()

    def __len__(self) -> int:
        return len(self.cache)

    def reset(self) -> None:
        self.cache.clear()
        self.monitor.reset()

    def get(self, key: str) -> Any:
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
        # If key doesn't exist and cache is full, remove oldest item
        if key not in self.cache and len(self.cache) >= self.max_size:
            oldest_key = next(iter(self.cache))
            del self.cache[oldest_key]
            self.monitor.record_eviction("capacity", oldest_key)

        # Updating an existing key keeps its place in line
        self.cache[key] = value

    def summary(self) -> dict:
        """Return cache performance summary."""
        return self.monitor.summary()
