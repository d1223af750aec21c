# Bounded key-value cache with LFU eviction and TTL expiration
from collections.abc import Hashable
from numbers import Real
from typing import Callable, Dict, Generic, List, Optional, Tuple, TypeVar
import logging
import math

from metrics.monitor import MetricsMonitor
from .clock import current_millis
from .entry import CacheEntry
from .errors import InvalidConfiguration

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")

logger = logging.getLogger(__name__)


class LFUTTLCache(Generic[K, V]):
    """In-memory cache bounded by size (LFU eviction) and age (TTL).

    Expiration is lazy: an expired entry stays in the table until a ``get``
    finds it or ``invalidate_after_time`` sweeps it. Entries live in an
    insertion-ordered dict, so among entries sharing the lowest frequency the
    earliest inserted one is evicted first.
    """

    def __init__(self, capacity: int, ttl: float,
                 clock: Optional[Callable[[], float]] = None,
                 monitor: Optional[MetricsMonitor] = None):
        if isinstance(capacity, bool) or not isinstance(capacity, int) or capacity <= 0:
            raise InvalidConfiguration(f"capacity must be a positive integer, got {capacity!r}")
        if isinstance(ttl, bool) or not isinstance(ttl, Real) or math.isnan(ttl) or ttl < 0:
            raise InvalidConfiguration(f"ttl must be a non-negative number of milliseconds, got {ttl!r}")

        self._capacity = capacity
        self._ttl = ttl
        self._clock = clock or current_millis
        self._entries: Dict[K, CacheEntry[V]] = {}
        # Without an explicit monitor only counters are kept, no per-event history
        self.monitor = monitor if monitor is not None else MetricsMonitor(keep_history=False)

    @classmethod
    def from_config(cls, config: dict, clock: Optional[Callable[[], float]] = None) -> "LFUTTLCache":
        return cls(config["cache_size"], config["ttl_ms"], clock=clock)

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def ttl(self) -> float:
        return self._ttl

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key) -> bool:
        return key in self._entries

    def get(self, key: K) -> Optional[V]:
        entry = self._entries.get(key)
        if entry is None:
            self.monitor.record_operation("get", key, False)
            return None

        if entry.age(self._clock()) > self._ttl:
            self._evict(key, "expired")
            self.monitor.record_operation("get", key, False)
            return None

        entry.access()
        self.monitor.record_operation("get", key, True)
        return entry.value

    def put(self, key: K, value: V) -> None:
        # Size is checked before insertion, so overwriting a key in a full
        # cache still evicts a victim first.
        if len(self._entries) >= self._capacity:
            self.evict_by_lfu()

        # Overwrite replaces the entry: frequency and creation time start over
        self._entries.pop(key, None)
        self._entries[key] = CacheEntry(value, self._clock())

    def evict_by_lfu(self) -> None:
        """Remove the entry with the lowest frequency, earliest inserted on ties."""
        if not self._entries:
            return
        # min() keeps the first of equal items, which is the tie-break we want
        victim = min(self._entries.items(), key=lambda kv: kv[1].frequency)[0]
        self._evict(victim, "capacity")

    def invalidate_after_time(self, max_age: float) -> None:
        """Drop every entry older than ``max_age`` milliseconds."""
        now = self._clock()
        expired = [key for key, entry in self._entries.items() if entry.age(now) > max_age]
        for key in expired:
            self._evict(key, "sweep")
        logger.debug("Sweep older than %s ms removed %d entries", max_age, len(expired))

    def snapshot(self) -> List[Tuple[K, V]]:
        """Raw (key, value) pairs in insertion order, expired entries included."""
        return [(key, entry.value) for key, entry in self._entries.items()]

    def print_cache_contents(self, file=None) -> None:
        print("Cache Contents:", file=file)
        for key, value in self.snapshot():
            print(f"{key}: {value}", file=file)
        print(file=file)

    def frequency(self, key: K) -> Optional[int]:
        entry = self._entries.get(key)
        return entry.frequency if entry is not None else None

    def reset(self) -> None:
        """Reset the cache to its initial state."""
        self._entries.clear()
        self.monitor.reset()

    def summary(self) -> dict:
        summary = self.monitor.summary()
        summary["size"] = len(self._entries)
        summary["capacity"] = self._capacity
        summary["ttl"] = self._ttl
        return summary

    def _evict(self, key: K, reason: str) -> None:
        del self._entries[key]
        self.monitor.record_eviction(reason, key)
        logger.debug("Evicted %r (%s)", key, reason)
