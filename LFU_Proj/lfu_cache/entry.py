# Cache entry class for storing a value and its LFU/TTL metadata
from dataclasses import dataclass
from typing import Generic, TypeVar

V = TypeVar("V")


@dataclass
class CacheEntry(Generic[V]):
    value: V
    created_at: float  # ms, never updated after creation
    frequency: int = 1

    def access(self) -> None:
        self.frequency += 1

    def age(self, now: float) -> float:
        """Milliseconds elapsed between creation and ``now``."""
        return now - self.created_at
