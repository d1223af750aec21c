# Time sources for the cache. All timestamps are milliseconds.
from time import time


def current_millis() -> int:
    return int(time() * 1000)


class ManualClock:
    """Clock that only moves when told to.

    Tests and the benchmark driver pass an instance wherever a cache expects
    a ``clock`` callable, so elapsed time is simulated instead of slept.
    """

    def __init__(self, start: float = 0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, millis: float) -> float:
        if millis < 0:
            raise ValueError(f"Cannot move clock backwards by {millis} ms")
        self.now += millis
        return self.now

    def set(self, millis: float) -> None:
        self.now = millis
