import os

os.environ.setdefault("MPLBACKEND", "Agg")

import pytest

from lfu_cache.clock import ManualClock


@pytest.fixture
def clock():
    return ManualClock()
