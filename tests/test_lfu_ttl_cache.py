import random

import pytest

from config import CONFIG
from lfu_cache.errors import CacheError, InvalidConfiguration
from lfu_cache.lfu_ttl_cache import LFUTTLCache
from metrics.monitor import MetricsMonitor


def test_get_returns_value_and_counts_access(clock):
    c = LFUTTLCache(3, 5000, clock=clock)
    c.put("a", 1)

    assert c.frequency("a") == 1
    assert c.get("a") == 1
    assert c.frequency("a") == 2
    assert c.get("a") == 1
    assert c.frequency("a") == 3


def test_get_missing_key_is_a_plain_miss(clock):
    c = LFUTTLCache(3, 5000, clock=clock)
    c.put("a", 1)

    assert c.get("nope") is None
    assert c.snapshot() == [("a", 1)]
    assert c.frequency("a") == 1
    assert c.monitor.misses == 1
    assert c.monitor.get_eviction_count() == 0


def test_default_clock_is_wall_clock():
    c = LFUTTLCache(2, 60_000)
    c.put("a", "x")
    assert c.get("a") == "x"


def test_size_never_exceeds_capacity(clock):
    c = LFUTTLCache(4, 5000, clock=clock)
    for i in range(50):
        c.put(f"k{i % 7}", i)
        if i % 3 == 0:
            c.get(f"k{i % 5}")
        assert len(c) <= 4


def test_put_into_non_full_cache_never_evicts(clock):
    c = LFUTTLCache(3, 5000, clock=clock)
    c.put("a", 1)
    c.put("b", 2)
    c.put("a", 3)

    assert c.monitor.get_eviction_count() == 0
    assert sorted(c.snapshot()) == [("a", 3), ("b", 2)]


def test_tied_frequencies_evict_earliest_inserted(clock):
    c = LFUTTLCache(3, 5000, clock=clock)
    c.put("one", 1)
    c.put("two", 2)
    c.put("three", 3)
    c.get("one")
    c.get("two")
    c.get("three")

    c.put("four", 4)

    assert c.snapshot() == [("two", 2), ("three", 3), ("four", 4)]
    assert c.get("one") is None


def test_lowest_frequency_is_evicted(clock):
    c = LFUTTLCache(3, 5000, clock=clock)
    c.put("a", 1)
    c.put("b", 2)
    c.put("c", 3)
    c.get("a")
    c.get("c")

    c.put("d", 4)

    assert "b" not in c
    assert [k for k, _ in c.snapshot()] == ["a", "c", "d"]
    assert c.monitor.get_eviction_count("capacity") == 1


def test_evicted_key_stays_gone(clock):
    c = LFUTTLCache(1, 5000, clock=clock)
    c.put("a", 1)
    c.put("b", 2)

    assert c.get("a") is None
    assert "a" not in c
    assert c.frequency("a") is None


def test_victim_always_has_minimum_frequency(clock):
    rng = random.Random(7)
    c = LFUTTLCache(5, 10**9, clock=clock)
    keys = [f"k{i}" for i in range(12)]

    for _ in range(500):
        key = rng.choice(keys)
        if rng.random() < 0.6:
            c.get(key)
            continue

        before = [(k, c.frequency(k)) for k, _ in c.snapshot()]
        c.put(key, rng.random())
        if len(before) < 5:
            continue

        lowest = min(freq for _, freq in before)
        expected_victim = next(k for k, freq in before if freq == lowest)
        after = {k for k, _ in c.snapshot()}
        evicted = {k for k, _ in before} - after
        if key == expected_victim:
            # Victim was the key being written; it comes back fresh
            assert evicted == set()
            assert c.frequency(key) == 1
        else:
            assert evicted == {expected_victim}
        assert len(c) <= 5


def test_evict_by_lfu_on_empty_cache_is_noop(clock):
    c = LFUTTLCache(2, 5000, clock=clock)
    c.evict_by_lfu()
    c.evict_by_lfu()
    assert len(c) == 0
    assert c.snapshot() == []


def test_evict_by_lfu_removes_exactly_one(clock):
    c = LFUTTLCache(3, 5000, clock=clock)
    c.put("x", 1)
    c.put("y", 2)
    c.put("z", 3)
    c.get("x")

    c.evict_by_lfu()

    assert c.snapshot() == [("x", 1), ("z", 3)]


def test_expired_entry_is_removed_on_read(clock):
    c = LFUTTLCache(3, 5000, clock=clock)
    c.put("k", "v")

    clock.advance(6000)

    assert c.get("k") is None
    assert c.snapshot() == []
    assert c.monitor.get_eviction_count("expired") == 1
    assert c.monitor.misses == 1


def test_entry_exactly_at_ttl_is_still_live(clock):
    c = LFUTTLCache(3, 5000, clock=clock)
    c.put("k", "v")

    clock.advance(5000)
    assert c.get("k") == "v"

    clock.advance(1)
    assert c.get("k") is None


def test_zero_ttl_expires_after_any_elapsed_time(clock):
    c = LFUTTLCache(3, 0, clock=clock)
    c.put("k", "v")
    assert c.get("k") == "v"

    clock.advance(1)
    assert c.get("k") is None


def test_reads_do_not_extend_lifetime(clock):
    c = LFUTTLCache(3, 5000, clock=clock)
    c.put("k", "v")
    for _ in range(4):
        clock.advance(1000)
        assert c.get("k") == "v"

    clock.advance(1001)
    assert c.get("k") is None


def test_expiry_is_lazy(clock):
    c = LFUTTLCache(3, 1000, clock=clock)
    c.put("a", 1)
    c.put("b", 2)
    clock.advance(5000)

    # Nothing has looked at the entries yet
    assert c.snapshot() == [("a", 1), ("b", 2)]
    assert len(c) == 2

    c.get("a")
    assert c.snapshot() == [("b", 2)]


def test_overwrite_resets_frequency(clock):
    # Deliberate: every write starts the entry's hotness over
    c = LFUTTLCache(3, 5000, clock=clock)
    c.put("a", 1)
    c.get("a")
    c.get("a")
    assert c.frequency("a") == 3

    c.put("a", 2)

    assert c.frequency("a") == 1
    assert c.get("a") == 2


def test_overwrite_resets_creation_time(clock):
    c = LFUTTLCache(3, 5000, clock=clock)
    c.put("a", 1)
    clock.advance(4000)
    c.put("a", 2)
    clock.advance(4000)

    assert c.get("a") == 2


def test_overwrite_in_full_cache_still_evicts(clock):
    # Size is checked before the write, so a full cache loses a victim
    # even when the written key is already present.
    c = LFUTTLCache(2, 5000, clock=clock)
    c.put("a", 1)
    c.put("b", 2)
    c.get("b")

    c.put("b", 3)

    assert c.snapshot() == [("b", 3)]
    assert c.monitor.get_eviction_count("capacity") == 1


def test_overwrite_in_full_cache_can_evict_the_key_itself(clock):
    c = LFUTTLCache(2, 5000, clock=clock)
    c.put("a", 1)
    c.put("b", 2)
    c.get("a")

    c.put("b", 3)

    assert c.snapshot() == [("a", 1), ("b", 3)]
    assert c.frequency("b") == 1


def test_invalidate_after_time_removes_only_old_entries(clock):
    c = LFUTTLCache(5, 60_000, clock=clock)
    c.put("old", 1)
    clock.advance(2000)
    c.put("mid", 2)
    c.get("mid")
    clock.advance(2000)
    c.put("new", 3)

    c.invalidate_after_time(2500)

    assert c.snapshot() == [("mid", 2), ("new", 3)]
    assert c.frequency("mid") == 2
    assert c.frequency("new") == 1
    assert c.monitor.get_eviction_count("sweep") == 1


def test_invalidate_after_time_leaves_nothing_older_than_max_age(clock):
    rng = random.Random(3)
    c = LFUTTLCache(20, 60_000, clock=clock)
    created = {}
    for i in range(20):
        clock.advance(rng.randint(0, 500))
        c.put(i, i)
        created[i] = clock()

    c.invalidate_after_time(3000)

    now = clock()
    assert all(now - created[k] <= 3000 for k, _ in c.snapshot())
    assert len(c) == sum(1 for t in created.values() if now - t <= 3000)


def test_sweep_age_is_independent_of_ttl(clock):
    c = LFUTTLCache(3, 100, clock=clock)
    c.put("a", 1)
    clock.advance(1000)

    c.invalidate_after_time(10_000)

    # Past its ttl but younger than the sweep age: kept until read
    assert c.snapshot() == [("a", 1)]


def test_sweep_on_empty_cache_is_noop(clock):
    c = LFUTTLCache(3, 100, clock=clock)
    c.invalidate_after_time(0)
    assert c.snapshot() == []


def test_print_cache_contents_shows_raw_table(clock, capsys):
    c = LFUTTLCache(3, 10, clock=clock)
    c.put("one", 1)
    c.put("two", 2)
    clock.advance(100)

    c.print_cache_contents()

    assert capsys.readouterr().out == "Cache Contents:\none: 1\ntwo: 2\n\n"


def test_keys_and_values_are_generic(clock):
    c = LFUTTLCache(3, 5000, clock=clock)
    c.put((1, 2), [1, 2])
    c.put(3, {"x": 1})

    assert c.get((1, 2)) == [1, 2]
    assert c.get(3) == {"x": 1}


@pytest.mark.parametrize("capacity", [0, -1, 1.5, "3", True, None])
def test_bad_capacity_is_rejected(capacity):
    with pytest.raises(InvalidConfiguration):
        LFUTTLCache(capacity, 5000)


@pytest.mark.parametrize("ttl", [-1, -0.5, float("nan"), "5000", None])
def test_bad_ttl_is_rejected(ttl):
    with pytest.raises(InvalidConfiguration):
        LFUTTLCache(3, ttl)


def test_invalid_configuration_is_a_value_error():
    assert issubclass(InvalidConfiguration, ValueError)
    assert issubclass(InvalidConfiguration, CacheError)


def test_from_config(clock):
    c = LFUTTLCache.from_config(CONFIG, clock=clock)
    assert c.capacity == CONFIG["cache_size"]
    assert c.ttl == CONFIG["ttl_ms"]


def test_reset_and_summary(clock):
    c = LFUTTLCache(2, 5000, clock=clock)
    c.put("a", 1)
    c.get("a")
    c.get("b")
    c.put("b", 2)
    c.put("c", 3)

    summary = c.summary()
    assert summary["hits"] == 1
    assert summary["misses"] == 1
    assert summary["capacity_evictions"] == 1
    assert summary["size"] == 2
    assert summary["capacity"] == 2
    assert summary["ttl"] == 5000

    c.reset()
    assert len(c) == 0
    assert c.summary()["hits"] == 0


def test_default_store_keeps_no_per_event_history(clock):
    c = LFUTTLCache(2, 10**9, clock=clock)
    for i in range(10_000):
        c.get("a")
        c.put(f"k{i}", i)

    assert len(c) == 2
    assert c.monitor.operations == []
    assert c.monitor.evictions == []
    assert c.monitor.misses == 10_000
    assert c.monitor.get_eviction_count("capacity") == 9_998


def test_explicit_monitor_keeps_history(clock):
    c = LFUTTLCache(1, 5000, clock=clock, monitor=MetricsMonitor())
    c.put("a", 1)
    c.get("a")
    c.put("b", 2)

    assert [op["key"] for op in c.monitor.operations] == ["a"]
    assert [e["key"] for e in c.monitor.evictions] == ["a"]
