import threading

import pytest

from services.transform_cache import TransformCache


class FakeClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now


def test_get_and_set():
    cache = TransformCache(capacity=2, ttl_seconds=10)
    assert cache.get("a") is None
    cache.set("a", b"1")
    assert cache.get("a") == b"1"
    assert cache.stats.hits == 1
    assert cache.stats.misses == 1


def test_least_recently_used_is_evicted():
    cache = TransformCache(capacity=2, ttl_seconds=10)
    cache.set("a", 1)
    cache.set("b", 2)
    cache.get("a")
    cache.set("c", 3)
    assert cache.get("b") is None
    assert cache.get("a") == 1
    assert cache.get("c") == 3
    assert cache.stats.evictions == 1
    assert len(cache) == 2


def test_entries_expire():
    clock = FakeClock()
    cache = TransformCache(capacity=4, ttl_seconds=5, clock=clock)
    cache.set("a", 1)
    clock.now = 4.9
    assert cache.get("a") == 1
    clock.now = 5.0
    assert cache.get("a") is None
    assert len(cache) == 0


def test_instances_are_isolated():
    first = TransformCache(capacity=1, ttl_seconds=1)
    second = TransformCache(capacity=1, ttl_seconds=1)
    first.set("a", 1)
    assert second.get("a") is None


@pytest.mark.parametrize("capacity, ttl", [(0, 1), (1, 0), (-1, 5)])
def test_rejects_invalid_bounds(capacity, ttl):
    with pytest.raises(ValueError):
        TransformCache(capacity=capacity, ttl_seconds=ttl)


def test_len_waits_for_writers():
    cache = TransformCache(capacity=4, ttl_seconds=10)
    sizes = []
    with cache._lock:
        reader = threading.Thread(target=lambda: sizes.append(len(cache)))
        reader.start()
        reader.join(timeout=0.2)
        assert reader.is_alive()
        cache._entries["a"] = (float("inf"), 1)
    reader.join(timeout=5)
    assert sizes == [1]
