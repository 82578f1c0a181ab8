"""
TTL response cache.
"""
import asyncio

from geotest.core.cache import ResponseCache


class FakeClock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self):
        return self.now


def test_set_get_and_expiry():
    clock = FakeClock()
    cache = ResponseCache(ttl=300, clock=clock)
    cache.set("k", "v")

    clock.now += 300
    assert cache.get("k") == "v"

    clock.now += 1
    assert cache.get("k") is None
    assert not cache.has("k")


def test_set_purges_expired_entries():
    clock = FakeClock()
    cache = ResponseCache(ttl=300, clock=clock)
    cache.set("old", 1)
    clock.now += 200
    cache.set("recent", 2)

    clock.now += 150
    cache.set("new", 3)

    # "old" was never read again but is gone once any write happens
    assert "old" not in cache._entries
    assert set(cache._entries) == {"recent", "new"}
    assert cache.purge_expired() == 0

    clock.now += 1000
    assert cache.purge_expired() == 2
    assert cache._entries == {}


def test_clear_and_clear_all():
    cache = ResponseCache()
    cache.set("a", 1)
    cache.set("b", 2)

    cache.clear("a")
    assert cache.get("a") is None
    assert cache.get("b") == 2

    cache.clear_all()
    assert not cache.has("b")


def test_get_or_fetch_calls_producer_once():
    cache = ResponseCache(ttl=60, clock=FakeClock())
    calls = []

    async def producer():
        calls.append(1)
        return {"score": 80}

    async def run():
        first = await cache.get_or_fetch("geo-analysis-https://a.com", producer)
        second = await cache.get_or_fetch("geo-analysis-https://a.com", producer)
        return first, second

    first, second = asyncio.run(run())
    assert first == second == {"score": 80}
    assert len(calls) == 1


def test_failed_producer_is_not_cached():
    cache = ResponseCache()

    async def producer():
        raise RuntimeError("nope")

    try:
        asyncio.run(cache.get_or_fetch("k", producer))
    except RuntimeError:
        pass
    assert not cache.has("k")
