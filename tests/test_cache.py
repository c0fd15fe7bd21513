import asyncio

import pytest

from blogchat.client import ApiCache


class FakeClock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self):
        return self.now


class CountingFetcher:
    def __init__(self, results=None):
        self.calls = []
        self.results = list(results or [])
        self.gate = None

    async def __call__(self, url):
        self.calls.append(url)
        if self.gate is not None:
            await self.gate.wait()
        result = self.results.pop(0) if self.results else {"url": url, "n": len(self.calls)}
        if isinstance(result, Exception):
            raise result
        return result


async def test_fresh_reads_hit_network_once():
    fetcher, clock = CountingFetcher(), FakeClock()
    cache = ApiCache(fetcher, clock=clock)

    first = await cache.get("/api/posts")
    clock.now += 29
    second = await cache.get("/api/posts")

    assert fetcher.calls == ["/api/posts"]
    assert first.data == second.data
    assert second.error is None


async def test_stale_entry_is_served_then_revalidated():
    fetcher, clock = CountingFetcher(), FakeClock()
    cache = ApiCache(fetcher, stale_time=10, clock=clock)

    await cache.get("/api/posts")
    clock.now += 11
    stale = await cache.get("/api/posts")

    assert stale.data["n"] == 1
    assert stale.stale is True
    await cache.peek("/api/posts").task

    fresh = await cache.get("/api/posts")
    assert fresh.data["n"] == 2
    assert fresh.stale is False
    assert len(fetcher.calls) == 2


async def test_stale_read_does_not_wait_for_network():
    fetcher, clock = CountingFetcher([{"n": 1}, {"n": 2}]), FakeClock()
    cache = ApiCache(fetcher, stale_time=10, clock=clock)
    await cache.get("/api/posts")
    seen = []
    cache.subscribe("/api/posts", lambda entry: seen.append(entry.data))

    fetcher.gate = asyncio.Event()
    clock.now += 11
    result = await asyncio.wait_for(cache.get("/api/posts"), 0.5)

    assert result.data == {"n": 1}
    assert result.stale is True
    assert seen == []

    task = cache.peek("/api/posts").task
    fetcher.gate.set()
    await task
    assert seen == [{"n": 2}]


async def test_concurrent_reads_coalesce():
    fetcher = CountingFetcher()
    fetcher.gate = asyncio.Event()
    cache = ApiCache(fetcher)

    pending = [asyncio.ensure_future(cache.get("/api/users")) for _ in range(5)]
    await asyncio.sleep(0)
    fetcher.gate.set()
    results = await asyncio.gather(*pending)

    assert fetcher.calls == ["/api/users"]
    assert {r.data["n"] for r in results} == {1}


async def test_cancelled_caller_does_not_abort_shared_fetch():
    fetcher = CountingFetcher()
    fetcher.gate = asyncio.Event()
    cache = ApiCache(fetcher)

    first = asyncio.ensure_future(cache.get("/api/users"))
    second = asyncio.ensure_future(cache.get("/api/users"))
    await asyncio.sleep(0)
    first.cancel()
    fetcher.gate.set()

    result = await second
    assert result.data["n"] == 1
    with pytest.raises(asyncio.CancelledError):
        await first


async def test_failure_keeps_last_known_good_data():
    fetcher, clock = CountingFetcher([{"posts": ["a"]}, RuntimeError("boom"), {"posts": ["b"]}]), FakeClock()
    cache = ApiCache(fetcher, stale_time=1, clock=clock)

    await cache.get("/api/posts")
    clock.now += 5
    result = await cache.get("/api/posts")
    assert result.data == {"posts": ["a"]}
    assert result.stale is True

    await asyncio.gather(cache.peek("/api/posts").task, return_exceptions=True)
    assert isinstance(cache.peek("/api/posts").error, RuntimeError)

    after_failure = await cache.get("/api/posts")
    assert after_failure.data == {"posts": ["a"]}
    assert isinstance(after_failure.error, RuntimeError)
    assert after_failure.stale is True
    await cache.peek("/api/posts").task


async def test_failure_without_data_uses_fallback_and_retries():
    fetcher = CountingFetcher([RuntimeError("down"), ["recovered"]])
    cache = ApiCache(fetcher)

    result = await cache.get("/api/users", fallback=[])
    assert result.data == []
    assert result.error is not None

    # entry đang lỗi được coi là cũ
    retry = await cache.get("/api/users", fallback=[])
    assert retry.data == []
    assert retry.stale is True
    await cache.peek("/api/users").task

    recovered = await cache.get("/api/users", fallback=[])
    assert recovered.data == ["recovered"]
    assert recovered.error is None
    assert len(fetcher.calls) == 2


async def test_transform_is_applied():
    fetcher = CountingFetcher([{"posts": [1, 2]}])
    cache = ApiCache(fetcher)

    result = await cache.get("/api/posts", transform=lambda payload: payload["posts"])
    assert result.data == [1, 2]


async def test_prefetch_raises_without_fallback():
    cache = ApiCache(CountingFetcher([RuntimeError("down")]))
    with pytest.raises(RuntimeError):
        await cache.prefetch("/api/posts")


async def test_prefetch_with_fallback_seeds_entry():
    cache = ApiCache(CountingFetcher([RuntimeError("down")]))
    assert await cache.prefetch("/api/posts", fallback=[]) == []
    assert cache.peek("/api/posts").data == []


async def test_refresh_forces_fetch():
    fetcher = CountingFetcher()
    cache = ApiCache(fetcher)

    await cache.get("/api/posts")
    data = await cache.refresh("/api/posts")

    assert data["n"] == 2
    assert len(fetcher.calls) == 2


async def test_set_data_and_listeners():
    clock = FakeClock()
    cache = ApiCache(CountingFetcher(), clock=clock)
    seen = []
    unsubscribe = cache.subscribe("/api/posts", lambda entry: seen.append(entry.data))

    cache.set_data("/api/posts", [1])
    cache.set_data("/api/posts", lambda prev: prev + [2])
    unsubscribe()
    cache.set_data("/api/posts", [])

    assert seen == [[1], [1, 2]]
    entry = cache.peek("/api/posts")
    assert entry.timestamp == clock.now
    assert entry.error is None


async def test_invalidate_and_clear():
    fetcher = CountingFetcher()
    cache = ApiCache(fetcher)

    await cache.get("/a")
    await cache.get("/b")
    cache.invalidate("/a")
    assert cache.peek("/a") is None

    cache.clear()
    assert cache.peek("/b") is None
    await cache.get("/b")
    assert fetcher.calls == ["/a", "/b", "/b"]
