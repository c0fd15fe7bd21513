import pytest

from blogchat.client import ApiCache, OptimisticMutation


async def never_fetch(url):
    raise AssertionError("unexpected fetch")


async def test_success_applies_and_reconciles():
    cache = ApiCache(never_fetch)
    cache.set_data("/api/posts", [{"id": "p1", "likes": 0}])

    async def request():
        return {"likes": 5}

    response = await OptimisticMutation(
        cache,
        "/api/posts",
        apply=lambda posts: [{**p, "likes": p["likes"] + 1} for p in posts],
        request=request,
        reconcile=lambda posts, resp: [{**p, "likes": resp["likes"]} for p in posts],
    ).run()

    assert response == {"likes": 5}
    assert cache.peek("/api/posts").data == [{"id": "p1", "likes": 5}]


async def test_failure_restores_snapshot_and_reraises():
    cache = ApiCache(never_fetch)
    cache.set_data("/api/posts", [{"id": "p1", "likes": 0}])
    seen = []

    async def request():
        seen.append(cache.peek("/api/posts").data[0]["likes"])
        raise RuntimeError("server error")

    with pytest.raises(RuntimeError):
        await OptimisticMutation(
            cache,
            "/api/posts",
            apply=lambda posts: [{**p, "likes": p["likes"] + 1} for p in posts],
            request=request,
        ).run()

    assert seen == [1]
    assert cache.peek("/api/posts").data == [{"id": "p1", "likes": 0}]


async def test_failure_on_uncached_url_leaves_no_entry():
    cache = ApiCache(never_fetch)

    async def request():
        raise RuntimeError("server error")

    with pytest.raises(RuntimeError):
        await OptimisticMutation(cache, "/api/x", apply=lambda prev: ["temp"], request=request).run()

    assert cache.peek("/api/x") is None


async def test_success_on_uncached_url_writes_nothing():
    cache = ApiCache(never_fetch)

    async def request():
        return {"comment": {"id": "c2"}}

    response = await OptimisticMutation(
        cache,
        "/api/comments?postId=p1",
        apply=lambda prev: (prev or []) + [{"id": "temp"}],
        request=request,
        reconcile=lambda comments, resp: comments + [resp["comment"]],
    ).run()

    assert response == {"comment": {"id": "c2"}}
    assert cache.peek("/api/comments?postId=p1") is None
