import time

from limits.storage import MemoryStorage

from services.rate_limiter import RateLimiter


def test_allows_up_to_limit_then_denies():
    limiter = RateLimiter()
    before = int(time.time() * 1000)

    results = [limiter.check("chat_user", 3, 60_000) for _ in range(4)]

    assert [r.allowed for r in results] == [True, True, True, False]
    assert [r.remaining for r in results] == [2, 1, 0, 0]
    assert len({r.reset_time for r in results}) == 1
    assert before + 59_000 <= results[0].reset_time <= int(time.time() * 1000) + 60_000


def test_window_resets_after_expiry():
    limiter = RateLimiter()
    for _ in range(2):
        limiter.check("k", 2, 1000)
    assert not limiter.check("k", 2, 1000).allowed

    time.sleep(1.2)
    result = limiter.check("k", 2, 1000)

    assert result.allowed
    assert result.remaining == 1


def test_keys_are_independent():
    limiter = RateLimiter()
    limiter.check("a", 1, 1000)

    assert not limiter.check("a", 1, 1000).allowed
    assert limiter.check("b", 1, 1000).allowed


def test_reset_clears_counters():
    limiter = RateLimiter()
    limiter.check("a", 1, 60_000)
    assert not limiter.check("a", 1, 60_000).allowed

    limiter.reset()

    assert limiter.check("a", 1, 60_000).allowed


def test_limiters_sharing_a_storage_share_counts():
    storage = MemoryStorage()
    first = RateLimiter(storage=storage)
    second = RateLimiter(storage=storage)

    first.check("chat_42", 2, 60_000)
    first.check("chat_42", 2, 60_000)

    assert second.storage is storage
    assert not second.check("chat_42", 2, 60_000).allowed


def test_storage_from_uri():
    limiter = RateLimiter(storage_uri="memory://")

    assert isinstance(limiter.storage, MemoryStorage)
    assert limiter.check("k", 1, 1000).allowed
