import asyncio

import pytest

from social_preview.services.rate_limiter import SlidingWindowRateLimiter, sweep_periodically


class FakeClock:
    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now


def test_allows_up_to_limit_then_denies():
    clock = FakeClock()
    limiter = SlidingWindowRateLimiter(max_requests=3, window_seconds=60, clock=clock)

    assert [limiter.allow("1.2.3.4") for _ in range(4)] == [True, True, True, False]


def test_clients_are_independent():
    limiter = SlidingWindowRateLimiter(max_requests=1, window_seconds=60, clock=FakeClock())

    assert limiter.allow("a")
    assert not limiter.allow("a")
    assert limiter.allow("b")


def test_window_slides():
    clock = FakeClock()
    limiter = SlidingWindowRateLimiter(max_requests=2, window_seconds=60, clock=clock)

    assert limiter.allow("a")
    clock.now += 30
    assert limiter.allow("a")
    assert not limiter.allow("a")

    clock.now += 30  # first hit is now exactly one window old
    assert limiter.allow("a")
    assert not limiter.allow("a")


def test_denied_requests_are_not_recorded():
    clock = FakeClock()
    limiter = SlidingWindowRateLimiter(max_requests=1, window_seconds=60, clock=clock)

    assert limiter.allow("a")
    for _ in range(5):
        clock.now += 10
        assert not limiter.allow("a")

    clock.now += 10
    assert limiter.allow("a")


def test_sweep_evicts_idle_clients():
    clock = FakeClock()
    limiter = SlidingWindowRateLimiter(max_requests=5, window_seconds=60, clock=clock)
    limiter.allow("old")
    clock.now += 45
    limiter.allow("recent")

    clock.now += 20
    assert limiter.sweep() == 1
    assert len(limiter) == 1
    assert limiter.allow("recent")


class CountingLimiter:
    def __init__(self):
        self.sweeps = 0

    def allow(self, client_id: str) -> bool:
        return True

    def sweep(self) -> int:
        self.sweeps += 1
        return 0


@pytest.mark.asyncio()
async def test_sweeper_runs_until_cancelled():
    limiter = CountingLimiter()
    task = asyncio.create_task(sweep_periodically(limiter, interval=0.01))

    await asyncio.sleep(0.1)
    task.cancel()
    with pytest.raises(asyncio.CancelledError):
        await task

    assert limiter.sweeps >= 2
