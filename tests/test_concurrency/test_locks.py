"""Tests for per-key async locking."""

import asyncio

from imgcache.concurrency.locks import KeyedLock


class TestKeyedLock:
    async def test_same_key_serialized(self):
        locks = KeyedLock()
        active = 0
        peak = 0

        async def worker():
            nonlocal active, peak
            async with locks.acquire("k"):
                active += 1
                peak = max(peak, active)
                await asyncio.sleep(0.01)
                active -= 1

        await asyncio.gather(*(worker() for _ in range(4)))
        assert peak == 1

    async def test_different_keys_independent(self):
        locks = KeyedLock()
        inside = asyncio.Event()

        async def hold_a():
            async with locks.acquire("a"):
                inside.set()
                await asyncio.sleep(0.05)

        async def take_b():
            await inside.wait()
            async with locks.acquire("b"):
                return locks.locked("a")

        _, a_locked_meanwhile = await asyncio.gather(hold_a(), take_b())
        assert a_locked_meanwhile is True

    async def test_idle_keys_dropped(self):
        locks = KeyedLock()
        async with locks.acquire("k"):
            assert len(locks) == 1
            assert locks.locked("k")
        assert len(locks) == 0
        assert not locks.locked("k")

    async def test_released_on_error(self):
        locks = KeyedLock()
        try:
            async with locks.acquire("k"):
                raise RuntimeError("boom")
        except RuntimeError:
            pass
        assert len(locks) == 0
