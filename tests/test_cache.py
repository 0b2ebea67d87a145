import asyncio
import unittest
from typing import Any, Dict, List, Optional

from mcp_server_linode.cache import ReferenceCategory, ReferenceDataCache
from mcp_server_linode.errors import UpstreamError

REGIONS = [{"id": "us-east"}, {"id": "us-west"}]


class FakeClock:
    def __init__(self) -> None:
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class CountingUpstream:
    """Reference-data source that counts fetches and can stall them."""

    def __init__(self, regions: Optional[List[Dict[str, Any]]] = None) -> None:
        self.regions = regions if regions is not None else REGIONS
        self.calls = 0
        self.gate: Optional[asyncio.Event] = None
        self.started = asyncio.Event()

    async def list_regions(self) -> List[Dict[str, Any]]:
        self.calls += 1
        self.started.set()
        if self.gate is not None:
            await self.gate.wait()
        return [dict(region) for region in self.regions]

    async def list_types(self) -> List[Dict[str, Any]]:
        self.calls += 1
        return [{"id": "g6-nanode-1"}]

    async def list_kernels(self) -> List[Dict[str, Any]]:
        self.calls += 1
        return [{"id": "linode/latest-64bit"}]


class ReferenceDataCacheTests(unittest.IsolatedAsyncioTestCase):
    async def test_fresh_fetch_populates_slot(self) -> None:
        cache = ReferenceDataCache(ttl=300)
        upstream = CountingUpstream()

        regions = await cache.get_regions(upstream)

        self.assertEqual(regions, REGIONS)
        stats = cache.stats().slots["regions"]
        self.assertEqual(stats.to_dict(), {"present": True, "count": 2, "expired": False})

    async def test_fresh_reads_do_not_refetch(self) -> None:
        cache = ReferenceDataCache(ttl=300)
        upstream = CountingUpstream()

        for _ in range(5):
            await cache.get_regions(upstream)

        self.assertEqual(upstream.calls, 1)

    async def test_expired_slot_is_refetched(self) -> None:
        cache = ReferenceDataCache(ttl=0.1)
        upstream = CountingUpstream()

        await cache.get_regions(upstream)
        await asyncio.sleep(0.15)
        await cache.get_regions(upstream)

        self.assertEqual(upstream.calls, 2)

    async def test_invalidate_forces_refetch(self) -> None:
        cache = ReferenceDataCache(ttl=300)
        upstream = CountingUpstream()
        await cache.get_regions(upstream)

        cache.invalidate_regions()
        self.assertFalse(cache.stats().slots["regions"].present)
        await cache.get_regions(upstream)

        self.assertEqual(upstream.calls, 2)
        self.assertTrue(cache.stats().slots["regions"].present)

    async def test_invalidate_is_per_category(self) -> None:
        cache = ReferenceDataCache(ttl=300)
        upstream = CountingUpstream()
        await cache.get_regions(upstream)
        await cache.get_types(upstream)

        cache.invalidate(ReferenceCategory.TYPES)

        slots = cache.stats().slots
        self.assertTrue(slots["regions"].present)
        self.assertFalse(slots["types"].present)
        self.assertFalse(slots["kernels"].present)

    async def test_invalidate_all_clears_every_slot(self) -> None:
        cache = ReferenceDataCache(ttl=300)
        upstream = CountingUpstream()
        await cache.get_regions(upstream)
        await cache.get_types(upstream)
        await cache.get_kernels(upstream)

        cache.invalidate_all()

        self.assertFalse(any(slot.present for slot in cache.stats().slots.values()))

    async def test_values_stay_fixed_within_ttl(self) -> None:
        clock = FakeClock()
        cache = ReferenceDataCache(ttl=60, clock=clock)
        upstream = CountingUpstream([{"id": "v1"}])

        first = await cache.get_regions(upstream)
        upstream.regions = [{"id": "v2"}]
        for step in (1, 10, 30, 58.9):
            clock.now = 1000.0 + step
            self.assertEqual(await cache.get_regions(upstream), first)

        clock.now = 1000.0 + 60
        self.assertTrue(cache.stats().slots["regions"].expired)
        self.assertEqual(await cache.get_regions(upstream), [{"id": "v2"}])
        self.assertEqual(upstream.calls, 2)

    async def test_concurrent_stale_readers_share_one_fetch(self) -> None:
        cache = ReferenceDataCache(ttl=300)
        upstream = CountingUpstream()
        upstream.gate = asyncio.Event()

        readers = [asyncio.create_task(cache.get_regions(upstream)) for _ in range(32)]
        await upstream.started.wait()
        await asyncio.sleep(0)
        upstream.gate.set()
        results = await asyncio.gather(*readers)

        self.assertEqual(upstream.calls, 1)
        self.assertTrue(all(result == REGIONS for result in results))

    async def test_concurrent_readers_after_expiry_share_one_fetch(self) -> None:
        clock = FakeClock()
        cache = ReferenceDataCache(ttl=10, clock=clock)
        upstream = CountingUpstream()
        await cache.get_regions(upstream)
        clock.advance(11)
        upstream.gate = asyncio.Event()
        upstream.started = asyncio.Event()

        readers = [asyncio.create_task(cache.get_regions(upstream)) for _ in range(16)]
        await upstream.started.wait()
        upstream.gate.set()
        await asyncio.gather(*readers)

        self.assertEqual(upstream.calls, 2)

    async def test_returned_sequences_are_independent(self) -> None:
        cache = ReferenceDataCache(ttl=300)
        upstream = CountingUpstream()

        first = await cache.get_regions(upstream)
        first[0]["id"] = "mutated"
        first.append({"id": "extra"})
        second = await cache.get_regions(upstream)

        self.assertEqual(second, REGIONS)
        self.assertEqual(upstream.calls, 1)

    async def test_cancelled_fetch_leaves_empty_slot(self) -> None:
        cache = ReferenceDataCache(ttl=300)
        upstream = CountingUpstream()
        upstream.gate = asyncio.Event()

        task = asyncio.create_task(cache.get_regions(upstream))
        await upstream.started.wait()
        task.cancel()
        with self.assertRaises(asyncio.CancelledError):
            await task

        self.assertFalse(cache.stats().slots["regions"].present)
        upstream.gate = None
        self.assertEqual(await cache.get_regions(upstream), REGIONS)

    async def test_cancelled_refresh_keeps_previous_value(self) -> None:
        clock = FakeClock()
        cache = ReferenceDataCache(ttl=10, clock=clock)
        upstream = CountingUpstream([{"id": "old"}])
        await cache.get_regions(upstream)
        clock.advance(20)
        upstream.regions = [{"id": "new"}]
        upstream.gate = asyncio.Event()
        upstream.started = asyncio.Event()

        task = asyncio.create_task(cache.get_regions(upstream))
        await upstream.started.wait()
        task.cancel()
        with self.assertRaises(asyncio.CancelledError):
            await task

        stats = cache.stats().slots["regions"]
        self.assertTrue(stats.present)
        self.assertEqual(stats.count, 1)
        self.assertTrue(stats.expired)

    async def test_failed_fetch_is_not_cached(self) -> None:
        cache = ReferenceDataCache(ttl=300)

        class Broken(CountingUpstream):
            async def list_regions(self) -> List[Dict[str, Any]]:
                self.calls += 1
                raise RuntimeError("boom")

        upstream = Broken()
        with self.assertRaises(RuntimeError):
            await cache.get_regions(upstream)

        self.assertFalse(cache.stats().slots["regions"].present)

    async def test_failed_refresh_keeps_stale_entry(self) -> None:
        clock = FakeClock()
        cache = ReferenceDataCache(ttl=10, clock=clock)
        upstream = CountingUpstream(regions=[{"id": "us-east"}])
        await cache.get_regions(upstream)
        clock.advance(11)

        class Failing(CountingUpstream):
            async def list_regions(self) -> List[Dict[str, Any]]:
                self.calls += 1
                raise UpstreamError(503, ["service unavailable"])

        failing = Failing()
        with self.assertRaises(UpstreamError) as ctx:
            await cache.get_regions(failing)

        self.assertEqual(ctx.exception.status, 503)
        self.assertEqual(failing.calls, 1)
        self.assertEqual(cache.stats().slots["regions"].to_dict(), {"present": True, "count": 1, "expired": True})

        # Upstream recovers: the stale entry is replaced.
        upstream.regions = REGIONS
        self.assertEqual(await cache.get_regions(upstream), REGIONS)
        self.assertFalse(cache.stats().slots["regions"].expired)

    def test_stats_dict_shape(self) -> None:
        cache = ReferenceDataCache(ttl=42)

        data = cache.stats().to_dict()

        self.assertEqual(data["ttl"], 42.0)
        self.assertEqual(data["regions"], {"present": False, "count": 0, "expired": False})
        self.assertEqual(set(data), {"ttl", "regions", "types", "kernels"})

    def test_rejects_non_positive_ttl(self) -> None:
        for ttl in (0, -1):
            with self.subTest(ttl=ttl):
                with self.assertRaises(ValueError):
                    ReferenceDataCache(ttl=ttl)


if __name__ == "__main__":
    unittest.main()
