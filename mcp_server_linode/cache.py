"""TTL-bounded memoisation of slowly changing Linode reference data."""

from __future__ import annotations

import asyncio
import copy
import logging
import time
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Tuple

logger = logging.getLogger("mcp-server-linode.cache")

DEFAULT_TTL = 300.0


class ReferenceCategory(str, Enum):
    REGIONS = "regions"
    TYPES = "types"
    KERNELS = "kernels"


_FETCHERS = {
    ReferenceCategory.REGIONS: "list_regions",
    ReferenceCategory.TYPES: "list_types",
    ReferenceCategory.KERNELS: "list_kernels",
}


@dataclass(frozen=True)
class SlotStats:
    present: bool
    count: int
    expired: bool

    def to_dict(self) -> Dict[str, Any]:
        return {"present": self.present, "count": self.count, "expired": self.expired}


@dataclass(frozen=True)
class CacheStats:
    ttl: float
    slots: Dict[str, SlotStats]

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"ttl": self.ttl}
        for name, slot in self.slots.items():
            data[name] = slot.to_dict()
        return data


class _Slot:
    __slots__ = ("items", "fetched_at", "lock")

    def __init__(self) -> None:
        self.items: Optional[Tuple[Dict[str, Any], ...]] = None
        self.fetched_at = 0.0
        self.lock = asyncio.Lock()


class ReferenceDataCache:
    """Caches regions, instance types and kernels for one upstream client.

    Fresh reads take no lock. A stale or empty slot is refilled under that
    slot's lock with a second freshness check, so concurrent stale readers
    share one upstream call. Every read returns an independent deep copy.
    """

    def __init__(self, ttl: float = DEFAULT_TTL, *, clock: Callable[[], float] = time.monotonic) -> None:
        if ttl <= 0:
            raise ValueError("cache TTL must be positive")
        self.ttl = float(ttl)
        self._clock = clock
        self._slots: Dict[ReferenceCategory, _Slot] = {category: _Slot() for category in ReferenceCategory}

    def _fresh(self, slot: _Slot) -> Optional[Tuple[Dict[str, Any], ...]]:
        # items and fetched_at are always written together.
        items, fetched_at = slot.items, slot.fetched_at
        if items is not None and self._clock() - fetched_at < self.ttl:
            return items
        return None

    async def get(self, category: ReferenceCategory, client: Any) -> List[Dict[str, Any]]:
        category = ReferenceCategory(category)
        slot = self._slots[category]

        items = self._fresh(slot)
        if items is not None:
            return copy.deepcopy(list(items))

        async with slot.lock:
            items = self._fresh(slot)
            if items is not None:
                return copy.deepcopy(list(items))

            logger.debug("Fetching %s from upstream", category.value)
            fetched = await getattr(client, _FETCHERS[category])()
            stored = tuple(copy.deepcopy(list(fetched)))
            slot.items, slot.fetched_at = stored, self._clock()
            logger.debug("Cached %d %s", len(stored), category.value)
            return copy.deepcopy(list(stored))

    async def get_regions(self, client: Any) -> List[Dict[str, Any]]:
        return await self.get(ReferenceCategory.REGIONS, client)

    async def get_types(self, client: Any) -> List[Dict[str, Any]]:
        return await self.get(ReferenceCategory.TYPES, client)

    async def get_kernels(self, client: Any) -> List[Dict[str, Any]]:
        return await self.get(ReferenceCategory.KERNELS, client)

    def invalidate(self, category: ReferenceCategory) -> None:
        slot = self._slots[ReferenceCategory(category)]
        slot.items, slot.fetched_at = None, 0.0
        logger.debug("Invalidated %s", ReferenceCategory(category).value)

    def invalidate_regions(self) -> None:
        self.invalidate(ReferenceCategory.REGIONS)

    def invalidate_types(self) -> None:
        self.invalidate(ReferenceCategory.TYPES)

    def invalidate_kernels(self) -> None:
        self.invalidate(ReferenceCategory.KERNELS)

    def invalidate_all(self) -> None:
        for category in ReferenceCategory:
            self.invalidate(category)

    def stats(self) -> CacheStats:
        now = self._clock()
        slots: Dict[str, SlotStats] = {}
        for category, slot in self._slots.items():
            items, fetched_at = slot.items, slot.fetched_at
            if items is None:
                slots[category.value] = SlotStats(present=False, count=0, expired=False)
            else:
                slots[category.value] = SlotStats(
                    present=True,
                    count=len(items),
                    expired=now - fetched_at >= self.ttl,
                )
        return CacheStats(ttl=self.ttl, slots=slots)
