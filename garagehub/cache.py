"""
Query cache for read-heavy endpoints.

Entries are keyed by ``(family, garage_id, *params)``. Each family maps to one
kind of query (job card lists, dashboard stats, ...) and is dropped for a
garage whenever the change feed reports a row change in one of the tables
the family is derived from.
"""
import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Optional

from garagehub.config import get_settings
from garagehub.realtime import ChangeEvent, ChangeFeed

logger = logging.getLogger(__name__)

# Table -> cache families derived from it
INVALIDATION_MAP = {
    "job_cards": (
        "job_cards", "pipeline", "dashboard_stats", "revenue_tabs", "revenue_sync",
        "staff_performance", "parts_to_order", "invoiceable_jobs", "invoices", "loyalty", "reminders",
    ),
    "job_photos": ("job_cards", "pipeline", "invoiceable_jobs"),
    "inventory": ("inventory", "inventory_value", "dashboard_stats"),
    "expenses": ("expenses", "dashboard_stats"),
    "accounts": ("accounts", "dashboard_stats", "revenue_chart"),
    "invoices": ("invoices",),
    "invoice_items": ("invoices",),
    "staff": ("staff", "staff_performance"),
    "attendance": ("staff", "staff_performance"),
    "gst_slabs": ("gst_slabs",),
    "garage_services": ("garage_services",),
    "loyalty_points": ("loyalty",),
    "service_reminders": ("reminders",),
    "promotions": ("promotions",),
    "promotions_settings": ("promotions", "reminders"),
    "leads": ("leads",),
    "settings": ("settings",),
}


def _in_family(key: tuple, family: str, garage_id: Optional[str]) -> bool:
    return key[0] == family and (garage_id is None or (len(key) > 1 and key[1] == garage_id))


@dataclass
class CacheEntry:
    value: Any
    expires_at: float


class QueryCache:
    """TTL cache of query results with family-level invalidation."""

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._entries: dict[tuple, CacheEntry] = {}
        self._loading: dict[tuple, asyncio.Future] = {}
        self._clock = clock

    def __len__(self) -> int:
        return len(self._entries)

    def get(self, key: tuple) -> Optional[Any]:
        entry = self._entries.get(key)
        if entry is None:
            return None
        if entry.expires_at <= self._clock():
            del self._entries[key]
            return None
        return entry.value

    def set(self, key: tuple, value: Any, ttl: float):
        # ttl <= 0: always refetch
        if ttl <= 0:
            return
        self._entries[key] = CacheEntry(value, self._clock() + ttl)

    async def get_or_load(self, key: tuple, loader: Callable[[], Awaitable[Any]], ttl: Optional[float] = None):
        """
        Return the cached value for ``key`` or await ``loader`` and cache its result.

        Callers that miss while a load for ``key`` is already running wait for
        that load instead of starting their own. A load overtaken by an
        invalidation still answers its callers but is not cached.
        """
        if ttl is None:
            ttl = get_settings().cache_ttl_default
        entry = self._entries.get(key)
        if entry is not None and entry.expires_at > self._clock():
            logger.debug("Cache HIT for %s", key)
            return entry.value

        loading = self._loading.get(key)
        if loading is not None:
            logger.debug("Cache WAIT for %s", key)
            return await asyncio.shield(loading)

        logger.debug("Cache MISS for %s", key)
        future = asyncio.get_running_loop().create_future()
        self._loading[key] = future
        try:
            value = await loader()
        except asyncio.CancelledError:
            future.cancel()
            raise
        except Exception as exc:
            future.set_exception(exc)
            # Mark it retrieved; waiters, if any, re-raise it themselves
            future.exception()
            raise
        finally:
            current = self._loading.get(key) is future
            if current:
                del self._loading[key]

        future.set_result(value)
        if current:
            self.set(key, value, ttl)
        return value

    def invalidate(self, family: str, garage_id: Optional[str] = None) -> int:
        """Drop every entry of ``family``, optionally only for one garage."""
        doomed = [key for key in self._entries if _in_family(key, family, garage_id)]
        for key in doomed:
            del self._entries[key]
        # Loads already running for these keys finish without being cached
        for key in [key for key in self._loading if _in_family(key, family, garage_id)]:
            del self._loading[key]
        if doomed:
            logger.debug("Invalidated %d cache entries for %s (garage %s)", len(doomed), family, garage_id)
        return len(doomed)

    def clear(self):
        self._entries.clear()
        self._loading.clear()

    def handle_change(self, change: ChangeEvent):
        """Change feed callback: drop the families derived from the changed table."""
        for family in INVALIDATION_MAP.get(change.table, ()):
            self.invalidate(family, change.garage_id)

    def connect(self, change_feed: ChangeFeed):
        """Subscribe to ``change_feed`` so row changes invalidate this cache."""
        return change_feed.subscribe(self.handle_change)


query_cache = QueryCache()
