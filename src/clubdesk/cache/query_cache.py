"""Query cache with deduplicated fetches and coalesced invalidation.

Learn: three triggers can make an entry stale — a realtime event, a
polling timer, or a mutation's onSuccess — and all of them go through
invalidate(). The refetch policy is:

1. invalidate() marks matching entries stale synchronously.
2. An observed entry that becomes stale gets ONE refetch, scheduled for
   the next loop iteration. Further invalidations in the same tick are
   absorbed by that scheduled refetch.
3. Concurrent fetches of one key share a single in-flight task.
4. An invalidation that lands while a fetch is in flight bumps the
   entry's generation; when the fetch completes it sees the mismatch
   and schedules exactly one follow-up. Bursts collapse, nothing is lost.

Failed fetches keep the previous payload, record the error, and are not
retried. The next invalidation tries again.
"""

import asyncio
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Awaitable, Callable, Optional

import structlog

from clubdesk.cache.keys import matches

logger = structlog.get_logger()

QueryKey = tuple
Fetcher = Callable[[], Awaitable[Any]]
ChangeCallback = Callable[[Any], None]


@dataclass
class CacheEntry:
    key: QueryKey
    fetcher: Optional[Fetcher] = None
    payload: Any = None
    fetched_at: Optional[datetime] = None
    stale: bool = True
    error: Optional[BaseException] = None
    generation: int = 0  # bumped by every invalidation
    in_flight: Optional[asyncio.Task] = None
    refetch_scheduled: bool = False
    observers: list["QueryObserver"] = field(default_factory=list)

    @property
    def is_fetching(self) -> bool:
        return self.in_flight is not None and not self.in_flight.done()


@dataclass
class CacheStats:
    fetches: int = 0
    invalidations: int = 0
    errors: int = 0


class QueryObserver:
    """A mounted interest in one key. Observed keys refetch on invalidation."""

    def __init__(
        self,
        cache: "QueryCache",
        key: QueryKey,
        on_change: Optional[ChangeCallback] = None,
        enabled: bool = True,
    ):
        self.cache = cache
        self.key = key
        self.on_change = on_change
        self.enabled = enabled
        self._poller: Optional[asyncio.Task] = None
        self.closed = False

    @property
    def data(self) -> Any:
        entry = self.cache.entry(self.key)
        return entry.payload if entry else None

    @property
    def error(self) -> Optional[BaseException]:
        entry = self.cache.entry(self.key)
        return entry.error if entry else None

    @property
    def is_loading(self) -> bool:
        entry = self.cache.entry(self.key)
        return bool(self.enabled and entry and entry.fetched_at is None)

    def close(self) -> None:
        if self.closed:
            return
        self.closed = True
        if self._poller is not None:
            self._poller.cancel()
            self._poller = None
        entry = self.cache.entry(self.key)
        if entry and self in entry.observers:
            entry.observers.remove(self)


class QueryCache:
    """Process-wide cache shared by every dashboard and service."""

    def __init__(self):
        self._entries: dict[QueryKey, CacheEntry] = {}
        self.stats = CacheStats()

    # ─── Lookup ───────────────────────────────────────────

    def entry(self, key: QueryKey) -> Optional[CacheEntry]:
        return self._entries.get(tuple(key))

    def get(self, key: QueryKey) -> Any:
        entry = self.entry(key)
        return entry.payload if entry else None

    def keys(self) -> list[QueryKey]:
        return list(self._entries)

    def _entry(self, key: QueryKey, fetcher: Optional[Fetcher]) -> CacheEntry:
        key = tuple(key)
        entry = self._entries.get(key)
        if entry is None:
            entry = CacheEntry(key=key)
            self._entries[key] = entry
        if fetcher is not None:
            entry.fetcher = fetcher
        return entry

    # ─── Fetch ────────────────────────────────────────────

    async def fetch(self, key: QueryKey, fetcher: Fetcher, *, enabled: bool = True) -> Any:
        """Return fresh data for key, fetching at most once per staleness.

        A disabled query (e.g. no club selected) makes no call and returns None.
        """
        if not enabled:
            return None
        entry = self._entry(key, fetcher)
        if not entry.stale and entry.fetched_at is not None:
            return entry.payload
        return await asyncio.shield(self._start_fetch(entry))

    def _start_fetch(self, entry: CacheEntry) -> asyncio.Task:
        if not entry.is_fetching:
            entry.in_flight = asyncio.get_running_loop().create_task(self._run_fetch(entry))
            entry.in_flight.add_done_callback(_consume_exception)
        return entry.in_flight

    async def _run_fetch(self, entry: CacheEntry) -> Any:
        if entry.fetcher is None:
            raise RuntimeError(f"No fetcher registered for {entry.key!r}")
        generation = entry.generation
        self.stats.fetches += 1
        try:
            payload = await entry.fetcher()
        except Exception as e:
            entry.error = e
            self.stats.errors += 1
            logger.warning("cache.fetch_failed", key=entry.key, error=str(e))
            raise
        else:
            entry.payload = payload
            entry.error = None
            entry.fetched_at = datetime.now(timezone.utc)
            if entry.generation == generation:
                entry.stale = False
            for observer in list(entry.observers):
                if observer.on_change is not None:
                    observer.on_change(payload)
            return payload
        finally:
            entry.in_flight = None
            if entry.generation != generation and entry.observers:
                # invalidated mid-flight
                self._schedule_refetch(entry)

    # ─── Invalidation ─────────────────────────────────────

    def invalidate(self, prefix: QueryKey, *, exact: bool = False) -> int:
        """Mark every entry under prefix stale. Returns how many matched."""
        prefix = tuple(prefix)
        matched = 0
        for key, entry in self._entries.items():
            if (key != prefix) if exact else not matches(key, prefix):
                continue
            matched += 1
            entry.generation += 1
            entry.stale = True
            if entry.observers and not entry.is_fetching:
                self._schedule_refetch(entry)
        self.stats.invalidations += 1
        logger.debug("cache.invalidated", prefix=prefix, matched=matched)
        return matched

    def _schedule_refetch(self, entry: CacheEntry) -> None:
        if entry.refetch_scheduled:
            return
        entry.refetch_scheduled = True
        asyncio.get_running_loop().call_soon(self._run_scheduled, entry)

    def _run_scheduled(self, entry: CacheEntry) -> None:
        entry.refetch_scheduled = False
        if self._entries.get(entry.key) is not entry or not entry.observers:
            return
        if entry.fetcher is None or entry.is_fetching:
            return
        self._start_fetch(entry)

    # ─── Observers ────────────────────────────────────────

    def watch(
        self,
        key: QueryKey,
        fetcher: Fetcher,
        *,
        refetch_interval: Optional[float] = None,
        on_change: Optional[ChangeCallback] = None,
        enabled: bool = True,
    ) -> QueryObserver:
        """Mount interest in key. Must be called from inside a running loop.

        refetch_interval adds a polling trigger on top of realtime
        invalidation; both go through invalidate() so they deduplicate.
        """
        observer = QueryObserver(self, tuple(key), on_change, enabled)
        if not enabled:
            return observer

        entry = self._entry(key, fetcher)
        entry.observers.append(observer)
        if entry.stale and not entry.is_fetching:
            self._schedule_refetch(entry)
        if refetch_interval:
            observer._poller = asyncio.get_running_loop().create_task(
                self._poll(observer, refetch_interval)
            )
        return observer

    async def _poll(self, observer: QueryObserver, interval: float) -> None:
        while not observer.closed:
            await asyncio.sleep(interval)
            self.invalidate(observer.key, exact=True)

    # ─── Eviction ─────────────────────────────────────────

    def remove(self, prefix: QueryKey) -> int:
        prefix = tuple(prefix)
        doomed = [k for k in self._entries if matches(k, prefix)]
        for key in doomed:
            entry = self._entries.pop(key)
            for observer in list(entry.observers):
                observer.close()
        return len(doomed)

    def clear(self) -> None:
        """Evict everything (logout)."""
        for entry in list(self._entries.values()):
            for observer in list(entry.observers):
                observer.close()
        self._entries.clear()
        logger.info("cache.cleared")

    async def settle(self) -> None:
        """Wait until no refetch is scheduled or in flight."""
        while True:
            await asyncio.sleep(0)
            pending = [e.in_flight for e in self._entries.values() if e.is_fetching]
            scheduled = any(e.refetch_scheduled for e in self._entries.values())
            if not pending and not scheduled:
                return
            if pending:
                await asyncio.gather(*pending, return_exceptions=True)


def _consume_exception(task: asyncio.Task) -> None:
    # errors are recorded on the entry; keep asyncio from warning about them
    if not task.cancelled():
        task.exception()
