"""Client-side query cache — server responses keyed by query identity.

Learn: the cache is never written directly. Data enters only through a
fetcher; realtime events and polling timers only mark entries stale.
"""

from clubdesk.cache.query_cache import CacheEntry, QueryCache, QueryObserver

__all__ = ["CacheEntry", "QueryCache", "QueryObserver"]
