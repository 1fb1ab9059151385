"""Realtime infrastructure — Supabase change feed → cache invalidation.

Learn: events flow one way:
1. Postgres row change → Supabase realtime channel (hosted, external)
2. Channel handler → QueryCache.invalidate(key)
3. Observed keys refetch through the API client

Handlers never merge payloads into the cache; every event collapses to
"refetch eventually", so duplicate or out-of-order events are harmless.
"""

from clubdesk.realtime.bindings import ADMIN_CHANNELS, CLUB, ChannelSpec, TableWatch
from clubdesk.realtime.registry import AdminRealtime
from clubdesk.realtime.transport import Listener, RealtimeTransport

__all__ = [
    "ADMIN_CHANNELS",
    "AdminRealtime",
    "CLUB",
    "ChannelSpec",
    "Listener",
    "RealtimeTransport",
    "TableWatch",
]
