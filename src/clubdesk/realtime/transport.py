"""Realtime transport — the seam between the registry and Supabase.

Learn: AdminRealtime only needs two operations: open a named channel
with a set of postgres-change listeners, and close it. Keeping that
behind a Protocol lets tests drive events through an in-memory fake
while production uses the supabase async client.

Supabase realtime invokes listener callbacks on the event loop with the
change payload: {"eventType": "INSERT", "table": ..., "new": {...}, ...}.
"""

from dataclasses import dataclass
from typing import Any, Callable, Optional, Protocol

import structlog

logger = structlog.get_logger()

ChangeCallback = Callable[[dict[str, Any]], None]
StatusCallback = Callable[[Any, Optional[Exception]], None]


@dataclass(frozen=True)
class Listener:
    """One postgres_changes binding on a channel."""
    event: str
    table: str
    callback: ChangeCallback
    filter: Optional[str] = None
    schema: str = "public"


class RealtimeTransport(Protocol):
    async def open_channel(
        self, name: str, listeners: list[Listener], on_status: StatusCallback
    ) -> Any:
        """Subscribe a channel and return an opaque handle."""

    async def close_channel(self, handle: Any) -> None:
        """Unsubscribe and release the channel."""


class SupabaseTransport:
    """Realtime channels over the supabase async client.

    Reconnection is whatever the realtime library does internally; a
    dropped channel is only reported through on_status.
    """

    def __init__(self, client):
        self.client = client

    @classmethod
    async def connect(cls, url: str, key: str) -> "SupabaseTransport":
        from supabase import acreate_client

        client = await acreate_client(url, key)
        logger.info("realtime.client_created", url=url)
        return cls(client)

    async def open_channel(
        self, name: str, listeners: list[Listener], on_status: StatusCallback
    ) -> Any:
        channel = self.client.channel(name)
        for listener in listeners:
            kwargs: dict[str, Any] = {"schema": listener.schema, "table": listener.table}
            if listener.filter:
                kwargs["filter"] = listener.filter
            channel = channel.on_postgres_changes(
                listener.event, callback=listener.callback, **kwargs
            )
        await channel.subscribe(on_status)
        return channel

    async def close_channel(self, handle: Any) -> None:
        await self.client.remove_channel(handle)
