"""AdminRealtime — one set of realtime channels per mounted club.

Learn: mounted once per session by the dashboard. On mount(club_id) it
opens every channel in ADMIN_CHANNELS scoped to that club; every
handler's only effect is QueryCache.invalidate(). On unmount, or when
the club changes, every channel is explicitly closed — channels are
never reused across clubs, so a previous club's events cannot leak
into the new club's cache.

A late event from a torn-down channel can still arrive (the transport
may deliver one in flight). Each handler captures the mount generation
it was created under and drops events once that generation is gone.

Mounting is all or nothing: if any channel fails to open, the channels
opened so far are closed again and mount() re-raises, so a retry opens
the full set.
"""

import asyncio
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from typing import Any, Callable, Optional

import structlog

from clubdesk.cache import QueryCache
from clubdesk.realtime.bindings import ADMIN_CHANNELS, ChannelSpec, TableWatch
from clubdesk.realtime.transport import Listener, RealtimeTransport

logger = structlog.get_logger()

InvalidationHook = Callable[[str, str, list[tuple]], None]


@dataclass
class RealtimeStats:
    events: int = 0
    dropped: int = 0
    channels_opened: int = 0
    channels_closed: int = 0
    status: dict[str, str] = field(default_factory=dict)


class AdminRealtime:
    """Fan-out of realtime change events into cache invalidations."""

    def __init__(
        self,
        cache: QueryCache,
        transport: RealtimeTransport,
        channels: tuple[ChannelSpec, ...] = ADMIN_CHANNELS,
        on_invalidate: Optional[InvalidationHook] = None,
    ):
        self.cache = cache
        self.transport = transport
        self.channels = channels
        self.on_invalidate = on_invalidate
        self.club_id: Optional[str] = None
        self.stats = RealtimeStats()
        self._handles: list[tuple[str, Any]] = []
        self._generation = 0
        self._lock = asyncio.Lock()

    @property
    def is_mounted(self) -> bool:
        return self.club_id is not None

    @property
    def open_channels(self) -> list[str]:
        return [name for name, _ in self._handles]

    # ─── Lifecycle ────────────────────────────────────────

    async def mount(self, club_id: Optional[str]) -> None:
        """Open every channel for club_id. No club id → no-op."""
        async with self._lock:
            if club_id and club_id == self.club_id:
                return
            if self.is_mounted:
                await self._teardown()
            if not club_id:
                return

            self._generation += 1
            self.club_id = club_id
            generation = self._generation
            try:
                await self._open_all(club_id, generation)
            except Exception as e:
                # a half-open club is not mounted; the next mount() starts over
                logger.error("realtime.mount_failed", club_id=club_id, error=str(e))
                await self._teardown()
                raise
            logger.info("realtime.mounted", club_id=club_id, channels=len(self._handles))

    async def _open_all(self, club_id: str, generation: int) -> None:
        for spec in self.channels:
            name = spec.channel_name(club_id)
            listeners = [
                Listener(
                    event=watch.event,
                    table=watch.table,
                    filter=watch.filter_for(club_id),
                    schema=watch.schema,
                    callback=self._handler(generation, club_id, name, watch),
                )
                for watch in spec.watches
            ]
            handle = await self.transport.open_channel(
                name, listeners, self._status_callback(name)
            )
            self._handles.append((name, handle))
            self.stats.channels_opened += 1

    async def unmount(self) -> None:
        async with self._lock:
            await self._teardown()

    async def _teardown(self) -> None:
        # invalidate handlers first so in-flight events are dropped
        self._generation += 1
        handles, self._handles = self._handles, []
        previous, self.club_id = self.club_id, None
        for name, handle in handles:
            try:
                await self.transport.close_channel(handle)
            except Exception as e:
                logger.warning("realtime.close_failed", channel=name, error=str(e))
            self.stats.channels_closed += 1
        if previous is not None:
            logger.info("realtime.unmounted", club_id=previous, channels=len(handles))

    @asynccontextmanager
    async def mounted(self, club_id: Optional[str]):
        """async with realtime.mounted(club_id): ... — always unmounts."""
        await self.mount(club_id)
        try:
            yield self
        finally:
            await self.unmount()

    # ─── Handlers ─────────────────────────────────────────

    def _handler(self, generation: int, club_id: str, channel: str, watch: TableWatch):
        targets = watch.resolve_keys(club_id)

        def on_change(payload: dict[str, Any]) -> None:
            if generation != self._generation:
                self.stats.dropped += 1
                logger.debug("realtime.stale_event_dropped", channel=channel, table=watch.table)
                return
            self.stats.events += 1
            for key in targets:
                self.cache.invalidate(key)
            if self.on_invalidate is not None:
                self.on_invalidate(channel, watch.table, targets)

        return on_change

    def _status_callback(self, channel: str):
        def on_status(status: Any, error: Optional[Exception] = None) -> None:
            label = getattr(status, "value", str(status))
            self.stats.status[channel] = label
            if error is not None:
                logger.warning("realtime.channel_error", channel=channel, status=label, error=str(error))
            else:
                logger.info("realtime.channel_status", channel=channel, status=label)

        return on_status
