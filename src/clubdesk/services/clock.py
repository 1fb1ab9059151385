"""Tournament elapsed clock.

Learn: the backend persists three fields and the display derives the rest:

    running:  floor(now - session_started_at) - total_paused_seconds
    paused:   floor(paused_at - session_started_at) - total_paused_seconds

A set paused_at freezes the value whatever the status says; it does not
tick. Only an active tournament with no paused_at ticks. Pause/resume only
change those persisted fields (server-side), so after every transition
the client refetches the tournament and recomputes.
"""

import asyncio
import math
from datetime import datetime, timezone
from typing import Callable, Optional

import structlog

from clubdesk.schemas.tournament import Tournament

logger = structlog.get_logger()


def _utc(value: datetime) -> datetime:
    return value if value.tzinfo else value.replace(tzinfo=timezone.utc)


def elapsed_seconds(
    session_started_at: Optional[datetime],
    total_paused_seconds: int = 0,
    paused_at: Optional[datetime] = None,
    now: Optional[datetime] = None,
) -> int:
    if session_started_at is None:
        return 0
    start = _utc(session_started_at)
    end = _utc(paused_at) if paused_at is not None else _utc(now or datetime.now(timezone.utc))
    elapsed = math.floor((end - start).total_seconds()) - int(total_paused_seconds or 0)
    return max(elapsed, 0)


def tournament_elapsed(tournament: Tournament, now: Optional[datetime] = None) -> int:
    return elapsed_seconds(
        tournament.session_started_at, tournament.total_paused_seconds, tournament.paused_at, now,
    )


def is_ticking(tournament: Tournament) -> bool:
    return tournament.status == "active" and tournament.paused_at is None


def format_hms(seconds: int) -> str:
    seconds = max(int(seconds), 0)
    hours, rest = divmod(seconds, 3600)
    minutes, secs = divmod(rest, 60)
    return f"{hours:02d}:{minutes:02d}:{secs:02d}"


class ClockTicker:
    """Publishes HH:MM:SS once a second while running; once while paused.

    The tournament is swappable (refetch after pause/resume) via update().
    """

    def __init__(
        self,
        tournament: Tournament,
        publish: Callable[[str], None],
        *,
        interval: float = 1.0,
        clock: Callable[[], datetime] = lambda: datetime.now(timezone.utc),
    ):
        self.tournament = tournament
        self.publish = publish
        self.interval = interval
        self.clock = clock
        self._changed = asyncio.Event()
        self._stopped = False

    def update(self, tournament: Tournament) -> None:
        self.tournament = tournament
        self._changed.set()

    def stop(self) -> None:
        self._stopped = True
        self._changed.set()

    def display(self) -> str:
        return format_hms(tournament_elapsed(self.tournament, self.clock()))

    async def run(self) -> None:
        logger.info("clock.started", tournament_id=self.tournament.id)
        while not self._stopped:
            self._changed.clear()
            self.publish(self.display())
            if is_ticking(self.tournament):
                timeout = self.interval
            else:
                # Frozen: wait for a state change instead of ticking
                timeout = None
            try:
                await asyncio.wait_for(self._changed.wait(), timeout)
            except asyncio.TimeoutError:
                pass
        logger.info("clock.stopped", tournament_id=self.tournament.id)
