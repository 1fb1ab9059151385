"""Tournament clock tests — elapsed arithmetic, freezing, formatting."""

import asyncio
from datetime import datetime, timedelta, timezone

import pytest

from clubdesk.schemas.tournament import Tournament
from clubdesk.services.clock import (
    ClockTicker,
    elapsed_seconds,
    format_hms,
    is_ticking,
    tournament_elapsed,
)

T0 = datetime(2026, 3, 1, 18, 0, 0, tzinfo=timezone.utc)


def test_running_elapsed_subtracts_paused_total():
    now = T0 + timedelta(seconds=3725.9)

    assert elapsed_seconds(T0, total_paused_seconds=125, now=now) == 3600


def test_paused_elapsed_is_frozen_at_pause_time():
    paused_at = T0 + timedelta(seconds=600.4)

    later = elapsed_seconds(T0, 100, paused_at=paused_at, now=T0 + timedelta(hours=5))
    sooner = elapsed_seconds(T0, 100, paused_at=paused_at, now=T0 + timedelta(seconds=601))

    assert later == sooner == 500


def test_no_start_time_is_zero():
    assert elapsed_seconds(None, 30, now=T0) == 0


def test_elapsed_never_negative():
    assert elapsed_seconds(T0, total_paused_seconds=50, now=T0 + timedelta(seconds=10)) == 0


def test_naive_timestamps_are_utc():
    naive = T0.replace(tzinfo=None)

    assert elapsed_seconds(naive, now=T0 + timedelta(seconds=42)) == 42


def test_paused_at_freezes_regardless_of_status():
    stale_status = Tournament(
        id="t-1", status="active", sessionStartedAt=T0,
        pausedAt=T0 + timedelta(seconds=10), totalPausedSeconds=0,
    )
    paused = stale_status.model_copy(update={"status": "paused"})
    running = stale_status.model_copy(update={"paused_at": None})
    now = T0 + timedelta(seconds=90)

    assert tournament_elapsed(stale_status, now) == 10
    assert tournament_elapsed(paused, now) == 10
    assert tournament_elapsed(running, now) == 90


def test_only_active_without_paused_at_ticks():
    active = Tournament(id="t-1", status="active", sessionStartedAt=T0)

    assert is_ticking(active)
    assert not is_ticking(active.model_copy(update={"paused_at": T0}))
    assert not is_ticking(active.model_copy(update={"status": "completed"}))


@pytest.mark.parametrize("seconds,expected", [
    (0, "00:00:00"),
    (59, "00:00:59"),
    (3661, "01:01:01"),
    (360000, "100:00:00"),
    (-5, "00:00:00"),
])
def test_format_hms(seconds, expected):
    assert format_hms(seconds) == expected


# ═══════════════════════════════════════════════════════════
# Ticker
# ═══════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_ticker_publishes_every_interval_while_active():
    now = [T0 + timedelta(seconds=5)]
    published = []
    tournament = Tournament(id="t-1", status="active", sessionStartedAt=T0)
    ticker = ClockTicker(tournament, published.append, interval=0.01, clock=lambda: now[0])

    task = asyncio.create_task(ticker.run())
    await asyncio.sleep(0.005)
    now[0] += timedelta(seconds=1)
    await asyncio.sleep(0.03)
    ticker.stop()
    await task

    assert published[0] == "00:00:05"
    assert "00:00:06" in published
    assert len(published) >= 2


@pytest.mark.asyncio
async def test_ticker_publishes_once_while_paused():
    published = []
    tournament = Tournament(
        id="t-1", status="paused", sessionStartedAt=T0,
        pausedAt=T0 + timedelta(seconds=75), totalPausedSeconds=15,
    )
    ticker = ClockTicker(tournament, published.append, interval=0.01,
                         clock=lambda: T0 + timedelta(hours=1))

    task = asyncio.create_task(ticker.run())
    await asyncio.sleep(0.05)

    assert published == ["00:01:00"]

    ticker.update(tournament.model_copy(update={"status": "active", "paused_at": None}))
    await asyncio.sleep(0.005)
    ticker.stop()
    await task

    assert published[1] == "00:59:45"


@pytest.mark.asyncio
async def test_ticker_stays_frozen_when_paused_at_set_on_active():
    published = []
    tournament = Tournament(
        id="t-1", status="active", sessionStartedAt=T0,
        pausedAt=T0 + timedelta(seconds=30),
    )
    now = [T0 + timedelta(seconds=40)]
    ticker = ClockTicker(tournament, published.append, interval=0.01, clock=lambda: now[0])

    task = asyncio.create_task(ticker.run())
    await asyncio.sleep(0.005)
    now[0] += timedelta(minutes=10)
    await asyncio.sleep(0.05)
    ticker.stop()
    await task

    assert published == ["00:00:30"]
