"""clubdesk CLI — sign in, review requests, watch the club live.

Usage:
    clubdesk login staff@club.example            # Prompts for password, stores the session
    clubdesk whoami                              # Who is signed in, for which club
    clubdesk players --status pending            # List club players
    clubdesk buyins                              # Pending buy-in requests
    clubdesk approve-buyin REQ-1 --amount 500    # Approve with the given amount
    clubdesk reject-buyin REQ-1 --reason "dup"   # Reject with a reason
    clubdesk tournament-clock T-9                # Live elapsed clock
    clubdesk watch                               # Print realtime invalidations
    clubdesk logout
"""

from __future__ import annotations

import asyncio
import concurrent.futures
import sys
from typing import Optional

import click

from clubdesk import __version__
from clubdesk.api import ApiClient, ApiError, ClubApi
from clubdesk.auth.service import AuthService
from clubdesk.auth.session import FileSessionStore, SessionError, SessionStore
from clubdesk.cache.query_cache import QueryCache
from clubdesk.config import settings
from clubdesk.logging_config import configure_logging
from clubdesk.services.clock import ClockTicker, is_ticking
from clubdesk.services.feedback import Toast, Toaster
from clubdesk.services.requests import RequestService

# ---------------------------------------------------------------------------
# Wiring
# ---------------------------------------------------------------------------


def _store() -> SessionStore:
    return FileSessionStore(settings.session_path)


def _client(store: SessionStore) -> ApiClient:
    """Build the API client for the backend in CLUBDESK_API_BASE_URL."""
    return ApiClient(store)


async def _realtime_transport():
    from clubdesk.realtime.transport import SupabaseTransport

    if not settings.supabase_url or not settings.supabase_anon_key:
        click.secho(
            "Error: CLUBDESK_SUPABASE_URL and CLUBDESK_SUPABASE_ANON_KEY are required",
            fg="red",
            err=True,
        )
        sys.exit(1)
    return await SupabaseTransport.connect(settings.supabase_url, settings.supabase_anon_key)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _run(coro):
    """Run an async coroutine from a synchronous Click handler.

    Inside an already running loop (CliRunner under an async test) the
    coroutine runs on a worker thread.
    """
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        return asyncio.run(coro)
    else:
        with concurrent.futures.ThreadPoolExecutor(max_workers=1) as pool:
            return pool.submit(asyncio.run, coro).result()


TOAST_COLORS = {"success": "green", "error": "red", "info": "cyan"}


def _echo_toast(toast: Toast) -> None:
    click.secho(toast.message, fg=TOAST_COLORS.get(toast.level, "white"))


def _toaster() -> Toaster:
    toaster = Toaster()
    toaster.add_sink(_echo_toast)
    return toaster


def _require_club(store: SessionStore) -> str:
    try:
        return store.require_club_id()
    except SessionError:
        click.secho("No club selected. Log in with a club staff account.", fg="red", err=True)
        sys.exit(1)


def _fail(e: ApiError) -> None:
    click.secho(f"Error: {e.message}", fg="red", err=True)
    sys.exit(1)


def _print_table(rows: list[dict], columns: list[tuple[str, str, int]]):
    """Print a simple ASCII table.

    columns: list of (header, dict_key, width)
    """
    header = "  ".join(h.ljust(w) for h, _, w in columns)
    click.secho(header, bold=True)
    click.echo("-" * len(header))
    for row in rows:
        line = "  ".join(str(row.get(k) if row.get(k) is not None else "—")[:w].ljust(w)
                         for _, k, w in columns)
        click.echo(line)


def _status_color(status: Optional[str]) -> str:
    colors = {
        "pending": "yellow",
        "approved": "green",
        "active": "green",
        "rejected": "red",
        "suspended": "red",
        "paused": "yellow",
        "completed": "blue",
        "stopped": "red",
        "scheduled": "cyan",
    }
    return colors.get((status or "").lower(), "white")


# ---------------------------------------------------------------------------
# CLI group
# ---------------------------------------------------------------------------


@click.group()
@click.version_option(version=__version__, prog_name="clubdesk")
def main():
    """clubdesk — staff console for the club management backend."""
    configure_logging(settings.log_level, settings.json_logs, settings.environment)


# ---------------------------------------------------------------------------
# clubdesk login / logout / whoami
# ---------------------------------------------------------------------------


@main.command()
@click.argument("email")
@click.option("--password", "-p", prompt=True, hide_input=True, help="Account password")
def login(email: str, password: str):
    """Sign in and store the session."""
    _run(_login_impl(email, password))


async def _login_impl(email: str, password: str):
    store = _store()
    async with _client(store) as client:
        try:
            session = await AuthService(ClubApi(client), store).login(email, password)
        except ApiError as e:
            _fail(e)
    click.secho(f"Signed in as {session.email}", fg="green")
    click.echo(f"  Role: {session.role or '—'}")
    click.echo(f"  Club: {session.club_id or '—'}")


@main.command()
def logout():
    """Clear the stored session."""
    store = _store()
    store.clear()
    click.secho("Signed out.", fg="green")


@main.command()
def whoami():
    """Show the signed-in identity."""
    session = _store().session
    if not session.user_id:
        click.echo("Not signed in.")
        sys.exit(1)
    click.secho(session.email or session.user_id, bold=True)
    click.echo(f"  User:   {session.user_id}")
    click.echo(f"  Role:   {session.role or '—'}")
    click.echo(f"  Club:   {session.club_id or '—'}")
    click.echo(f"  Tenant: {session.tenant_id or '—'}")
    if not session.is_authenticated:
        click.secho("  Session expired. Log in again.", fg="yellow")


# ---------------------------------------------------------------------------
# clubdesk players
# ---------------------------------------------------------------------------


@main.command()
@click.option("--status", "-s", "status_filter", help="Filter by status")
@click.option("--search", "-q", help="Name, email or phone")
@click.option("--limit", "-l", default=50, help="Max results")
def players(status_filter: Optional[str], search: Optional[str], limit: int):
    """List club players."""
    _run(_players_impl(status_filter, search, limit))


async def _players_impl(status_filter: Optional[str], search: Optional[str], limit: int):
    store = _store()
    club_id = _require_club(store)
    async with _client(store) as client:
        try:
            rows = await ClubApi(client).players.list_players(
                club_id, limit=limit, status=status_filter, search=search
            )
        except ApiError as e:
            _fail(e)

    if not rows:
        click.echo("No players found.")
        return
    click.secho(f"Players ({len(rows)}):", bold=True)
    click.echo()
    _print_table([p.model_dump() for p in rows], [
        ("ID", "id", 12),
        ("Name", "name", 24),
        ("Phone", "phone_number", 14),
        ("Status", "status", 12),
        ("KYC", "kyc_status", 10),
    ])


# ---------------------------------------------------------------------------
# clubdesk buyins / approve-buyin / reject-buyin
# ---------------------------------------------------------------------------


@main.command()
def buyins():
    """List buy-in requests awaiting a decision."""
    _run(_buyins_impl())


async def _buyins_impl():
    store = _store()
    club_id = _require_club(store)
    async with _client(store) as client:
        try:
            reqs = await ClubApi(client).requests.buy_in_requests(club_id)
        except ApiError as e:
            _fail(e)

    if not reqs:
        click.echo("No pending buy-in requests.")
        return
    click.secho(f"Buy-in requests ({len(reqs)}):", bold=True)
    click.echo()
    for req in reqs:
        status_str = click.style(req.status or "pending", fg=_status_color(req.status))
        click.echo(f"  {req.id}  {status_str}  {req.player_name or req.player_id or '—'}")
        click.echo(f"    Amount: {req.requested_amount or 0:,.2f}")


@main.command("approve-buyin")
@click.argument("request_id")
@click.option("--amount", "-a", type=float, required=True, help="Amount to credit")
def approve_buyin(request_id: str, amount: float):
    """Approve a buy-in request for AMOUNT."""
    _run(_decide_impl(request_id, amount=amount))


@main.command("reject-buyin")
@click.argument("request_id")
@click.option("--reason", "-r", required=True, help="Shown to the player")
def reject_buyin(request_id: str, reason: str):
    """Reject a buy-in request."""
    _run(_decide_impl(request_id, reason=reason))


async def _decide_impl(request_id: str, amount: Optional[float] = None, reason: Optional[str] = None):
    store = _store()
    _require_club(store)
    async with _client(store) as client:
        service = RequestService(ClubApi(client), store, QueryCache(), _toaster())
        if reason is None:
            result = await service.approve_buy_in(request_id, amount)
        else:
            result = await service.reject_buy_in(request_id, reason)
    if not result.ok:
        sys.exit(1)


# ---------------------------------------------------------------------------
# clubdesk tournament-clock
# ---------------------------------------------------------------------------


@main.command("tournament-clock")
@click.argument("tournament_id")
@click.option("--once", is_flag=True, help="Print the current value and exit")
def tournament_clock(tournament_id: str, once: bool):
    """Show a tournament's elapsed time (HH:MM:SS)."""
    _run(_clock_impl(tournament_id, once))


async def _clock_impl(tournament_id: str, once: bool):
    store = _store()
    club_id = _require_club(store)
    async with _client(store) as client:
        try:
            tournament = await ClubApi(client).tournaments.get_tournament(club_id, tournament_id)
        except ApiError as e:
            _fail(e)

    label = click.style(tournament.status, fg=_status_color(tournament.status))
    ticker = ClockTicker(
        tournament,
        lambda text: click.echo(f"\r{tournament.name or tournament.id}  [{label}]  {text}",
                                nl=once),
    )
    if once or not is_ticking(tournament):
        ticker.publish(ticker.display())
        return
    try:
        await ticker.run()
    except asyncio.CancelledError:
        ticker.stop()


# ---------------------------------------------------------------------------
# clubdesk watch
# ---------------------------------------------------------------------------


@main.command()
def watch():
    """Mount the club's realtime channels and print every invalidation."""
    _run(_watch_impl())


async def _watch_impl():
    from clubdesk.realtime.registry import AdminRealtime

    store = _store()
    club_id = _require_club(store)
    transport = await _realtime_transport()

    def on_invalidate(channel: str, table: str, keys: list[tuple]):
        names = ", ".join(k[0] for k in keys)
        click.echo(f"  {click.style(channel, fg='cyan')}  {table}  → {names}")

    realtime = AdminRealtime(QueryCache(), transport, on_invalidate=on_invalidate)
    async with realtime.mounted(club_id):
        click.secho(f"Watching {len(realtime.open_channels)} channels for club {club_id}", bold=True)
        click.echo("Press Ctrl-C to stop.")
        try:
            await asyncio.Event().wait()
        except asyncio.CancelledError:
            pass
