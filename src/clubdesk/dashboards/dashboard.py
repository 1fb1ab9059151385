"""Role dashboard — mounts realtime for the club and serves sections.

Learn: the dashboard is where club scoping is enforced end to end:
1. open(): no club → "No club selected" banner, zero fetches, no channels
2. open() with a club → bind log context, mount the club's channels
3. show(section): watch + fetch the section's queries through the cache
4. A club switch between calls remounts realtime before fetching, and a
   mount that failed earlier is retried the same way
5. close(): release observers, tear down channels

Switching sections releases the previous section's observers so only
what is on screen keeps polling.
"""

import asyncio
from dataclasses import dataclass, field
from functools import partial
from typing import Any, Optional

import structlog

from clubdesk.api import ClubApi
from clubdesk.api.client import ApiError
from clubdesk.auth.session import SessionStore
from clubdesk.cache.query_cache import QueryCache, QueryObserver
from clubdesk.dashboards.menus import ROLE_MENUS, SECTION_QUERIES
from clubdesk.logging_config import bind_session, clear_context
from clubdesk.realtime.registry import AdminRealtime

logger = structlog.get_logger()

NO_CLUB_BANNER = "No club selected"
NO_DATA_BANNER = "No data"


@dataclass
class SectionView:
    section: str
    data: dict[str, Any] = field(default_factory=dict)
    errors: dict[str, str] = field(default_factory=dict)
    banner: Optional[str] = None


def _is_empty(value: Any) -> bool:
    return value is None or (hasattr(value, "__len__") and len(value) == 0)


class Dashboard:
    def __init__(
        self,
        role: str,
        session_store: SessionStore,
        cache: QueryCache,
        api: ClubApi,
        realtime: Optional[AdminRealtime] = None,
    ):
        role = role.upper()
        if role not in ROLE_MENUS:
            raise ValueError(f"No dashboard for role {role!r}")
        self.role = role
        self.menu = ROLE_MENUS[role]
        self.session_store = session_store
        self.cache = cache
        self.api = api
        self.realtime = realtime
        self._observers: list[QueryObserver] = []
        self.section: Optional[str] = None

    async def open(self) -> Optional[str]:
        """Mount for the selected club. Returns a banner when there is none."""
        club_id = self.session_store.club_id
        if not club_id:
            logger.info("dashboard.no_club", role=self.role)
            return NO_CLUB_BANNER
        await self._mount(club_id)
        return None

    async def _mount(self, club_id: str) -> None:
        bind_session(self.session_store.session, role=self.role, club_id=club_id)
        if self.realtime is not None:
            try:
                await self.realtime.mount(club_id)
            except Exception as e:
                # sections still load; the next show() retries the mount
                logger.warning("dashboard.realtime_unavailable", error=str(e))
        logger.info("dashboard.opened", sections=len(self.menu))

    async def show(self, section: str) -> SectionView:
        if section not in self.menu:
            raise ValueError(f"{section!r} is not on the {self.role} menu")
        self._release()
        self.section = section

        club_id = self.session_store.club_id
        if not club_id:
            return SectionView(section, banner=NO_CLUB_BANNER)
        if self.realtime is not None and self.realtime.club_id != club_id:
            await self._mount(club_id)

        queries = SECTION_QUERIES.get(section, ())
        view = SectionView(section)
        for query in queries:
            key = query.key(club_id)
            fetcher = partial(query.fetch, self.api, club_id)
            self._observers.append(
                self.cache.watch(key, fetcher, refetch_interval=query.refetch_interval())
            )

        results = await asyncio.gather(
            *(self.cache.fetch(q.key(club_id), partial(q.fetch, self.api, club_id))
              for q in queries),
            return_exceptions=True,
        )
        for query, result in zip(queries, results):
            if isinstance(result, ApiError):
                view.errors[query.name] = result.message
            elif isinstance(result, BaseException):
                raise result
            else:
                view.data[query.name] = result

        if view.errors:
            view.banner = next(iter(view.errors.values()))
        elif queries and all(_is_empty(v) for v in view.data.values()):
            view.banner = NO_DATA_BANNER
        logger.debug("dashboard.section_shown", section=section, queries=len(queries))
        return view

    def _release(self) -> None:
        for observer in self._observers:
            observer.close()
        self._observers.clear()

    async def close(self) -> None:
        self._release()
        if self.realtime is not None:
            await self.realtime.unmount()
        clear_context()
        logger.info("dashboard.closed", role=self.role)

    async def __aenter__(self) -> "Dashboard":
        await self.open()
        return self

    async def __aexit__(self, *exc) -> None:
        await self.close()
