"""Shared plumbing for the workflow services."""

from typing import Any, Awaitable, Callable, Optional

from clubdesk.api import ClubApi
from clubdesk.auth.session import SessionStore
from clubdesk.cache.query_cache import QueryCache
from clubdesk.services.feedback import Toaster
from clubdesk.services.mutation import KeysFor, Mutation, MutationResult

NO_CLUB_MESSAGE = "Please select a club first"


class ClubService:
    """A workflow bound to the signed-in operator's currently selected club.

    The club id is read at call time, never captured, so a club switch
    is picked up by the next action.
    """

    def __init__(self, api: ClubApi, session_store: SessionStore, cache: QueryCache, toaster: Toaster):
        self.api = api
        self.session_store = session_store
        self.cache = cache
        self.toaster = toaster

    def club_id(self) -> str:
        """The selected club, or SessionError when there is none."""
        return self.session_store.require_club_id(NO_CLUB_MESSAGE)

    async def _mutate(
        self,
        name: str,
        fn: Callable[..., Awaitable[Any]],
        *,
        guard: Optional[Callable[..., None]] = None,
        invalidates: Optional[KeysFor] = None,
        success: Optional[str] = None,
        fallback: str = "Something went wrong",
        **variables: Any,
    ) -> MutationResult:
        """Run fn as a Mutation with club_id resolved and passed in."""

        def club_guard(**v: Any) -> None:
            self.club_id()
            if guard:
                guard(**v)

        mutation = Mutation(
            fn,
            name=name,
            toaster=self.toaster,
            cache=self.cache,
            guard=club_guard,
            invalidates=invalidates,
            success_message=success,
            error_fallback=fallback,
        )
        return await mutation.run(club_id=self.session_store.club_id, **variables)
