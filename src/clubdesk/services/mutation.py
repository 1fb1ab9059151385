"""Mutations — one write, its toast, and the cache keys it invalidates.

Learn: every portal action follows the same shape:
1. Run the guard (ValidationError or SessionError → error toast, no
   network call)
2. Call the endpoint
3. On success: invalidate the affected keys, show the success toast
4. On failure: show the server's message (or a fallback) and leave the
   cache alone

Failures become a MutationResult rather than an exception so callers
(dashboards, CLI) can keep going.
"""

from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Iterable, Optional

import structlog

from clubdesk.api.client import ApiError
from clubdesk.auth.session import SessionError
from clubdesk.cache.query_cache import QueryCache
from clubdesk.services.feedback import Toaster
from clubdesk.services.guards import ValidationError

logger = structlog.get_logger()

KeysFor = Callable[[dict[str, Any]], Iterable[tuple]]
Guard = Callable[..., None]


@dataclass
class MutationResult:
    ok: bool
    data: Any = None
    error: Optional[str] = None
    status_code: Optional[int] = None


class Mutation:
    def __init__(
        self,
        fn: Callable[..., Awaitable[Any]],
        *,
        name: str = "mutation",
        toaster: Toaster,
        cache: Optional[QueryCache] = None,
        guard: Optional[Guard] = None,
        invalidates: Optional[KeysFor] = None,
        success_message: Optional[str] = None,
        error_fallback: str = "Something went wrong",
    ):
        self.name = name
        self.fn = fn
        self.toaster = toaster
        self.cache = cache
        self.guard = guard
        self.invalidates = invalidates
        self.success_message = success_message
        self.error_fallback = error_fallback

    async def run(self, **variables: Any) -> MutationResult:
        try:
            if self.guard:
                self.guard(**variables)
            data = await self.fn(**variables)
        except (ValidationError, SessionError) as e:
            reason = str(e)
            logger.info("mutation.rejected", mutation=self.name, reason=reason)
            self.toaster.error(reason)
            return MutationResult(ok=False, error=reason)
        except ApiError as e:
            message = e.message or self.error_fallback
            logger.warning(
                "mutation.failed", mutation=self.name, error=message, status=e.status_code,
            )
            self.toaster.error(message)
            return MutationResult(ok=False, error=message, status_code=e.status_code)

        if self.cache is not None and self.invalidates is not None:
            for key in self.invalidates(variables):
                self.cache.invalidate(key)
        logger.info("mutation.succeeded", mutation=self.name)
        if self.success_message:
            self.toaster.success(self.success_message)
        return MutationResult(ok=True, data=data)
