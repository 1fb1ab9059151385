"""Buy-in, buy-out and credit request approvals.

Learn: approving sends exactly {"amount": <amount>} for the request and
then invalidates that club's pending list. Reject requires a reason and
sends {"reason": <reason>}. The realtime channel would refresh the list
anyway; the explicit invalidation makes the operator's own action
visible without waiting for the round trip.
"""

from typing import Optional

import structlog

from clubdesk.cache import keys
from clubdesk.services.base import ClubService
from clubdesk.services.guards import require, require_positive, require_text
from clubdesk.services.mutation import MutationResult

logger = structlog.get_logger()

REJECT_REASON_MESSAGE = "Please provide a reason for rejection"


def _approval_guard(request_id: Optional[str] = None, amount=None, **_) -> None:
    require(request_id, "No request selected")
    require_positive(amount, "Amount must be a valid number", allow_zero=True)


def _rejection_guard(request_id: Optional[str] = None, reason: Optional[str] = None, **_) -> None:
    require(request_id, "No request selected")
    require_text(reason, REJECT_REASON_MESSAGE)


class RequestService(ClubService):
    # ─── Buy-in ───────────────────────────────────────────

    async def approve_buy_in(self, request_id: str, amount: float) -> MutationResult:
        async def fn(club_id, request_id, amount):
            return await self.api.requests.approve_buy_in(club_id, request_id, {"amount": amount})

        return await self._mutate(
            "buy_in.approve", fn,
            guard=_approval_guard,
            invalidates=lambda v: [(keys.BUY_IN_REQUESTS, v["club_id"])],
            success="Buy-in request approved and balance updated!",
            fallback="Failed to approve buy-in request",
            request_id=request_id, amount=amount,
        )

    async def reject_buy_in(self, request_id: str, reason: str) -> MutationResult:
        async def fn(club_id, request_id, reason):
            return await self.api.requests.reject_buy_in(
                club_id, request_id, {"reason": reason.strip()}
            )

        return await self._mutate(
            "buy_in.reject", fn,
            guard=_rejection_guard,
            invalidates=lambda v: [(keys.BUY_IN_REQUESTS, v["club_id"])],
            success="Buy-in request rejected!",
            fallback="Failed to reject buy-in request",
            request_id=request_id, reason=reason,
        )

    # ─── Buy-out ──────────────────────────────────────────

    async def approve_buy_out(self, request_id: str, amount: float) -> MutationResult:
        async def fn(club_id, request_id, amount):
            return await self.api.requests.approve_buy_out(club_id, request_id, {"amount": amount})

        return await self._mutate(
            "buy_out.approve", fn,
            guard=_approval_guard,
            invalidates=lambda v: [(keys.BUY_OUT_REQUESTS, v["club_id"])],
            success="Buy-out request approved and balance updated!",
            fallback="Failed to approve buy-out request",
            request_id=request_id, amount=amount,
        )

    async def reject_buy_out(self, request_id: str, reason: str) -> MutationResult:
        async def fn(club_id, request_id, reason):
            return await self.api.requests.reject_buy_out(
                club_id, request_id, {"reason": reason.strip()}
            )

        return await self._mutate(
            "buy_out.reject", fn,
            guard=_rejection_guard,
            invalidates=lambda v: [(keys.BUY_OUT_REQUESTS, v["club_id"])],
            success="Buy-out request rejected!",
            fallback="Failed to reject buy-out request",
            request_id=request_id, reason=reason,
        )

    # ─── Credit ───────────────────────────────────────────

    async def approve_credit(self, request_id: str) -> MutationResult:
        approved_by = self.session_store.session.user_id

        async def fn(club_id, request_id):
            return await self.api.requests.approve_credit(
                club_id, request_id, {"approvedBy": approved_by}
            )

        return await self._mutate(
            "credit.approve", fn,
            guard=lambda request_id=None, **_: require(request_id, "No request selected"),
            invalidates=lambda v: [
                (keys.CREDIT_REQUESTS, v["club_id"]),
                (keys.CLUB_PLAYERS, v["club_id"]),
            ],
            success="Credit request approved!",
            fallback="Failed to approve credit request",
            request_id=request_id,
        )

    async def reject_credit(self, request_id: str, reason: str) -> MutationResult:
        async def fn(club_id, request_id, reason):
            return await self.api.requests.reject_credit(
                club_id, request_id, {"reason": reason.strip()}
            )

        return await self._mutate(
            "credit.reject", fn,
            guard=_rejection_guard,
            invalidates=lambda v: [(keys.CREDIT_REQUESTS, v["club_id"])],
            success="Credit request rejected",
            fallback="Failed to reject credit request",
            request_id=request_id, reason=reason,
        )
