"""Leave application approvals."""

from clubdesk.cache import keys
from clubdesk.services.base import ClubService
from clubdesk.services.guards import require_text
from clubdesk.services.mutation import MutationResult


class LeaveService(ClubService):
    def _affected(self, variables: dict) -> list[tuple]:
        return [
            (keys.PENDING_LEAVES, variables["club_id"]),
            (keys.MY_APPROVED_LEAVES, variables["club_id"]),
        ]

    async def approve(self, application_id: str) -> MutationResult:
        async def fn(club_id, application_id):
            return await self.api.leaves.approve(club_id, application_id)

        return await self._mutate(
            "leave.approve", fn,
            invalidates=self._affected,
            success="Leave application approved",
            fallback="Failed to approve leave",
            application_id=application_id,
        )

    async def reject(self, application_id: str, reason: str) -> MutationResult:
        async def fn(club_id, application_id, reason):
            return await self.api.leaves.reject(club_id, application_id, reason.strip())

        return await self._mutate(
            "leave.reject", fn,
            guard=lambda reason=None, **_: require_text(
                reason, "Please provide a reason for rejection"
            ),
            invalidates=self._affected,
            success="Leave application rejected",
            fallback="Failed to reject leave",
            application_id=application_id, reason=reason,
        )
