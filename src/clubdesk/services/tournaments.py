"""Tournament session control.

The client never decides transitions; it posts the intent and the
refetch shows whatever state the backend settled on.
"""

from clubdesk.cache import keys
from clubdesk.services.base import ClubService
from clubdesk.services.mutation import MutationResult

ACTIONS = {
    "start": ("Tournament started successfully!", "Failed to start tournament"),
    "pause": ("Tournament paused", "Failed to pause tournament"),
    "resume": ("Tournament resumed", "Failed to resume tournament"),
    "end": (
        "Tournament ended and winners updated successfully!",
        "Failed to end tournament",
    ),
}


class TournamentService(ClubService):
    async def _transition(self, action: str, tournament_id: str) -> MutationResult:
        success, fallback = ACTIONS[action]

        async def fn(club_id, tournament_id):
            return await getattr(self.api.tournaments, action)(club_id, tournament_id)

        return await self._mutate(
            f"tournament.{action}", fn,
            invalidates=lambda v: [(keys.TOURNAMENTS,), (keys.TOURNAMENT_PLAYERS,)],
            success=success,
            fallback=fallback,
            tournament_id=tournament_id,
        )

    async def start(self, tournament_id: str) -> MutationResult:
        return await self._transition("start", tournament_id)

    async def pause(self, tournament_id: str) -> MutationResult:
        return await self._transition("pause", tournament_id)

    async def resume(self, tournament_id: str) -> MutationResult:
        return await self._transition("resume", tournament_id)

    async def end(self, tournament_id: str) -> MutationResult:
        return await self._transition("end", tournament_id)
