"""Tournament endpoints.

Learn: session control (start/pause/resume/end) is a server-side state
machine — the client posts the intent and refetches. Elapsed-time
bookkeeping (session_started_at, paused_at, total_paused_seconds) is
persisted by the backend; see services/clock.py for the display side.
"""

from typing import Any

from clubdesk.api.client import ResourceApi
from clubdesk.schemas.tournament import Tournament, TournamentPlayer


class TournamentsApi(ResourceApi):
    async def list_tournaments(self, club_id: str) -> list[Tournament]:
        data = await self.client.get(f"/clubs/{club_id}/tournaments")
        return self.parse_list(Tournament, data, "tournaments")

    async def get_tournament(self, club_id: str, tournament_id: str) -> Tournament:
        data = await self.client.get(f"/clubs/{club_id}/tournaments/{tournament_id}")
        return self.parse(Tournament, data)

    async def tournament_players(self, club_id: str, tournament_id: str) -> list[TournamentPlayer]:
        data = await self.client.get(f"/clubs/{club_id}/tournaments/{tournament_id}/players")
        return self.parse_list(TournamentPlayer, data, "players")

    async def create_tournament(self, club_id: str, payload: dict[str, Any]) -> Tournament:
        data = await self.client.post(f"/clubs/{club_id}/tournaments", payload)
        return self.parse(Tournament, data)

    async def update_tournament(
        self, club_id: str, tournament_id: str, payload: dict[str, Any]
    ) -> Tournament:
        data = await self.client.put(f"/clubs/{club_id}/tournaments/{tournament_id}", payload)
        return self.parse(Tournament, data)

    async def delete_tournament(self, club_id: str, tournament_id: str) -> None:
        await self.client.delete(f"/clubs/{club_id}/tournaments/{tournament_id}")

    # ─── Session control ──────────────────────────────────

    async def start(self, club_id: str, tournament_id: str) -> dict:
        return await self.client.post(f"/clubs/{club_id}/tournaments/{tournament_id}/start")

    async def pause(self, club_id: str, tournament_id: str) -> dict:
        return await self.client.post(f"/clubs/{club_id}/tournaments/{tournament_id}/pause")

    async def resume(self, club_id: str, tournament_id: str) -> dict:
        return await self.client.post(f"/clubs/{club_id}/tournaments/{tournament_id}/resume")

    async def end(self, club_id: str, tournament_id: str) -> dict:
        return await self.client.post(f"/clubs/{club_id}/tournaments/{tournament_id}/end")
