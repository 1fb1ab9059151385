"""Tables, table sessions and the waitlist."""

from typing import Any, Optional

from clubdesk.api.client import ResourceApi, normalize_list


class TablesApi(ResourceApi):
    async def list_tables(self, club_id: str) -> list[dict]:
        return normalize_list(await self.client.get(f"/clubs/{club_id}/tables"), "tables")

    async def create_table(self, club_id: str, payload: dict[str, Any]) -> dict:
        return await self.client.post(f"/clubs/{club_id}/tables", payload)

    async def update_table(self, club_id: str, table_id: str, payload: dict[str, Any]) -> dict:
        return await self.client.put(f"/clubs/{club_id}/tables/{table_id}", payload)

    async def delete_table(self, club_id: str, table_id: str) -> None:
        await self.client.delete(f"/clubs/{club_id}/tables/{table_id}")

    async def seated_players(self, club_id: str, table_id: str) -> list[dict]:
        data = await self.client.get(f"/clubs/{club_id}/tables/{table_id}/seated-players")
        return normalize_list(data, "players")

    async def pause_session(self, club_id: str, table_id: str) -> dict:
        return await self.client.post(f"/clubs/{club_id}/tables/{table_id}/pause-session")

    async def resume_session(self, club_id: str, table_id: str) -> dict:
        return await self.client.post(f"/clubs/{club_id}/tables/{table_id}/resume-session")

    async def end_session(self, club_id: str, table_id: str) -> dict:
        return await self.client.post(f"/clubs/{club_id}/tables/{table_id}/end-session")


class WaitlistApi(ResourceApi):
    async def list_entries(self, club_id: str, status: Optional[str] = None) -> list[dict]:
        data = await self.client.get(f"/clubs/{club_id}/waitlist", status=status)
        return normalize_list(data, "entries")

    async def add_entry(self, club_id: str, payload: dict[str, Any]) -> dict:
        return await self.client.post(f"/clubs/{club_id}/waitlist", payload)

    async def seat_player(
        self, club_id: str, entry_id: str, table_number: int, seated_by: Optional[str] = None
    ) -> dict:
        return await self.client.put(f"/clubs/{club_id}/waitlist/{entry_id}", {
            "status": "SEATED",
            "tableNumber": table_number,
            "seatedBy": seated_by,
        })

    async def cancel_entry(self, club_id: str, entry_id: str) -> dict:
        return await self.client.put(f"/clubs/{club_id}/waitlist/{entry_id}", {"status": "CANCELLED"})
