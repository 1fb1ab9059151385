"""Financial transactions + rake collection endpoints."""

from typing import Any, Optional

from clubdesk.api.client import ResourceApi, normalize_list


class TransactionsApi(ResourceApi):
    async def list_transactions(
        self,
        club_id: str,
        *,
        player_id: Optional[str] = None,
        type: Optional[str] = None,
        table_number: Optional[int] = None,
        limit: Optional[int] = None,
    ) -> list[dict]:
        data = await self.client.get(
            f"/clubs/{club_id}/transactions",
            playerId=player_id, type=type, tableNumber=table_number, limit=limit,
        )
        return normalize_list(data, "transactions")

    async def create_transaction(self, club_id: str, payload: dict[str, Any]) -> dict:
        return await self.client.post(f"/clubs/{club_id}/transactions", payload)


class RakeApi(ResourceApi):
    async def collections(self, club_id: str) -> list[dict]:
        data = await self.client.get(f"/clubs/{club_id}/rake-collections")
        return normalize_list(data, "collections")

    async def create_collection(self, club_id: str, payload: dict[str, Any]) -> dict:
        return await self.client.post(f"/clubs/{club_id}/rake-collections", payload)
