"""Buy-in, buy-out and credit request endpoints."""

from typing import Optional

from clubdesk.api.client import ResourceApi
from clubdesk.schemas.requests import BuyInRequest, BuyOutRequest, CreditRequest


class RequestsApi(ResourceApi):
    # ─── Buy-in ───────────────────────────────────────────

    async def buy_in_requests(self, club_id: str) -> list[BuyInRequest]:
        data = await self.client.get(f"/clubs/{club_id}/buy-in-requests")
        return self.parse_list(BuyInRequest, data, "requests")

    async def approve_buy_in(self, club_id: str, request_id: str, body: dict) -> dict:
        return await self.client.post(
            f"/clubs/{club_id}/buy-in-requests/{request_id}/approve", body
        )

    async def reject_buy_in(self, club_id: str, request_id: str, body: dict) -> dict:
        return await self.client.post(
            f"/clubs/{club_id}/buy-in-requests/{request_id}/reject", body
        )

    # ─── Buy-out ──────────────────────────────────────────

    async def buy_out_requests(self, club_id: str) -> list[BuyOutRequest]:
        data = await self.client.get(f"/clubs/{club_id}/buy-out-requests")
        return self.parse_list(BuyOutRequest, data, "requests")

    async def approve_buy_out(self, club_id: str, request_id: str, body: dict) -> dict:
        return await self.client.post(
            f"/clubs/{club_id}/buy-out-requests/{request_id}/approve", body
        )

    async def reject_buy_out(self, club_id: str, request_id: str, body: dict) -> dict:
        return await self.client.post(
            f"/clubs/{club_id}/buy-out-requests/{request_id}/reject", body
        )

    # ─── Credit ───────────────────────────────────────────

    async def credit_requests(
        self, club_id: str, status: Optional[str] = None
    ) -> list[CreditRequest]:
        data = await self.client.get(f"/clubs/{club_id}/credit-requests", status=status)
        return self.parse_list(CreditRequest, data, "requests")

    async def approve_credit(self, club_id: str, request_id: str, body: dict) -> dict:
        return await self.client.put(
            f"/clubs/{club_id}/credit-requests/{request_id}/approve", body
        )

    async def reject_credit(self, club_id: str, request_id: str, body: dict) -> dict:
        return await self.client.put(
            f"/clubs/{club_id}/credit-requests/{request_id}/reject", body
        )
