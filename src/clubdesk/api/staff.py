"""Staff endpoints."""

from typing import Any, Optional

from clubdesk.api.client import ResourceApi, normalize_list


class StaffApi(ResourceApi):
    async def list_staff(self, club_id: str) -> list[dict]:
        return normalize_list(await self.client.get(f"/clubs/{club_id}/staff"), "staff")

    async def create_staff(self, club_id: str, payload: dict[str, Any]) -> dict:
        return await self.client.post(f"/clubs/{club_id}/staff", payload)

    async def update_staff(self, club_id: str, staff_id: str, payload: dict[str, Any]) -> dict:
        return await self.client.put(f"/clubs/{club_id}/staff/{staff_id}", payload)

    async def suspend_staff(self, club_id: str, staff_id: str, reason: Optional[str] = None) -> dict:
        return await self.client.post(
            f"/clubs/{club_id}/staff/{staff_id}/suspend", {"reason": reason}
        )

    async def reactivate_staff(self, club_id: str, staff_id: str) -> dict:
        return await self.client.post(f"/clubs/{club_id}/staff/{staff_id}/reactivate")
