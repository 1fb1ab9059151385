"""Leave applications and policies."""

from clubdesk.api.client import ResourceApi, normalize_list


class LeavesApi(ResourceApi):
    async def pending_applications(self, club_id: str) -> list[dict]:
        data = await self.client.get(f"/clubs/{club_id}/leave-applications", status="PENDING")
        return normalize_list(data, "applications")

    async def approve(self, club_id: str, application_id: str) -> dict:
        return await self.client.post(
            f"/clubs/{club_id}/leave-applications/{application_id}/approve"
        )

    async def reject(self, club_id: str, application_id: str, reason: str) -> dict:
        return await self.client.post(
            f"/clubs/{club_id}/leave-applications/{application_id}/reject",
            {"rejectionReason": reason},
        )

    async def policies(self, club_id: str) -> list[dict]:
        return normalize_list(await self.client.get(f"/clubs/{club_id}/leave-policies"), "policies")
