"""Club and tenant endpoints."""

from typing import Any, Optional

from clubdesk.api.client import ResourceApi


class ClubsApi(ResourceApi):
    async def get_club(self, club_id: str) -> dict:
        return await self.client.get(f"/clubs/{club_id}")

    async def get_club_revenue(self, club_id: str) -> dict:
        return await self.client.get(f"/clubs/{club_id}/revenue")

    async def get_tenant_branding(self, tenant_id: str) -> Optional[dict[str, Any]]:
        tenant = await self.client.get(f"/tenants/{tenant_id}")
        if not tenant:
            return None
        return {
            "name": tenant.get("name"),
            "logoUrl": tenant.get("logoUrl"),
            "faviconUrl": tenant.get("faviconUrl"),
        }
