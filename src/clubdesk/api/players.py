"""Player endpoints — onboarding, KYC, approvals, suspensions."""

from typing import Any, Optional

from clubdesk.api.client import ResourceApi
from clubdesk.schemas.common import SignedUpload
from clubdesk.schemas.player import FieldUpdateRequest, Player


class PlayersApi(ResourceApi):
    async def list_players(
        self,
        club_id: str,
        *,
        page: int = 1,
        limit: int = 50,
        status: Optional[str] = None,
        search: Optional[str] = None,
    ) -> list[Player]:
        data = await self.client.get(
            f"/clubs/{club_id}/players",
            page=page, limit=limit, status=status, search=search,
        )
        return self.parse_list(Player, data, "players")

    async def get_player(self, club_id: str, player_id: str) -> Player:
        data = await self.client.get(f"/clubs/{club_id}/players/{player_id}")
        return self.parse(Player, data)

    async def create_player(self, club_id: str, payload: dict[str, Any]) -> Player:
        data = await self.client.post(f"/clubs/{club_id}/players", payload)
        return self.parse(Player, data)

    async def delete_player(self, club_id: str, player_id: str) -> None:
        await self.client.delete(f"/clubs/{club_id}/players/{player_id}")

    async def pending_approval(self, club_id: str) -> list[Player]:
        data = await self.client.get(f"/clubs/{club_id}/players/pending-approval")
        return self.parse_list(Player, data, "players")

    async def approve_player(self, club_id: str, player_id: str, notes: Optional[str] = None):
        return await self.client.post(
            f"/clubs/{club_id}/players/{player_id}/approve", {"notes": notes}
        )

    async def reject_player(self, club_id: str, player_id: str, reason: str):
        return await self.client.post(
            f"/clubs/{club_id}/players/{player_id}/reject", {"reason": reason}
        )

    async def suspended_players(self, club_id: str) -> list[Player]:
        data = await self.client.get(f"/clubs/{club_id}/players/suspended")
        return self.parse_list(Player, data, "players")

    async def suspend_player(self, club_id: str, player_id: str, payload: dict[str, Any]):
        return await self.client.post(f"/clubs/{club_id}/players/{player_id}/suspend", payload)

    async def unsuspend_player(self, club_id: str, player_id: str):
        return await self.client.post(f"/clubs/{club_id}/players/{player_id}/unsuspend")

    # ─── Profile change requests ──────────────────────────

    async def field_update_requests(self, club_id: str) -> list[FieldUpdateRequest]:
        data = await self.client.get(f"/clubs/{club_id}/players/field-update-requests")
        return self.parse_list(FieldUpdateRequest, data, "requests")

    async def approve_field_update(self, club_id: str, request_id: str):
        return await self.client.post(
            f"/clubs/{club_id}/players/field-update-requests/{request_id}/approve"
        )

    async def reject_field_update(self, club_id: str, request_id: str, reason: str):
        return await self.client.post(
            f"/clubs/{club_id}/players/field-update-requests/{request_id}/reject",
            {"reason": reason},
        )

    # ─── KYC documents ────────────────────────────────────

    async def document_upload_url(
        self, club_id: str, player_id: str, filename: str, document_type: str
    ) -> SignedUpload:
        data = await self.client.post(
            f"/clubs/{club_id}/players/{player_id}/documents/upload-url",
            {"filename": filename, "documentType": document_type},
        )
        return self.parse(SignedUpload, data)

    async def record_document(
        self,
        club_id: str,
        player_id: str,
        *,
        document_type: str,
        file_url: str,
        file_name: str,
        file_size: int,
        mime_type: str,
    ):
        return await self.client.post(f"/clubs/{club_id}/players/{player_id}/documents", {
            "documentType": document_type,
            "fileUrl": file_url,
            "fileName": file_name,
            "fileSize": file_size,
            "mimeType": mime_type,
        })
