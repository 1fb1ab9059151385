"""Notification inbox + push notification endpoints."""

from typing import Any

from clubdesk.api.client import ResourceApi, normalize_list
from clubdesk.schemas.common import SignedUpload, UnreadCount


class NotificationsApi(ResourceApi):
    async def unread_count(self, club_id: str, recipient_type: str = "staff") -> int:
        data = await self.client.get(
            f"/clubs/{club_id}/notifications/unread-count", recipientType=recipient_type
        )
        if isinstance(data, (int, float)):
            return int(data)
        return self.parse(UnreadCount, data or {}).count

    async def inbox(self, club_id: str, recipient_type: str = "staff") -> list[dict]:
        data = await self.client.get(
            f"/clubs/{club_id}/notifications/inbox", recipientType=recipient_type
        )
        return normalize_list(data, "notifications")

    async def mark_read(self, club_id: str, notification_id: str) -> dict:
        return await self.client.post(
            f"/clubs/{club_id}/notifications/{notification_id}/read"
        )

    async def mark_all_read(self, club_id: str, recipient_type: str = "staff") -> dict:
        return await self.client.post(
            f"/clubs/{club_id}/notifications/read-all", {"recipientType": recipient_type}
        )

    # ─── Push notifications ───────────────────────────────

    async def push_notifications(self, club_id: str) -> list[dict]:
        data = await self.client.get(f"/clubs/{club_id}/push-notifications")
        return normalize_list(data, "notifications")

    async def create_push(self, club_id: str, payload: dict[str, Any]) -> dict:
        return await self.client.post(f"/clubs/{club_id}/push-notifications", payload)

    async def send_push(self, club_id: str, notification_id: str) -> dict:
        return await self.client.post(
            f"/clubs/{club_id}/push-notifications/{notification_id}/send"
        )

    async def delete_push(self, club_id: str, notification_id: str) -> None:
        await self.client.delete(f"/clubs/{club_id}/push-notifications/{notification_id}")

    async def media_upload_url(self, club_id: str, filename: str, is_video: bool) -> SignedUpload:
        data = await self.client.post(
            f"/clubs/{club_id}/push-notifications/upload-url",
            {"filename": filename, "isVideo": is_video},
        )
        return self.parse(SignedUpload, data)
