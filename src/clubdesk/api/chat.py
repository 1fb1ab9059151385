"""Staff/player chat endpoints."""

from clubdesk.api.client import ResourceApi, normalize_list


class ChatApi(ResourceApi):
    async def unread_counts(self, club_id: str) -> dict:
        return await self.client.get(f"/clubs/{club_id}/chat/unread-counts") or {}

    async def staff_sessions(self, club_id: str) -> list[dict]:
        data = await self.client.get(f"/clubs/{club_id}/chat/staff-sessions")
        return normalize_list(data, "sessions")

    async def session_messages(self, club_id: str, session_id: str) -> list[dict]:
        data = await self.client.get(f"/clubs/{club_id}/chat/sessions/{session_id}/messages")
        return normalize_list(data, "messages")

    async def send_message(self, club_id: str, session_id: str, message: str) -> dict:
        return await self.client.post(
            f"/clubs/{club_id}/chat/sessions/{session_id}/messages", {"message": message}
        )
