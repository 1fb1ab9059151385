"""Push notifications and the staff notification inbox."""

from dataclasses import dataclass, field
from typing import Optional

import structlog

from clubdesk.cache import keys
from clubdesk.services.base import ClubService
from clubdesk.services.guards import require, require_text
from clubdesk.services.mutation import MutationResult
from clubdesk.services.uploads import DocumentUpload, UploadError, upload_via_signed_url

logger = structlog.get_logger()

CUSTOM_GROUP = "custom_group"
STAFF_CUSTOM = "staff_custom"
TARGET_TYPES = (
    "all_players", "new_signups", "vip_players", "tables_players", "waitlist_players",
    CUSTOM_GROUP, "all_staff", "staff_admin", "staff_manager", "staff_cashier",
    "staff_dealer", "staff_hr", "staff_fnb", "staff_gre", STAFF_CUSTOM,
)


@dataclass
class PushNotificationForm:
    title: str
    details: str = ""
    target_type: str = "all_players"
    notification_type: str = "player"  # player | staff
    image: Optional[DocumentUpload] = None
    image_url: Optional[str] = None
    video: Optional[DocumentUpload] = None
    video_url: Optional[str] = None
    custom_player_ids: list[str] = field(default_factory=list)
    custom_staff_ids: list[str] = field(default_factory=list)
    scheduled_at: Optional[str] = None
    is_active: bool = True


def validate_push_form(form: PushNotificationForm) -> None:
    require_text(form.title, "Title is required")
    require(form.target_type in TARGET_TYPES, "Please select a valid audience")
    if form.target_type == CUSTOM_GROUP:
        require(form.custom_player_ids, "Please select at least one player for custom group")
    if form.target_type == STAFF_CUSTOM:
        require(form.custom_staff_ids, "Please select at least one staff member for custom group")


class NotificationService(ClubService):
    # ─── Push notifications ───────────────────────────────

    async def create_push(self, form: PushNotificationForm) -> MutationResult:
        return await self._mutate(
            "push.create", self._create_push,
            guard=lambda form, **_: validate_push_form(form),
            invalidates=lambda v: [(keys.PUSH_NOTIFICATIONS, v["club_id"])],
            success="Push notification created successfully!",
            fallback="Failed to create notification",
            form=form,
        )

    async def _create_push(self, club_id: str, form: PushNotificationForm) -> dict:
        image_url = await self._media_url(club_id, form.image, form.image_url, "image")
        video_url = await self._media_url(club_id, form.video, form.video_url, "video")

        payload = {
            "title": form.title.strip(),
            "details": form.details,
            "imageUrl": image_url,
            "videoUrl": video_url,
            "targetType": form.target_type,
            "customPlayerIds": form.custom_player_ids if form.target_type == CUSTOM_GROUP else None,
            "customStaffIds": form.custom_staff_ids if form.target_type == STAFF_CUSTOM else None,
            "notificationType": form.notification_type,
            "scheduledAt": form.scheduled_at,
            "isActive": form.is_active,
        }
        return await self.api.notifications.create_push(
            club_id, {k: v for k, v in payload.items() if v is not None}
        )

    async def _media_url(
        self, club_id: str, upload: Optional[DocumentUpload], url: Optional[str], kind: str
    ) -> Optional[str]:
        """An attached file wins over a pasted URL."""
        if upload is None:
            return url or None
        try:
            return await upload_via_signed_url(self.api, club_id, upload, is_video=kind == "video")
        except UploadError as e:
            raise UploadError(
                f"Failed to upload {kind}: {e.message or 'Unknown error'}",
                status_code=e.status_code,
            ) from e

    async def send_push(self, notification_id: str) -> MutationResult:
        async def fn(club_id, notification_id):
            return await self.api.notifications.send_push(club_id, notification_id)

        result = await self._mutate(
            "push.send", fn,
            invalidates=lambda v: [(keys.PUSH_NOTIFICATIONS, v["club_id"])],
            fallback="Failed to send notification",
            notification_id=notification_id,
        )
        if result.ok:
            data = result.data if isinstance(result.data, dict) else {}
            recipients = data.get("recipientCount", 0)
            self.toaster.success(f"Notification sent to {recipients} recipient(s)!")
        return result

    async def delete_push(self, notification_id: str) -> MutationResult:
        async def fn(club_id, notification_id):
            return await self.api.notifications.delete_push(club_id, notification_id)

        return await self._mutate(
            "push.delete", fn,
            invalidates=lambda v: [(keys.PUSH_NOTIFICATIONS, v["club_id"])],
            success="Notification deleted successfully!",
            fallback="Failed to delete notification",
            notification_id=notification_id,
        )

    # ─── Inbox ────────────────────────────────────────────

    def _inbox_keys(self, variables: dict) -> list[tuple]:
        return [
            (keys.UNREAD_NOTIFICATION_COUNT, variables["club_id"]),
            (keys.NOTIFICATION_INBOX, variables["club_id"]),
        ]

    async def mark_read(self, notification_id: str) -> MutationResult:
        async def fn(club_id, notification_id):
            return await self.api.notifications.mark_read(club_id, notification_id)

        return await self._mutate(
            "notification.mark_read", fn,
            invalidates=self._inbox_keys,
            fallback="Failed to mark notification as read",
            notification_id=notification_id,
        )

    async def mark_all_read(self, recipient_type: str = "staff") -> MutationResult:
        async def fn(club_id, recipient_type):
            return await self.api.notifications.mark_all_read(club_id, recipient_type)

        return await self._mutate(
            "notification.mark_all_read", fn,
            invalidates=self._inbox_keys,
            success="All notifications marked as read",
            fallback="Failed to mark notifications as read",
            recipient_type=recipient_type,
        )
