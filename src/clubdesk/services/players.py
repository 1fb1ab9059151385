"""Player onboarding, KYC and account actions.

Learn: creating a player is a three-step write that must look atomic:
1. Create the player record (the backend generates the temp password)
2. Upload Aadhaar, then PAN, through signed URLs and record each one
3. If any upload fails, delete the player and report the upload error

The temp password is only surfaced after step 2 succeeds. Every guard
runs before step 1, so a bad form never touches the network.
"""

from dataclasses import dataclass
from typing import Any, Optional

import structlog

from clubdesk.api.client import ApiError
from clubdesk.cache import keys
from clubdesk.schemas.player import Player
from clubdesk.services.base import ClubService
from clubdesk.services.guards import (
    require,
    require_text,
    validate_document,
    validate_pan,
)
from clubdesk.services.mutation import MutationResult
from clubdesk.services.uploads import (
    DocumentUpload,
    UploadError,
    put_to_signed_url,
    sanitize_filename,
)

logger = structlog.get_logger()

SUSPENSION_TYPES = ("temporary", "permanent")
KYC_FAILED_MESSAGE = "KYC document upload failed. Player was not created."


@dataclass
class PlayerForm:
    name: str
    email: str
    phone_number: str
    referral_code: Optional[str] = None
    pan_card: Optional[str] = None
    aadhaar_file: Optional[DocumentUpload] = None
    pan_card_file: Optional[DocumentUpload] = None

    def payload(self) -> dict[str, Any]:
        body = {
            "name": self.name.strip(),
            "email": self.email.strip(),
            "phoneNumber": self.phone_number.strip(),
            "affiliateCode": (self.referral_code or "").strip() or None,
            "panCard": (self.pan_card or "").strip() or None,
        }
        return {k: v for k, v in body.items() if v is not None}


def validate_player_form(form: PlayerForm) -> None:
    """Same order the operator sees errors in: fields, PAN, files, sizes, types."""
    require_text(form.name, "Please fill in all required fields")
    require_text(form.email, "Please fill in all required fields")
    require_text(form.phone_number, "Please fill in all required fields")
    validate_pan(form.pan_card)
    require(form.aadhaar_file is not None, "Please upload Aadhaar document")
    require(form.pan_card_file is not None, "Please upload PAN card document")
    validate_document(form.aadhaar_file, "Aadhaar")
    validate_document(form.pan_card_file, "PAN card")


class PlayerService(ClubService):
    # ─── Onboarding ───────────────────────────────────────

    async def create_player(self, form: PlayerForm) -> MutationResult:
        return await self._mutate(
            "player.create", self._create_with_kyc,
            guard=lambda form, **_: validate_player_form(form),
            invalidates=lambda v: [(keys.CLUB_PLAYERS, v["club_id"])],
            success="Player created successfully",
            fallback="Failed to create player",
            form=form,
        )

    async def _create_with_kyc(self, club_id: str, form: PlayerForm) -> Player:
        player = await self.api.players.create_player(club_id, form.payload())
        logger.info("player.created", player_id=player.id)

        try:
            await self.upload_document(club_id, player.id, form.aadhaar_file, "government_id")
            await self.upload_document(club_id, player.id, form.pan_card_file, "pan_card")
        except ApiError as e:
            try:
                await self.api.players.delete_player(club_id, player.id)
                logger.info("player.rolled_back", player_id=player.id)
            except ApiError as delete_err:
                logger.error(
                    "player.rollback_failed", player_id=player.id, error=delete_err.message,
                )
            raise UploadError(e.message or KYC_FAILED_MESSAGE, status_code=e.status_code) from e

        return player

    async def upload_document(
        self, club_id: str, player_id: str, upload: DocumentUpload, document_type: str
    ) -> str:
        """Signed-URL upload of one KYC file, then record it. Returns the file URL."""
        filename = sanitize_filename(upload.filename)
        signed = await self.api.players.document_upload_url(
            club_id, player_id, filename, document_type
        )
        file_url = await put_to_signed_url(self.api.client, signed, upload)
        await self.api.players.record_document(
            club_id,
            player_id,
            document_type=document_type,
            file_url=file_url,
            file_name=filename,
            file_size=upload.size,
            mime_type=upload.content_type,
        )
        logger.info("player.document_uploaded", player_id=player_id, document_type=document_type)
        return file_url

    # ─── Approval ─────────────────────────────────────────

    async def approve(self, player_id: str, notes: Optional[str] = None) -> MutationResult:
        async def fn(club_id, player_id, notes):
            return await self.api.players.approve_player(club_id, player_id, notes)

        return await self._mutate(
            "player.approve", fn,
            invalidates=lambda v: [
                (keys.PENDING_PLAYERS, v["club_id"]),
                (keys.CLUB_PLAYERS, v["club_id"]),
            ],
            success="Player approved successfully!",
            fallback="Failed to approve player",
            player_id=player_id, notes=notes,
        )

    async def reject(self, player_id: str, reason: str) -> MutationResult:
        async def fn(club_id, player_id, reason):
            return await self.api.players.reject_player(club_id, player_id, reason.strip())

        return await self._mutate(
            "player.reject", fn,
            guard=lambda reason=None, **_: require_text(reason, "Please enter a rejection reason"),
            invalidates=lambda v: [(keys.PENDING_PLAYERS, v["club_id"])],
            success="Player rejected",
            fallback="Failed to reject player",
            player_id=player_id, reason=reason,
        )

    # ─── Suspension ───────────────────────────────────────

    async def suspend(
        self,
        player_id: str,
        suspension_type: str,
        reason: str,
        duration_days: Optional[int] = None,
    ) -> MutationResult:
        def guard(suspension_type=None, reason=None, **_):
            require(suspension_type in SUSPENSION_TYPES, "Please select a suspension type")
            require_text(reason, "Please provide a reason for suspension")

        async def fn(club_id, player_id, suspension_type, reason, duration_days):
            payload = {"type": suspension_type, "reason": reason.strip()}
            if suspension_type == "temporary" and duration_days:
                payload["duration"] = f"{duration_days} days"
            return await self.api.players.suspend_player(club_id, player_id, payload)

        return await self._mutate(
            "player.suspend", fn,
            guard=guard,
            invalidates=lambda v: [
                (keys.CLUB_PLAYERS, v["club_id"]),
                (keys.SUSPENDED_PLAYERS, v["club_id"]),
            ],
            success="Player suspended successfully",
            fallback="Failed to suspend player",
            player_id=player_id, suspension_type=suspension_type,
            reason=reason, duration_days=duration_days,
        )

    async def unsuspend(self, player_id: str) -> MutationResult:
        async def fn(club_id, player_id):
            return await self.api.players.unsuspend_player(club_id, player_id)

        return await self._mutate(
            "player.unsuspend", fn,
            invalidates=lambda v: [
                (keys.CLUB_PLAYERS, v["club_id"]),
                (keys.SUSPENDED_PLAYERS, v["club_id"]),
            ],
            success="Player unsuspended successfully",
            fallback="Failed to unsuspend player",
            player_id=player_id,
        )

    # ─── Profile change requests ──────────────────────────

    async def approve_field_update(self, request_id: str) -> MutationResult:
        async def fn(club_id, request_id):
            return await self.api.players.approve_field_update(club_id, request_id)

        return await self._mutate(
            "field_update.approve", fn,
            invalidates=lambda v: [
                (keys.FIELD_UPDATE_REQUESTS, v["club_id"]),
                (keys.CLUB_PLAYERS, v["club_id"]),
            ],
            success="Field update approved",
            fallback="Failed to approve field update",
            request_id=request_id,
        )

    async def reject_field_update(self, request_id: str, reason: str) -> MutationResult:
        async def fn(club_id, request_id, reason):
            return await self.api.players.reject_field_update(club_id, request_id, reason.strip())

        return await self._mutate(
            "field_update.reject", fn,
            guard=lambda reason=None, **_: require_text(reason, "Please enter a rejection reason"),
            invalidates=lambda v: [(keys.FIELD_UPDATE_REQUESTS, v["club_id"])],
            success="Field update rejected",
            fallback="Failed to reject field update",
            request_id=request_id, reason=reason,
        )
