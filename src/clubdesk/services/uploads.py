"""Two-step signed-URL uploads (KYC documents, notification media).

Learn: files never pass through the backend. The flow is:
1. Ask the backend for an upload URL scoped to a sanitized filename
2. PUT the bytes straight to that URL
3. Use the returned public URL (or storage path) in the follow-up call
"""

import mimetypes
import re
import unicodedata
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from clubdesk.api.client import ApiClient, ApiError
from clubdesk.schemas.common import SignedUpload


class UploadError(ApiError):
    """Raised when any step of an upload fails."""


@dataclass(frozen=True)
class DocumentUpload:
    filename: str
    content: bytes
    content_type: str

    @property
    def size(self) -> int:
        return len(self.content)

    @property
    def is_video(self) -> bool:
        return self.content_type.startswith("video/")

    @classmethod
    def from_path(cls, path: Path, content_type: Optional[str] = None) -> "DocumentUpload":
        path = Path(path)
        guessed, _ = mimetypes.guess_type(path.name)
        return cls(
            filename=path.name,
            content=path.read_bytes(),
            content_type=content_type or guessed or "application/octet-stream",
        )


def sanitize_filename(filename: str) -> str:
    """Storage-safe filename: ASCII word chars and hyphens, lowercase.

    "Résumé Final (1).PDF" → "resume-final-1.PDF". The extension is kept as is.
    """
    if not filename:
        return filename
    dot = filename.rfind(".")
    name, ext = (filename[:dot], filename[dot:]) if dot != -1 else (filename, "")

    name = unicodedata.normalize("NFD", name)
    name = "".join(ch for ch in name if not unicodedata.combining(ch))
    name = re.sub(r"[^\w\s-]", "", name, flags=re.ASCII)
    name = re.sub(r"\s+", "-", name)
    name = re.sub(r"-+", "-", name)
    name = name.strip("-").lower()
    return name + ext


async def put_to_signed_url(
    client: ApiClient, signed: SignedUpload, upload: DocumentUpload
) -> str:
    """PUT the file and return the URL callers should store."""
    try:
        await client.upload_to_signed_url(signed.signed_url, upload.content, upload.content_type)
    except ApiError as e:
        raise UploadError(e.message, status_code=e.status_code) from e
    return signed.public_url or signed.path or signed.signed_url.split("?", 1)[0]


async def upload_via_signed_url(api, club_id: str, upload: DocumentUpload, is_video: bool) -> str:
    """Notification media: sanitized name → upload URL → PUT. Returns the public URL."""
    filename = sanitize_filename(upload.filename)
    try:
        signed = await api.notifications.media_upload_url(club_id, filename, is_video)
    except ApiError as e:
        raise UploadError(e.message, status_code=e.status_code) from e
    return await put_to_signed_url(api.client, signed, upload)
