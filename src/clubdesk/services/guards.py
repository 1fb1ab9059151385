"""Pre-submit guards — reject obviously bad input before any network call.

Learn: these are UX conveniences, not integrity guarantees. The backend
enforces the real rules; a guard just saves a round trip and gives the
operator a precise message.
"""

import re
from typing import Any, Optional

from clubdesk.config import settings

PAN_PATTERN = re.compile(r"^[A-Z]{5}[0-9]{4}[A-Z]$")
PAN_FORMAT_MESSAGE = "PAN card must be in format: ABCDE1234F (5 letters, 4 digits, 1 letter)"


class ValidationError(Exception):
    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


def require(condition: Any, message: str) -> None:
    if not condition:
        raise ValidationError(message)


def require_text(value: Optional[str], message: str) -> str:
    text = (value or "").strip()
    if not text:
        raise ValidationError(message)
    return text


def require_positive(value: Any, message: str, *, allow_zero: bool = False) -> float:
    """Coerce to float and check the sign; bools and NaN are rejected."""
    if isinstance(value, bool):
        raise ValidationError(message)
    try:
        amount = float(value)
    except (TypeError, ValueError):
        raise ValidationError(message)
    if amount != amount or amount < 0 or (amount == 0 and not allow_zero):
        raise ValidationError(message)
    return amount


def validate_pan(pan: Optional[str]) -> Optional[str]:
    """Optional PAN: blank passes, anything else must match the format."""
    if not pan or not pan.strip():
        return None
    pan = pan.strip()
    if not PAN_PATTERN.match(pan):
        raise ValidationError(PAN_FORMAT_MESSAGE)
    return pan


def validate_document(
    upload,
    label: str,
    *,
    max_bytes: Optional[int] = None,
    allowed_types: Optional[list[str]] = None,
) -> None:
    """KYC document checks: present, not too large, an allowed type."""
    max_bytes = max_bytes or settings.max_upload_bytes
    allowed_types = allowed_types or settings.allowed_document_types
    if upload is None:
        raise ValidationError(f"Please upload {label} document")
    if upload.size > max_bytes:
        raise ValidationError(f"{label} document must be less than {max_bytes // (1024 * 1024)}MB")
    if upload.content_type not in allowed_types:
        raise ValidationError(f"{label} document must be JPG, PNG, or PDF")
