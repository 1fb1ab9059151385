"""Shared base model and small value schemas."""

from typing import Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class ApiModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


class SignedUpload(ApiModel):
    """Response of every *-upload-url endpoint."""
    signed_url: str
    public_url: Optional[str] = None
    path: Optional[str] = None


class UnreadCount(ApiModel):
    count: int = 0
