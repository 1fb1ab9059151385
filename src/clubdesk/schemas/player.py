"""Player schemas."""

from datetime import datetime
from typing import Optional

from clubdesk.schemas.common import ApiModel


class Player(ApiModel):
    id: str
    name: Optional[str] = None
    email: Optional[str] = None
    phone_number: Optional[str] = None
    player_id: Optional[str] = None
    status: Optional[str] = None
    kyc_status: Optional[str] = None
    balance: Optional[float] = None
    temp_password: Optional[str] = None
    created_at: Optional[datetime] = None


class FieldUpdateRequest(ApiModel):
    id: str
    player_id: Optional[str] = None
    field_name: Optional[str] = None
    old_value: Optional[str] = None
    new_value: Optional[str] = None
    status: Optional[str] = None
    requested_at: Optional[datetime] = None
