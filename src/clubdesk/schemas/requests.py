"""Money-movement request schemas — buy-in, buy-out, credit.

Learn: amounts arrive as numbers or numeric strings depending on the
endpoint; pydantic's float coercion normalizes both.
"""

from datetime import datetime
from typing import Optional

from clubdesk.schemas.common import ApiModel


class BuyInRequest(ApiModel):
    id: str
    player_id: Optional[str] = None
    player_name: Optional[str] = None
    table_number: Optional[int] = None
    seat_number: Optional[int] = None
    requested_amount: float = 0
    status: str = "pending"
    created_at: Optional[datetime] = None


class BuyOutRequest(ApiModel):
    id: str
    player_id: Optional[str] = None
    player_name: Optional[str] = None
    table_number: Optional[int] = None
    requested_amount: float = 0
    current_table_balance: Optional[float] = None
    status: str = "pending"
    created_at: Optional[datetime] = None


class CreditRequest(ApiModel):
    id: str
    player_id: Optional[str] = None
    player_name: Optional[str] = None
    amount: float = 0
    status: str = "pending"
    visible_to_player: Optional[bool] = None
    created_at: Optional[datetime] = None
