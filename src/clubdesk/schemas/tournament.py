"""Tournament schemas."""

from datetime import datetime
from typing import Optional

from clubdesk.schemas.common import ApiModel

TOURNAMENT_STATUSES = ("scheduled", "active", "paused", "completed", "stopped")


class Tournament(ApiModel):
    id: str
    name: Optional[str] = None
    status: str = "scheduled"
    buy_in: Optional[float] = None
    max_players: Optional[int] = None
    start_time: Optional[datetime] = None
    session_started_at: Optional[datetime] = None
    paused_at: Optional[datetime] = None
    total_paused_seconds: int = 0


class TournamentPlayer(ApiModel):
    id: str
    player_id: Optional[str] = None
    name: Optional[str] = None
    status: Optional[str] = None
    chips: Optional[float] = None
