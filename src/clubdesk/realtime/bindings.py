"""Which table changes invalidate which cached queries.

Learn: this is the whole realtime policy as data. One ChannelSpec per
logical resource; each TableWatch names a table, the event kind, whether
the server-side filter `club_id=eq.<club>` applies, and the query keys
to mark stale. CLUB inside a key template is replaced by the mounted
club id, so ("buyInRequests", CLUB) becomes ("buyInRequests", "club-7").

Tables without a club_id column (chat_messages, push_notifications,
notification_read_status, tournament_players) are watched unfiltered.
"""

from dataclasses import dataclass, field

from clubdesk.cache import keys

CLUB = object()  # placeholder resolved at mount time

ALL = "*"
INSERT = "INSERT"
UPDATE = "UPDATE"
DELETE = "DELETE"


@dataclass(frozen=True)
class TableWatch:
    table: str
    invalidates: tuple[tuple, ...]
    event: str = ALL
    club_filtered: bool = True
    schema: str = "public"

    def resolve_keys(self, club_id: str) -> list[tuple]:
        return [
            tuple(club_id if part is CLUB else part for part in template)
            for template in self.invalidates
        ]

    def filter_for(self, club_id: str):
        return f"club_id=eq.{club_id}" if self.club_filtered else None


@dataclass(frozen=True)
class ChannelSpec:
    name: str
    watches: tuple[TableWatch, ...] = field(default_factory=tuple)

    def channel_name(self, club_id: str) -> str:
        return f"admin-{self.name}-{club_id}"


ADMIN_CHANNELS: tuple[ChannelSpec, ...] = (
    ChannelSpec("credits", (
        TableWatch("credit_requests", ((keys.CREDIT_REQUESTS, CLUB),)),
    )),
    ChannelSpec("leaves", (
        TableWatch("leave_applications", (
            (keys.PENDING_LEAVES, CLUB),
            (keys.MY_APPROVED_LEAVES, CLUB),
            (keys.LEAVE_POLICIES, CLUB),
        )),
    )),
    ChannelSpec("chats", (
        TableWatch("chat_messages", ((keys.UNREAD_CHAT_COUNTS, CLUB),), club_filtered=False),
        TableWatch("chat_sessions", ((keys.UNREAD_CHAT_COUNTS, CLUB),)),
    )),
    ChannelSpec("notifs", (
        TableWatch("push_notifications", (
            (keys.UNREAD_NOTIFICATION_COUNT, CLUB),
            (keys.NOTIFICATION_INBOX,),
        ), club_filtered=False),
        TableWatch("notification_read_status", (
            (keys.UNREAD_NOTIFICATION_COUNT, CLUB),
        ), club_filtered=False),
    )),
    ChannelSpec("profile-requests", (
        TableWatch("player_profile_change_requests", ((keys.FIELD_UPDATE_REQUESTS, CLUB),)),
    )),
    ChannelSpec("tournaments", (
        TableWatch("tournaments", ((keys.TOURNAMENTS,), (keys.TOURNAMENT_PLAYERS,))),
        TableWatch("tournament_players", ((keys.TOURNAMENT_PLAYERS,),), club_filtered=False),
    )),
    ChannelSpec("txns", (
        TableWatch(
            "financial_transactions",
            ((keys.CLUB_REVENUE, CLUB), (keys.TRANSACTIONS,)),
            event=INSERT,
        ),
    )),
    ChannelSpec("buyins", (
        TableWatch("buyin_requests", ((keys.BUY_IN_REQUESTS, CLUB),)),
    )),
    ChannelSpec("buyouts", (
        TableWatch("buyout_requests", ((keys.BUY_OUT_REQUESTS, CLUB),)),
    )),
    ChannelSpec("fnb", (
        TableWatch("fnb_orders", ((keys.FNB_ORDERS,),)),
    )),
    ChannelSpec("players", (
        TableWatch("players", ((keys.CLUB_PLAYERS, CLUB),)),
    )),
    ChannelSpec("staff", (
        TableWatch("staff", ((keys.CLUB_STAFF, CLUB),)),
    )),
    ChannelSpec("tables", (
        TableWatch("tables", ((keys.TABLES,), (keys.SEATED_PLAYERS,))),
        TableWatch("waitlist_entries", ((keys.WAITLIST,), (keys.SEATED_PLAYERS,))),
    )),
)
