"""Role menus and the queries behind each section.

Learn: a portal is a fixed sidebar per role; each entry is a section,
and a section declares which cached queries it needs. Sections without
declared queries are static screens (forms, settings) and fetch nothing.
"""

from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Optional

from clubdesk.cache import keys
from clubdesk.config import settings

ROLE_MENUS: dict[str, tuple[str, ...]] = {
    "MANAGER": (
        "Dashboard", "Core Management", "Player Acquisition", "Session Control",
        "Seating Management", "Reports & Analytics", "System Settings",
    ),
    "GRE": (
        "Monitoring", "Player Management", "Live Tables", "Tournaments",
        "Payroll Management", "Push Notifications", "Player Registration", "Chat", "Offers",
    ),
    "DEALER": ("Shift Timings", "Transactions", "Tips", "Tip Settings", "Chat"),
    "HR": (
        "Staff Management", "Notifications", "Salary History", "Player Management",
        "Attendance Management", "Chat",
    ),
    "CASHIER": (
        "Dashboard", "Notifications", "Payroll Management", "Bonus Management",
        "Tables & Waitlist", "Club Buy-In", "Push Notifications", "Tournaments", "Chat",
        "Financial Overrides", "Leave Management", "Rummy",
    ),
    "FNB": (
        "Menu & Inventory", "Order Management", "Reports & Analytics",
        "Supplier Management", "Kitchen Operations", "Chat",
    ),
    "SUPER_ADMIN": (
        "Dashboard", "Player Management", "Staff Management", "Credit Approvals",
        "Financial Overrides", "Waitlist & Seating Overrides", "Analytics & Reports",
        "Global Settings", "Logs & Audits", "System Control",
    ),
}
ROLE_MENUS["ADMIN"] = ROLE_MENUS["MANAGER"]


@dataclass(frozen=True)
class SectionQuery:
    """One cached query: key name, how to fetch it, optional polling."""

    name: str
    fetch: Callable[[Any, str], Awaitable[Any]]
    poll: Optional[Callable[[], float]] = None

    def key(self, club_id: str) -> tuple:
        return keys.club_key(self.name, club_id)

    def refetch_interval(self) -> Optional[float]:
        return self.poll() if self.poll else None


def _q(name, fetch, poll=None) -> SectionQuery:
    return SectionQuery(name, fetch, poll)


PLAYERS = (
    _q(keys.CLUB_PLAYERS, lambda api, c: api.players.list_players(c)),
    _q(keys.PENDING_PLAYERS, lambda api, c: api.players.pending_approval(c)),
    _q(keys.SUSPENDED_PLAYERS, lambda api, c: api.players.suspended_players(c)),
    _q(keys.FIELD_UPDATE_REQUESTS, lambda api, c: api.players.field_update_requests(c)),
)
FLOOR = (
    _q(keys.TABLES, lambda api, c: api.tables.list_tables(c)),
    _q(keys.WAITLIST, lambda api, c: api.waitlist.list_entries(c)),
)
TOURNAMENTS = (_q(keys.TOURNAMENTS, lambda api, c: api.tournaments.list_tournaments(c)),)
CHAT = (
    _q(keys.UNREAD_CHAT_COUNTS, lambda api, c: api.chat.unread_counts(c),
       poll=lambda: settings.chat_poll_seconds),
)
INBOX = (
    _q(keys.NOTIFICATION_INBOX, lambda api, c: api.notifications.inbox(c)),
    _q(keys.UNREAD_NOTIFICATION_COUNT, lambda api, c: api.notifications.unread_count(c),
       poll=lambda: settings.notification_poll_seconds),
)
PUSH = (_q(keys.PUSH_NOTIFICATIONS, lambda api, c: api.notifications.push_notifications(c)),)
MONEY = (
    _q(keys.TRANSACTIONS, lambda api, c: api.transactions.list_transactions(c)),
)
OVERVIEW = (_q(keys.CLUB_REVENUE, lambda api, c: api.clubs.get_club_revenue(c)),)

SECTION_QUERIES: dict[str, tuple[SectionQuery, ...]] = {
    "Dashboard": OVERVIEW,
    "Monitoring": OVERVIEW,
    "Player Management": PLAYERS,
    "Live Tables": FLOOR,
    "Tables & Waitlist": FLOOR,
    "Seating Management": FLOOR,
    "Waitlist & Seating Overrides": FLOOR,
    "Session Control": (
        _q(keys.TABLES, lambda api, c: api.tables.list_tables(c)),
        _q(keys.RAKE_COLLECTIONS, lambda api, c: api.rake.collections(c)),
    ),
    "Tournaments": TOURNAMENTS,
    "Chat": CHAT,
    "Notifications": INBOX,
    "Push Notifications": PUSH,
    "Transactions": MONEY,
    "Financial Overrides": MONEY,
    "Club Buy-In": (
        _q(keys.BUY_IN_REQUESTS, lambda api, c: api.requests.buy_in_requests(c)),
        _q(keys.BUY_OUT_REQUESTS, lambda api, c: api.requests.buy_out_requests(c)),
    ),
    "Credit Approvals": (
        _q(keys.CREDIT_REQUESTS, lambda api, c: api.requests.credit_requests(c),
           poll=lambda: settings.credit_poll_seconds),
    ),
    "Staff Management": (_q(keys.CLUB_STAFF, lambda api, c: api.staff.list_staff(c)),),
    "Leave Management": (
        _q(keys.PENDING_LEAVES, lambda api, c: api.leaves.pending_applications(c)),
        _q(keys.LEAVE_POLICIES, lambda api, c: api.leaves.policies(c)),
    ),
}
