"""Query key names.

Learn: a query key is a tuple — (name, club_id, *params). Invalidation
matches by prefix, so ("tournaments",) covers every club's tournament
list while ("buyInRequests", club_id) covers one club. Centralizing the
names here keeps the realtime bindings, the services and the dashboards
agreeing on spelling.
"""

# ─── Requests / approvals ────────────────────────────────

CREDIT_REQUESTS = "creditRequests"
BUY_IN_REQUESTS = "buyInRequests"
BUY_OUT_REQUESTS = "buyOutRequests"
FIELD_UPDATE_REQUESTS = "fieldUpdateRequests"

# ─── People ──────────────────────────────────────────────

CLUB_PLAYERS = "clubPlayers"
PENDING_PLAYERS = "pendingPlayers"
SUSPENDED_PLAYERS = "suspendedPlayers"
CLUB_STAFF = "clubStaff"

# ─── HR ──────────────────────────────────────────────────

PENDING_LEAVES = "pendingLeaveApplications"
MY_APPROVED_LEAVES = "myApprovedLeaves"
LEAVE_POLICIES = "leavePolicies"

# ─── Chat + notifications ────────────────────────────────

UNREAD_CHAT_COUNTS = "unreadChatCounts"
UNREAD_NOTIFICATION_COUNT = "unreadNotificationCount"
NOTIFICATION_INBOX = "notificationInbox"
PUSH_NOTIFICATIONS = "pushNotifications"

# ─── Floor ───────────────────────────────────────────────

TABLES = "tables"
SEATED_PLAYERS = "seatedPlayers"
WAITLIST = "waitlist"
TOURNAMENTS = "tournaments"
TOURNAMENT_PLAYERS = "tournament-players"
FNB_ORDERS = "fnbOrders"

# ─── Money ───────────────────────────────────────────────

CLUB_REVENUE = "clubRevenue"
TRANSACTIONS = "transactions"
RAKE_COLLECTIONS = "rakeCollections"
RAKE_COLLECTION_STATS = "rakeCollectionStats"


def club_key(name: str, club_id: str, *params) -> tuple:
    """Build a club-scoped key: (name, club_id, *params)."""
    return (name, club_id, *params)


def matches(key: tuple, prefix: tuple) -> bool:
    return key[: len(prefix)] == prefix
