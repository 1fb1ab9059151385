"""Backend API surface.

Learn: ApiClient (client.py) owns the HTTP call and the error shape.
Each module here is a thin endpoint group over it. ClubApi bundles
every group so callers hold one object:

    async with ApiClient(store) as client:
        api = ClubApi(client)
        requests = await api.requests.buy_in_requests(club_id)
"""

from clubdesk.api.auth import AuthApi
from clubdesk.api.chat import ChatApi
from clubdesk.api.client import ApiClient, ApiError, normalize_list
from clubdesk.api.clubs import ClubsApi
from clubdesk.api.leaves import LeavesApi
from clubdesk.api.notifications import NotificationsApi
from clubdesk.api.players import PlayersApi
from clubdesk.api.requests import RequestsApi
from clubdesk.api.staff import StaffApi
from clubdesk.api.tables import TablesApi, WaitlistApi
from clubdesk.api.tournaments import TournamentsApi
from clubdesk.api.transactions import RakeApi, TransactionsApi

__all__ = ["ApiClient", "ApiError", "ClubApi", "normalize_list"]


class ClubApi:
    """Every endpoint group, sharing one ApiClient."""

    def __init__(self, client: ApiClient):
        self.client = client
        self.auth = AuthApi(client)
        self.clubs = ClubsApi(client)
        self.players = PlayersApi(client)
        self.tables = TablesApi(client)
        self.waitlist = WaitlistApi(client)
        self.requests = RequestsApi(client)
        self.tournaments = TournamentsApi(client)
        self.staff = StaffApi(client)
        self.leaves = LeavesApi(client)
        self.chat = ChatApi(client)
        self.notifications = NotificationsApi(client)
        self.transactions = TransactionsApi(client)
        self.rake = RakeApi(client)
