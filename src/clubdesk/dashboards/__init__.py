"""Role dashboards — menus, section queries and club-scoped mounting."""

from clubdesk.dashboards.dashboard import NO_CLUB_BANNER, NO_DATA_BANNER, Dashboard, SectionView
from clubdesk.dashboards.menus import ROLE_MENUS, SECTION_QUERIES

__all__ = [
    "Dashboard",
    "NO_CLUB_BANNER",
    "NO_DATA_BANNER",
    "ROLE_MENUS",
    "SECTION_QUERIES",
    "SectionView",
]
