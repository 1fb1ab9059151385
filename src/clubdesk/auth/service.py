"""Login / logout — turns a login response into a stored session.

Learn: the backend answers login with a user plus the roles it holds.
The role precedence is:
1. First club role → role, club and tenant (staff of a club)
2. First tenant role → role and tenant (tenant-wide admin)
3. Master admin flag → MASTER_ADMIN, no club, no tenant

After login the tenant's branding is fetched once and cached by tenant id;
a branding failure never fails the login.
"""

from typing import Optional

import structlog

from clubdesk.api import ClubApi
from clubdesk.api.client import ApiError
from clubdesk.auth.session import Session, SessionError, SessionStore
from clubdesk.cache.query_cache import QueryCache

logger = structlog.get_logger()

MASTER_ADMIN = "MASTER_ADMIN"


class AuthService:
    def __init__(self, api: ClubApi, session_store: SessionStore, cache: Optional[QueryCache] = None):
        self.api = api
        self.session_store = session_store
        self.cache = cache

    async def login(self, email: str, password: str) -> Session:
        response = await self.api.auth.login(email, password)
        if response.user is None:
            raise SessionError("Login response did not include a user")

        user = response.user
        role: Optional[str] = None
        club_id: Optional[str] = None
        tenant_id: Optional[str] = None
        if response.club_roles:
            first = response.club_roles[0]
            role, club_id, tenant_id = first.role, first.club.id, first.club.tenant_id
        elif response.tenant_roles:
            first = response.tenant_roles[0]
            role, tenant_id = first.role, first.tenant.id
        elif user.is_master_admin:
            role = MASTER_ADMIN

        # A previous user's identity must not leak into this one
        self.session_store.clear()
        if self.cache is not None:
            self.cache.clear()

        profile = user.model_dump(by_alias=True, exclude_none=True)
        self.session_store.update(
            user_id=user.id,
            email=user.email,
            role=role,
            club_id=club_id,
            tenant_id=tenant_id,
            auth_token=response.bearer,
            user=profile,
        )
        if role:
            self.session_store.remember_role_user(role, profile)
        logger.info("auth.logged_in", user_id=user.id, role=role, club_id=club_id)

        if tenant_id and self.session_store.branding_for(tenant_id) is None:
            await self._load_branding(tenant_id)
        return self.session_store.session

    async def _load_branding(self, tenant_id: str) -> None:
        try:
            branding = await self.api.clubs.get_tenant_branding(tenant_id)
        except ApiError as e:
            logger.warning("auth.branding_unavailable", tenant_id=tenant_id, error=e.message)
            return
        if branding:
            self.session_store.cache_branding(tenant_id, branding)

    def logout(self) -> None:
        user_id = self.session_store.session.user_id
        self.session_store.clear()
        if self.cache is not None:
            self.cache.clear()
        logger.info("auth.logged_out", user_id=user_id)

    def current_user(self) -> Optional[Session]:
        session = self.session_store.session
        return session if session.user_id else None
