"""Login response schemas."""

from typing import Optional

from pydantic import Field

from clubdesk.schemas.common import ApiModel


class LoginUser(ApiModel):
    id: str
    email: str
    display_name: Optional[str] = None
    is_master_admin: bool = False


class ClubRef(ApiModel):
    id: str
    tenant_id: Optional[str] = None
    name: Optional[str] = None


class TenantRef(ApiModel):
    id: str
    name: Optional[str] = None


class ClubRole(ApiModel):
    role: str
    club: ClubRef


class TenantRole(ApiModel):
    role: str
    tenant: TenantRef


class LoginResponse(ApiModel):
    user: Optional[LoginUser] = None
    access_token: Optional[str] = None
    token: Optional[str] = None
    club_roles: list[ClubRole] = Field(default_factory=list)
    tenant_roles: list[TenantRole] = Field(default_factory=list)

    @property
    def bearer(self) -> Optional[str]:
        return self.access_token or self.token
