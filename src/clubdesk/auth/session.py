"""Session identity — who is logged in, for which club and tenant.

Learn: the browser portal kept identity in localStorage and every API
call reached into it. Here identity lives in one explicit SessionStore
that is constructed once and passed to the API client, the dashboards
and the CLI. Nothing reads identity from ambient globals.

Lifecycle: written at login, read by every request for header
attachment, cleared at logout. The absence of a club id gates every
club-scoped fetch (see require_club_id).

Two stores:
- FileSessionStore: JSON on disk (default ~/.clubdesk/session.json)
- MemorySessionStore: process-local, used by tests and embedding apps
"""

import json
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Optional

import structlog
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from clubdesk.auth.tokens import is_token_expired

logger = structlog.get_logger()


class SessionError(Exception):
    """Raised when an operation needs identity the session does not hold."""


class Session(BaseModel):
    """Identity fields plus the per-tenant/per-role cached blobs."""

    user_id: Optional[str] = None
    email: Optional[str] = None
    role: Optional[str] = None
    club_id: Optional[str] = None
    tenant_id: Optional[str] = None
    auth_token: Optional[str] = None

    # Profile shown in headers ("user" blob)
    user: dict[str, Any] = Field(default_factory=dict)
    # tenant_id → {logoUrl, faviconUrl, ...}
    branding: dict[str, dict[str, Any]] = Field(default_factory=dict)
    # "staffuser", "greuser", ... → last logged-in user for that role
    role_blobs: dict[str, dict[str, Any]] = Field(default_factory=dict)

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    @property
    def is_authenticated(self) -> bool:
        if not self.user_id:
            return False
        if self.auth_token and is_token_expired(self.auth_token):
            return False
        return True


IDENTITY_FIELDS = ("user_id", "email", "role", "club_id", "tenant_id", "auth_token")


class SessionStore(ABC):
    """Typed accessor for the persisted session."""

    def __init__(self):
        self._session: Optional[Session] = None

    @abstractmethod
    def _read(self) -> Optional[dict]:
        """Return the raw persisted dict, or None if nothing is stored."""

    @abstractmethod
    def _write(self, data: Optional[dict]) -> None:
        """Persist the raw dict; None removes everything."""

    # ─── Load / save ─────────────────────────────────────

    @property
    def session(self) -> Session:
        if self._session is None:
            self._session = self.load()
        return self._session

    def load(self) -> Session:
        raw = self._read()
        self._session = Session.model_validate(raw) if raw else Session()
        return self._session

    def save(self) -> None:
        self._write(self.session.model_dump(by_alias=True, exclude_none=True))

    def update(self, **fields: Any) -> Session:
        """Set identity fields and persist."""
        unknown = set(fields) - set(Session.model_fields)
        if unknown:
            raise ValueError(f"Unknown session fields: {', '.join(sorted(unknown))}")
        self._session = self.session.model_copy(update=fields)
        self.save()
        return self._session

    def clear(self) -> None:
        """Logout: drop identity and role blobs, keep tenant branding."""
        branding = self.session.branding
        self._session = Session(branding=branding)
        if branding:
            self.save()
        else:
            self._write(None)
        logger.info("session.cleared")

    # ─── Accessors ───────────────────────────────────────

    @property
    def club_id(self) -> Optional[str]:
        return self.session.club_id

    def require_club_id(self, message: str = "No club selected") -> str:
        club_id = self.session.club_id
        if not club_id:
            raise SessionError(message)
        return club_id

    def identity_headers(self) -> dict[str, str]:
        """Headers every backend request carries, only for fields present."""
        s = self.session
        headers: dict[str, str] = {}
        if s.user_id:
            headers["x-user-id"] = s.user_id
        if s.club_id:
            headers["x-club-id"] = s.club_id
        if s.tenant_id:
            headers["x-tenant-id"] = s.tenant_id
        if s.auth_token:
            headers["Authorization"] = f"Bearer {s.auth_token}"
        return headers

    # ─── Cached blobs ────────────────────────────────────

    def cache_branding(self, tenant_id: str, data: dict[str, Any]) -> None:
        branding = {**self.session.branding, tenant_id: data}
        self.update(branding=branding)

    def branding_for(self, tenant_id: str) -> Optional[dict[str, Any]]:
        return self.session.branding.get(tenant_id)

    def remember_role_user(self, role: str, blob: dict[str, Any]) -> None:
        key = f"{role.lower()}user"
        self.update(role_blobs={**self.session.role_blobs, key: blob})

    def role_user(self, role: str) -> Optional[dict[str, Any]]:
        return self.session.role_blobs.get(f"{role.lower()}user")


class MemorySessionStore(SessionStore):
    def __init__(self, initial: Optional[dict] = None):
        super().__init__()
        self._data = dict(initial) if initial else None

    def _read(self) -> Optional[dict]:
        return self._data

    def _write(self, data: Optional[dict]) -> None:
        self._data = data


class FileSessionStore(SessionStore):
    """JSON file on disk; missing or corrupt files read as an empty session."""

    def __init__(self, path: Path):
        super().__init__()
        self.path = Path(path).expanduser()

    def _read(self) -> Optional[dict]:
        try:
            return json.loads(self.path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return None
        except json.JSONDecodeError:
            logger.warning("session.corrupt_file", path=str(self.path))
            return None

    def _write(self, data: Optional[dict]) -> None:
        if data is None:
            self.path.unlink(missing_ok=True)
            return
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(data, indent=2), encoding="utf-8")
