"""Authenticated HTTP client for the club backend.

Learn: every request goes through ApiClient.request():
1. Identity headers (x-user-id, x-club-id, x-tenant-id, Bearer token)
   are read from the SessionStore at call time, so a login or club
   switch is picked up by the very next request.
2. Caller headers are merged on top.
3. Exactly one HTTP attempt. No retries, no backoff.
4. Non-2xx responses are normalized into a single ApiError shape.

Error message rules:
- JSON body with a non-empty "message" → that message, verbatim
- JSON body without one            → "API Error: <status>"
- non-JSON body                    → HTTP status text
- 401 with nothing parseable       → "Invalid email or password"
- 2xx body that fails its schema   → "Unexpected response from server"
  (ResourceApi.parse, so pydantic errors never leave the API layer)
"""

from typing import Any, Optional, TypeVar

import httpx
import pydantic
import structlog

from clubdesk.auth.session import SessionStore
from clubdesk.config import settings

logger = structlog.get_logger()

UNAUTHORIZED_MESSAGE = "Invalid email or password"
UNEXPECTED_RESPONSE_MESSAGE = "Unexpected response from server"

Model = TypeVar("Model", bound=pydantic.BaseModel)


class ApiError(Exception):
    """Raised for every failed backend call."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


def error_message(response: httpx.Response) -> str:
    """Pick the user-facing message for a non-2xx response."""
    status = response.status_code
    try:
        body = response.json()
    except ValueError:
        if status == 401:
            return UNAUTHORIZED_MESSAGE
        return response.reason_phrase or f"API Error: {status}"

    message = body.get("message") if isinstance(body, dict) else None
    if isinstance(message, list):
        # validation pipes return a list of messages
        message = ", ".join(str(m) for m in message)
    if message:
        return str(message)
    if status == 401:
        return UNAUTHORIZED_MESSAGE
    return f"API Error: {status}"


class ApiClient:
    """Async client bound to one SessionStore.

    Usage:
        async with ApiClient(store) as api:
            players = await api.request(f"/clubs/{club_id}/players")
    """

    def __init__(
        self,
        session_store: SessionStore,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.session_store = session_store
        self.base_url = (base_url or settings.api_base_url).rstrip("/")
        self._http = httpx.AsyncClient(
            timeout=timeout if timeout is not None else settings.request_timeout,
            transport=transport,
        )

    async def __aenter__(self) -> "ApiClient":
        return self

    async def __aexit__(self, *exc) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    def _headers(self, extra: Optional[dict[str, str]]) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        headers.update(self.session_store.identity_headers())
        if extra:
            headers.update(extra)
        return headers

    async def request(
        self,
        endpoint: str,
        method: str = "GET",
        *,
        json: Any = None,
        params: Optional[dict[str, Any]] = None,
        headers: Optional[dict[str, str]] = None,
    ) -> Any:
        """Issue one authenticated request and return the parsed body.

        Returns None for 204 / empty responses. Raises ApiError otherwise.
        """
        url = f"{self.base_url}{endpoint}"
        if params:
            params = {k: v for k, v in params.items() if v is not None}

        try:
            response = await self._http.request(
                method,
                url,
                json=json,
                params=params or None,
                headers=self._headers(headers),
            )
        except httpx.TransportError as e:
            logger.error("api.transport_failed", method=method, endpoint=endpoint, error=str(e))
            raise ApiError(str(e) or "Network error") from e

        if response.is_error:
            message = error_message(response)
            logger.error(
                "api.request_failed",
                method=method,
                endpoint=endpoint,
                status=response.status_code,
                error=message,
            )
            raise ApiError(message, status_code=response.status_code)

        if response.status_code == 204 or not response.content:
            return None
        return response.json()

    # ─── Convenience verbs ────────────────────────────────

    async def get(self, endpoint: str, **params: Any) -> Any:
        return await self.request(endpoint, params=params or None)

    async def post(self, endpoint: str, body: Any = None) -> Any:
        return await self.request(endpoint, "POST", json=body)

    async def put(self, endpoint: str, body: Any = None) -> Any:
        return await self.request(endpoint, "PUT", json=body)

    async def patch(self, endpoint: str, body: Any = None) -> Any:
        return await self.request(endpoint, "PATCH", json=body)

    async def delete(self, endpoint: str) -> Any:
        return await self.request(endpoint, "DELETE")

    # ─── Signed-URL upload ────────────────────────────────

    async def upload_to_signed_url(
        self, signed_url: str, content: bytes, content_type: str
    ) -> None:
        """PUT raw bytes to a pre-signed storage URL.

        No identity headers: the signature in the URL is the credential.
        """
        try:
            response = await self._http.put(
                signed_url,
                content=content,
                headers={"Content-Type": content_type},
            )
        except httpx.TransportError as e:
            raise ApiError(str(e) or "Network error") from e
        if response.is_error:
            message = error_message(response)
            logger.error("api.upload_failed", status=response.status_code, error=message)
            raise ApiError(message, status_code=response.status_code)


def normalize_list(payload: Any, *keys: str) -> list:
    """Unwrap list responses that arrive either bare or wrapped.

    The backend returns some collections as `[...]` and others as
    `{"players": [...], "total": n}` or `{"data": [...]}`. Call sites
    get a plain list either way.
    """
    if payload is None:
        return []
    if isinstance(payload, list):
        return payload
    if isinstance(payload, dict):
        for key in (*keys, "data", "items", "results"):
            value = payload.get(key)
            if isinstance(value, list):
                return value
    return []


class ResourceApi:
    """Base for the per-resource endpoint groups (players, tables, ...)."""

    def __init__(self, client: ApiClient):
        self.client = client

    # ─── Response parsing ─────────────────────────────────

    def parse(self, model: type[Model], data: Any) -> Model:
        """Validate one response body; a schema mismatch is an ApiError."""
        try:
            return model.model_validate(data)
        except pydantic.ValidationError as e:
            logger.error(
                "api.unexpected_response", model=model.__name__, errors=e.error_count(),
            )
            raise ApiError(UNEXPECTED_RESPONSE_MESSAGE) from e

    def parse_list(self, model: type[Model], data: Any, *keys: str) -> list[Model]:
        return [self.parse(model, item) for item in normalize_list(data, *keys)]
