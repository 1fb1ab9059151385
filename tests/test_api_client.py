"""API client tests — identity headers, error normalization, list unwrapping.

Learn: every backend failure reaches the operator as one string, so the
message-picking rules are tested exhaustively here:
1. JSON body with "message" → that message, verbatim
2. Non-JSON body → HTTP status text
3. JSON body without a message → "API Error: <status>"
4. 401 with nothing parseable → "Invalid email or password"
5. 2xx body that fails its schema → "Unexpected response from server"
"""

import httpx
import pytest

from clubdesk.api import ApiClient, ApiError, normalize_list
from clubdesk.auth.session import MemorySessionStore

from conftest import BACKEND_URL, CLUB_ID, TENANT_ID, USER_ID


# ═══════════════════════════════════════════════════════════
# Identity headers
# ═══════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_request_carries_identity_headers(api_client, backend):
    backend.route("GET", f"/clubs/{CLUB_ID}/players", json=[])

    await api_client.get(f"/clubs/{CLUB_ID}/players")

    sent = backend.requests[0]
    assert sent.headers["x-user-id"] == USER_ID
    assert sent.headers["x-club-id"] == CLUB_ID
    assert sent.headers["x-tenant-id"] == TENANT_ID
    assert sent.headers["Authorization"] == "Bearer token-abc"
    assert sent.headers["Content-Type"] == "application/json"


@pytest.mark.asyncio
async def test_missing_identity_fields_are_not_sent(backend):
    store = MemorySessionStore({"userId": "u-9"})
    async with ApiClient(store, base_url=BACKEND_URL, transport=httpx.MockTransport(backend)) as c:
        backend.route("GET", "/me", json={})
        await c.get("/me")

    sent = backend.requests[0]
    assert sent.headers["x-user-id"] == "u-9"
    assert "x-club-id" not in sent.headers
    assert "x-tenant-id" not in sent.headers
    assert "Authorization" not in sent.headers


@pytest.mark.asyncio
async def test_caller_headers_override_defaults(api_client, backend):
    backend.route("GET", "/ping", json={"ok": True})

    await api_client.request("/ping", headers={"x-club-id": "other-club"})

    assert backend.requests[0].headers["x-club-id"] == "other-club"


@pytest.mark.asyncio
async def test_identity_is_read_per_request(api_client, backend, session_store):
    """A club switch shows up on the very next request."""
    backend.route("GET", "/ping", json={})

    await api_client.get("/ping")
    session_store.update(club_id="club-2")
    await api_client.get("/ping")

    assert [r.headers["x-club-id"] for r in backend.requests] == [CLUB_ID, "club-2"]


# ═══════════════════════════════════════════════════════════
# Responses
# ═══════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_json_body_is_returned(api_client, backend):
    backend.route("POST", "/things", json={"id": "t-1"})

    assert await api_client.post("/things", {"name": "x"}) == {"id": "t-1"}
    assert backend.body(backend.requests[0]) == {"name": "x"}


@pytest.mark.asyncio
async def test_no_content_returns_none(api_client, backend):
    backend.route("DELETE", "/things/1", handler=lambda r: httpx.Response(204))

    assert await api_client.delete("/things/1") is None


@pytest.mark.asyncio
async def test_none_params_are_dropped(api_client, backend):
    backend.route("GET", "/search", json=[])

    await api_client.get("/search", q="ace", status=None)

    assert dict(backend.requests[0].url.params) == {"q": "ace"}


@pytest.mark.asyncio
async def test_exactly_one_attempt_on_failure(api_client, backend):
    backend.route("GET", "/flaky", status=503, json={"message": "down"})

    with pytest.raises(ApiError):
        await api_client.get("/flaky")

    assert len(backend.requests) == 1


# ═══════════════════════════════════════════════════════════
# Error normalization
# ═══════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_error_uses_server_message(api_client, backend):
    backend.route("POST", "/x", status=400, json={"message": "Insufficient balance"})

    with pytest.raises(ApiError) as exc:
        await api_client.post("/x")

    assert exc.value.message == "Insufficient balance"
    assert exc.value.status_code == 400


@pytest.mark.asyncio
async def test_error_message_list_is_joined(api_client, backend):
    backend.route("POST", "/x", status=422, json={"message": ["email must be valid", "name is required"]})

    with pytest.raises(ApiError) as exc:
        await api_client.post("/x")

    assert exc.value.message == "email must be valid, name is required"


@pytest.mark.asyncio
async def test_non_json_error_uses_status_text(api_client, backend):
    backend.route("GET", "/x", status=502, text="<html>bad gateway</html>")

    with pytest.raises(ApiError) as exc:
        await api_client.get("/x")

    assert exc.value.message == "Bad Gateway"


@pytest.mark.asyncio
async def test_json_error_without_message(api_client, backend):
    backend.route("GET", "/x", status=500, json={"error": "boom"})

    with pytest.raises(ApiError) as exc:
        await api_client.get("/x")

    assert exc.value.message == "API Error: 500"


@pytest.mark.asyncio
async def test_unauthorized_without_body_defaults(api_client, backend):
    backend.route("POST", "/auth/login", status=401, text="")

    with pytest.raises(ApiError) as exc:
        await api_client.post("/auth/login", {"email": "a", "password": "b"})

    assert exc.value.message == "Invalid email or password"
    assert exc.value.status_code == 401


@pytest.mark.asyncio
async def test_unauthorized_keeps_server_message(api_client, backend):
    backend.route("POST", "/auth/login", status=401, json={"message": "Account suspended"})

    with pytest.raises(ApiError) as exc:
        await api_client.post("/auth/login")

    assert exc.value.message == "Account suspended"


@pytest.mark.asyncio
async def test_transport_failure_becomes_api_error(session_store):
    def refuse(request):
        raise httpx.ConnectError("connection refused", request=request)

    async with ApiClient(session_store, base_url=BACKEND_URL, transport=httpx.MockTransport(refuse)) as c:
        with pytest.raises(ApiError) as exc:
            await c.get("/anything")

    assert exc.value.status_code is None
    assert "connection refused" in exc.value.message


# ═══════════════════════════════════════════════════════════
# Signed uploads + list unwrapping
# ═══════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_signed_upload_sends_no_identity(api_client, backend):
    url = "https://storage.test/kyc/doc.pdf"
    backend.route("PUT", url, json={})

    await api_client.upload_to_signed_url(f"{url}?token=sig", b"%PDF", "application/pdf")

    sent = backend.requests[0]
    assert sent.content == b"%PDF"
    assert sent.headers["Content-Type"] == "application/pdf"
    assert "x-user-id" not in sent.headers
    assert "Authorization" not in sent.headers


def test_normalize_list_shapes():
    assert normalize_list([1, 2]) == [1, 2]
    assert normalize_list({"players": [1]}, "players") == [1]
    assert normalize_list({"data": [2]}) == [2]
    assert normalize_list({"total": 0}) == []
    assert normalize_list(None) == []


# ═══════════════════════════════════════════════════════════
# Response schemas
# ═══════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_schema_mismatch_becomes_api_error(api, backend):
    backend.route("GET", f"/clubs/{CLUB_ID}/tournaments/t-1", json={"name": "no id"})

    with pytest.raises(ApiError) as exc:
        await api.tournaments.get_tournament(CLUB_ID, "t-1")

    assert exc.value.message == "Unexpected response from server"
    assert exc.value.status_code is None


@pytest.mark.asyncio
async def test_one_bad_row_fails_the_whole_list(api, backend):
    backend.route("GET", f"/clubs/{CLUB_ID}/buy-out-requests", json={"requests": [
        {"id": "r-1", "requestedAmount": 10},
        {"requestedAmount": "not a number"},
    ]})

    with pytest.raises(ApiError, match="Unexpected response from server"):
        await api.requests.buy_out_requests(CLUB_ID)
