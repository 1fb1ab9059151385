"""Buy-in / buy-out / credit approval tests.

Learn: the approval contract is narrow and exact:
1. The approve endpoint receives the request id in the path and
   exactly {"amount": <amount>} as the body
2. On success the pending list for THAT club is invalidated, nothing else
3. Rejections without a reason never reach the network
"""

import pytest

from clubdesk.cache import keys
from clubdesk.services.requests import RequestService

from conftest import CLUB_ID


@pytest.fixture()
def service(api, session_store, cache, toaster):
    return RequestService(api, session_store, cache, toaster)


async def _seed_pending(cache):
    async def pending():
        return [{"id": "req-1"}]

    async def other_club():
        return []

    await cache.fetch((keys.BUY_IN_REQUESTS, CLUB_ID), pending)
    await cache.fetch((keys.BUY_IN_REQUESTS, "club-2"), other_club)
    await cache.fetch((keys.BUY_OUT_REQUESTS, CLUB_ID), other_club)


# ═══════════════════════════════════════════════════════════
# Buy-in
# ═══════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_approve_buy_in_sends_exact_amount(service, backend, cache, toaster):
    await _seed_pending(cache)
    path = f"/clubs/{CLUB_ID}/buy-in-requests/req-1/approve"
    backend.route("POST", path, json={"success": True})

    result = await service.approve_buy_in("req-1", 500)

    assert result.ok
    [sent] = backend.requests
    assert backend.body(sent) == {"amount": 500}
    assert cache.entry((keys.BUY_IN_REQUESTS, CLUB_ID)).stale
    assert not cache.entry((keys.BUY_IN_REQUESTS, "club-2")).stale
    assert not cache.entry((keys.BUY_OUT_REQUESTS, CLUB_ID)).stale
    assert toaster.last.level == "success"
    assert toaster.last.message == "Buy-in request approved and balance updated!"


@pytest.mark.asyncio
async def test_approve_buy_in_failure_toasts_server_message(service, backend, cache, toaster):
    await _seed_pending(cache)
    backend.route(
        "POST", f"/clubs/{CLUB_ID}/buy-in-requests/req-1/approve",
        status=400, json={"message": "Request already processed"},
    )

    result = await service.approve_buy_in("req-1", 500)

    assert not result.ok
    assert result.error == "Request already processed"
    assert toaster.errors() == ["Request already processed"]
    assert not cache.entry((keys.BUY_IN_REQUESTS, CLUB_ID)).stale


@pytest.mark.asyncio
async def test_approve_buy_in_rejects_negative_amount(service, backend, toaster):
    result = await service.approve_buy_in("req-1", -10)

    assert not result.ok
    assert backend.requests == []
    assert toaster.errors() == ["Amount must be a valid number"]


@pytest.mark.asyncio
async def test_reject_buy_in_requires_reason(service, backend, toaster):
    result = await service.reject_buy_in("req-1", "   ")

    assert not result.ok
    assert backend.requests == []
    assert toaster.errors() == ["Please provide a reason for rejection"]


@pytest.mark.asyncio
async def test_reject_buy_in_sends_reason(service, backend, cache):
    await _seed_pending(cache)
    backend.route("POST", f"/clubs/{CLUB_ID}/buy-in-requests/req-1/reject", json={})

    result = await service.reject_buy_in("req-1", " Duplicate request ")

    assert result.ok
    assert backend.body(backend.requests[0]) == {"reason": "Duplicate request"}
    assert cache.entry((keys.BUY_IN_REQUESTS, CLUB_ID)).stale


@pytest.mark.asyncio
async def test_no_club_selected_makes_no_call(api, empty_store, cache, toaster, backend):
    service = RequestService(api, empty_store, cache, toaster)

    result = await service.approve_buy_in("req-1", 500)

    assert not result.ok
    assert backend.requests == []
    assert toaster.errors() == ["Please select a club first"]


# ═══════════════════════════════════════════════════════════
# Buy-out + credit
# ═══════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_approve_buy_out(service, backend, cache):
    await _seed_pending(cache)
    backend.route("POST", f"/clubs/{CLUB_ID}/buy-out-requests/bo-1/approve", json={})

    result = await service.approve_buy_out("bo-1", 1200.5)

    assert result.ok
    assert backend.body(backend.requests[0]) == {"amount": 1200.5}
    assert cache.entry((keys.BUY_OUT_REQUESTS, CLUB_ID)).stale
    assert not cache.entry((keys.BUY_IN_REQUESTS, CLUB_ID)).stale


@pytest.mark.asyncio
async def test_approve_credit_records_approver(service, backend):
    backend.route("PUT", f"/clubs/{CLUB_ID}/credit-requests/cr-1/approve", json={})

    result = await service.approve_credit("cr-1")

    assert result.ok
    assert backend.body(backend.requests[0]) == {"approvedBy": "user-1"}


@pytest.mark.asyncio
async def test_reject_credit(service, backend, toaster):
    backend.route("PUT", f"/clubs/{CLUB_ID}/credit-requests/cr-1/reject", json={})

    result = await service.reject_credit("cr-1", "Limit exceeded")

    assert result.ok
    assert backend.body(backend.requests[0]) == {"reason": "Limit exceeded"}
    assert toaster.last.message == "Credit request rejected"
