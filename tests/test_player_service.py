"""Player onboarding tests — guards, KYC upload flow, rollback.

Learn: the guard tests all assert the same thing, backend.requests == [].
A form that fails validation must never reach the network, not even for
the first step of the create flow.
"""

import json

import httpx
import pytest

from clubdesk.auth.session import SessionError
from clubdesk.cache import keys
from clubdesk.services.guards import PAN_FORMAT_MESSAGE
from clubdesk.services.players import PlayerForm, PlayerService
from clubdesk.services.uploads import DocumentUpload

from conftest import CLUB_ID

PDF = DocumentUpload("Aadhaar Front.pdf", b"%PDF-1.7 aadhaar", "application/pdf")
PNG = DocumentUpload("pan card.png", b"\x89PNG pan", "image/png")


def _form(**overrides) -> PlayerForm:
    fields = dict(
        name="Ravi Kumar",
        email="ravi@example.com",
        phone_number="9876543210",
        pan_card="ABCDE1234F",
        aadhaar_file=PDF,
        pan_card_file=PNG,
    )
    fields.update(overrides)
    return PlayerForm(**fields)


@pytest.fixture()
def service(api, session_store, cache, toaster):
    return PlayerService(api, session_store, cache, toaster)


def _kyc_routes(backend, *, fail_pan_upload: bool = False):
    base = f"/clubs/{CLUB_ID}/players"
    backend.route("POST", base, json={
        "id": "p-1", "name": "Ravi Kumar", "email": "ravi@example.com", "tempPassword": "Tmp#4821",
    })

    def upload_url(request):
        doc_type = json.loads(request.content)["documentType"]
        return httpx.Response(200, json={
            "signedUrl": f"https://storage.test/kyc/p-1/{doc_type}?token=sig",
            "publicUrl": f"https://cdn.test/kyc/p-1/{doc_type}",
        })

    backend.route("POST", f"{base}/p-1/documents/upload-url", handler=upload_url)
    backend.route("PUT", "https://storage.test/kyc/p-1/government_id", json={})
    if fail_pan_upload:
        backend.route("PUT", "https://storage.test/kyc/p-1/pan_card",
                      status=500, json={"message": "Bucket unavailable"})
    else:
        backend.route("PUT", "https://storage.test/kyc/p-1/pan_card", json={})
    backend.route("POST", f"{base}/p-1/documents", json={"id": "doc"})
    backend.route("DELETE", f"{base}/p-1", handler=lambda r: httpx.Response(204))


# ═══════════════════════════════════════════════════════════
# Guards: zero network calls
# ═══════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_missing_aadhaar_makes_no_call(service, backend, toaster):
    result = await service.create_player(_form(aadhaar_file=None))

    assert not result.ok
    assert backend.requests == []
    assert toaster.errors() == ["Please upload Aadhaar document"]


@pytest.mark.asyncio
async def test_missing_pan_file_makes_no_call(service, backend, toaster):
    result = await service.create_player(_form(pan_card_file=None))

    assert backend.requests == []
    assert toaster.errors() == ["Please upload PAN card document"]


@pytest.mark.asyncio
async def test_no_club_checked_first(api, empty_store, cache, toaster, backend):
    service = PlayerService(api, empty_store, cache, toaster)

    await service.create_player(_form(aadhaar_file=None))

    assert backend.requests == []
    assert toaster.errors() == ["Please select a club first"]


@pytest.mark.asyncio
@pytest.mark.parametrize("pan", ["abcde1234f", "ABCD1234F", "ABCDE12345", "12345ABCDE"])
async def test_bad_pan_format(service, backend, toaster, pan):
    await service.create_player(_form(pan_card=pan))

    assert backend.requests == []
    assert toaster.errors() == [PAN_FORMAT_MESSAGE]


@pytest.mark.asyncio
async def test_oversized_document(service, backend, toaster):
    big = DocumentUpload("scan.pdf", b"x" * (5 * 1024 * 1024 + 1), "application/pdf")

    await service.create_player(_form(aadhaar_file=big))

    assert backend.requests == []
    assert toaster.errors() == ["Aadhaar document must be less than 5MB"]


@pytest.mark.asyncio
async def test_wrong_document_type(service, backend, toaster):
    gif = DocumentUpload("pan.gif", b"GIF89a", "image/gif")

    await service.create_player(_form(pan_card_file=gif))

    assert backend.requests == []
    assert toaster.errors() == ["PAN card document must be JPG, PNG, or PDF"]


# ═══════════════════════════════════════════════════════════
# Create + KYC
# ═══════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_create_player_uploads_both_documents(service, backend, cache, toaster):
    async def players():
        return []

    await cache.fetch((keys.CLUB_PLAYERS, CLUB_ID), players)
    _kyc_routes(backend)

    result = await service.create_player(_form(referral_code="", pan_card=""))

    assert result.ok
    assert result.data.temp_password == "Tmp#4821"
    create = backend.calls("POST", f"/clubs/{CLUB_ID}/players")[0]
    assert backend.body(create) == {
        "name": "Ravi Kumar", "email": "ravi@example.com", "phoneNumber": "9876543210",
    }

    uploads = backend.calls("POST", f"/clubs/{CLUB_ID}/players/p-1/documents/upload-url")
    assert [backend.body(r) for r in uploads] == [
        {"filename": "aadhaar-front.pdf", "documentType": "government_id"},
        {"filename": "pan-card.png", "documentType": "pan_card"},
    ]
    puts = backend.calls("PUT")
    assert [r.content for r in puts] == [PDF.content, PNG.content]

    records = backend.calls("POST", f"/clubs/{CLUB_ID}/players/p-1/documents")
    assert backend.body(records[0])["fileUrl"] == "https://cdn.test/kyc/p-1/government_id"
    assert backend.body(records[1])["mimeType"] == "image/png"

    assert cache.entry((keys.CLUB_PLAYERS, CLUB_ID)).stale
    assert toaster.last.message == "Player created successfully"


@pytest.mark.asyncio
async def test_failed_upload_deletes_player(service, backend, toaster):
    _kyc_routes(backend, fail_pan_upload=True)

    result = await service.create_player(_form())

    assert not result.ok
    assert result.error == "Bucket unavailable"
    assert len(backend.calls("DELETE", f"/clubs/{CLUB_ID}/players/p-1")) == 1
    assert toaster.errors() == ["Bucket unavailable"]
    assert all(t.level != "success" for t in toaster.toasts)


@pytest.mark.asyncio
async def test_unexpected_create_response_is_a_failed_result(service, backend, toaster):
    backend.route("POST", f"/clubs/{CLUB_ID}/players", json={"player": {"id": "p-1"}})

    result = await service.create_player(_form())

    assert not result.ok
    assert result.error == "Unexpected response from server"
    assert toaster.errors() == ["Unexpected response from server"]
    assert backend.calls("POST", f"/clubs/{CLUB_ID}/players/p-1/documents/upload-url") == []


@pytest.mark.asyncio
async def test_club_id_raises_session_error(api, empty_store, cache, toaster):
    service = PlayerService(api, empty_store, cache, toaster)

    with pytest.raises(SessionError, match="Please select a club first"):
        service.club_id()


# ═══════════════════════════════════════════════════════════
# Account actions
# ═══════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_temporary_suspension_sends_days(service, backend, toaster):
    backend.route("POST", f"/clubs/{CLUB_ID}/players/p-1/suspend", json={})

    result = await service.suspend("p-1", "temporary", "Abusive behaviour", duration_days=7)

    assert result.ok
    assert backend.body(backend.requests[0]) == {
        "type": "temporary", "reason": "Abusive behaviour", "duration": "7 days",
    }


@pytest.mark.asyncio
async def test_permanent_suspension_has_no_duration(service, backend):
    backend.route("POST", f"/clubs/{CLUB_ID}/players/p-1/suspend", json={})

    await service.suspend("p-1", "permanent", "Fraud", duration_days=7)

    assert backend.body(backend.requests[0]) == {"type": "permanent", "reason": "Fraud"}


@pytest.mark.asyncio
async def test_suspension_requires_reason(service, backend, toaster):
    result = await service.suspend("p-1", "temporary", "")

    assert not result.ok
    assert backend.requests == []
    assert toaster.errors() == ["Please provide a reason for suspension"]


@pytest.mark.asyncio
async def test_unsuspend_invalidates_lists(service, backend, cache):
    async def rows():
        return []

    await cache.fetch((keys.SUSPENDED_PLAYERS, CLUB_ID), rows)
    backend.route("POST", f"/clubs/{CLUB_ID}/players/p-1/unsuspend", json={})

    result = await service.unsuspend("p-1")

    assert result.ok
    assert cache.entry((keys.SUSPENDED_PLAYERS, CLUB_ID)).stale


@pytest.mark.asyncio
async def test_reject_field_update_requires_reason(service, backend, toaster):
    result = await service.reject_field_update("fu-1", None)

    assert not result.ok
    assert backend.requests == []
    assert toaster.errors() == ["Please enter a rejection reason"]
