from __future__ import annotations

import asyncio
import logging
from datetime import date
from typing import Any

import pytest

from briteverify import client as client_module
from briteverify.client import BriteVerifyClient
from briteverify.errors import (
    BulkListNotFound,
    InvalidApiKey,
    MismatchedVerificationResponse,
    MissingApiKey,
    MissingPageCount,
    UnusableRequest,
    UnusableResponse,
)
from briteverify.types import (
    BatchState,
    BulkEmailVerificationArray,
    EmailVerificationArray,
    FullVerificationResponse,
)

V1 = "https://bpi.briteverify.com/api/v1"
V3 = "https://bulk-api.briteverify.com/api/v3"

EMAIL = {
    "address": "sales@validity.com",
    "account": "sales",
    "domain": "validity.com",
    "status": "valid",
    "connected": None,
    "disposable": False,
    "role_address": True,
}
PHONE = {
    "number": "18009618205",
    "service_type": "land",
    "phone_location": None,
    "status": "valid",
    "errors": [],
}
ADDRESS = {
    "address1": "4010 W Boy Scout Blvd Ste 1100",
    "address2": " ",
    "city": "Tampa",
    "state": "FL",
    "zip": "33607-5796",
    "status": "valid",
    "errors": [],
    "corrected": True,
}
LIST_ID = "1433fe1c-cc4b-48fb-8989-d3ec83502c54"
LIST_STATE = {
    "id": LIST_ID,
    "state": "complete",
    "total_verified": 4,
    "total_verified_emails": 4,
    "total_verified_phones": 0,
    "page_count": 2,
    "progress": 100,
    "created_at": "07-18-2022 12:42 pm",
    "expiration_date": None,
    "results_path": f"{V3}/lists/{LIST_ID}/export/1",
}


class _FakeResponse:
    def __init__(
        self,
        *,
        status_code: int,
        payload: Any = None,
        headers: dict[str, str] | None = None,
    ) -> None:
        self.status_code = status_code
        self._payload = payload if payload is not None else {}
        self.headers = headers or {}
        self.text = "{}"

    def json(self) -> Any:
        return self._payload


class _Recorder:
    """Replays queued responses per (method, url) and records every call."""

    def __init__(self) -> None:
        self.calls: list[dict[str, Any]] = []
        self._queued: dict[tuple[str, str], list[_FakeResponse | BaseException]] = {}

    def queue(self, method: str, url: str, *responses: _FakeResponse | BaseException) -> None:
        self._queued.setdefault((method, url), []).extend(responses)

    async def request(self, method: str, url: str, params=None, json=None):  # noqa: ANN001
        self.calls.append({"method": method, "url": url, "params": params, "json": json})
        queued = self._queued[(method, url)].pop(0)
        if isinstance(queued, BaseException):
            raise queued
        return queued


@pytest.fixture
def recorder(monkeypatch: pytest.MonkeyPatch) -> _Recorder:
    recorder = _Recorder()

    async def _mock_request(self, method: str, url: str, params=None, json=None):  # noqa: ANN001
        _ = self
        return await recorder.request(method, url, params=params, json=json)

    monkeypatch.setattr(client_module.httpx.AsyncClient, "request", _mock_request)
    return recorder


@pytest.fixture
def sleeps(monkeypatch: pytest.MonkeyPatch) -> list[float]:
    delays: list[float] = []

    async def _mock_sleep(delay: float) -> None:
        delays.append(delay)

    monkeypatch.setattr(client_module.asyncio, "sleep", _mock_sleep)
    return delays


def test_missing_api_key_is_rejected() -> None:
    with pytest.raises(MissingApiKey):
        BriteVerifyClient("")
    with pytest.raises(MissingApiKey):
        BriteVerifyClient(None)


@pytest.mark.asyncio
async def test_verify_email_posts_email_only_request(recorder: _Recorder) -> None:
    recorder.queue(
        "POST",
        f"{V1}/fullverify",
        _FakeResponse(status_code=200, payload={"email": EMAIL, "duration": 0.0356}),
    )

    async with BriteVerifyClient("key") as client:
        result = await client.verify_email("sales@validity.com")

    assert isinstance(result, EmailVerificationArray)
    assert result.role_address is True
    assert recorder.calls == [
        {
            "method": "POST",
            "url": f"{V1}/fullverify",
            "params": None,
            "json": {"email": "sales@validity.com"},
        }
    ]


@pytest.mark.asyncio
async def test_verify_email_rejects_mismatched_reply(recorder: _Recorder) -> None:
    recorder.queue(
        "POST",
        f"{V1}/fullverify",
        _FakeResponse(status_code=200, payload={"phone": PHONE, "duration": 0.1}),
    )

    async with BriteVerifyClient("key") as client:
        with pytest.raises(MismatchedVerificationResponse):
            await client.verify_email("sales@validity.com")


@pytest.mark.asyncio
async def test_verify_contact_returns_full_response(recorder: _Recorder) -> None:
    recorder.queue(
        "POST",
        f"{V1}/fullverify",
        _FakeResponse(
            status_code=200,
            payload={"email": EMAIL, "phone": PHONE, "address": ADDRESS, "duration": 2.38},
        ),
    )

    async with BriteVerifyClient("key") as client:
        response = await client.verify_contact(
            "sales@validity.com", "18009618205", "4010 Boy Scout Boulevard", None, "Tampa", "FL", 33607
        )

    assert isinstance(response, FullVerificationResponse)
    assert recorder.calls[0]["json"] == {
        "email": "sales@validity.com",
        "phone": "18009618205",
        "address": {"address1": "4010 Boy Scout Boulevard", "city": "Tampa", "state": "FL", "zip": "33607"},
    }


@pytest.mark.asyncio
async def test_verify_street_address_requires_complete_address(recorder: _Recorder) -> None:
    async with BriteVerifyClient("key") as client:
        with pytest.raises(UnusableRequest):
            await client.verify_street_address("", None, "Tampa", "FL", "33607")

    assert recorder.calls == []


@pytest.mark.asyncio
async def test_unauthorized_raises_invalid_api_key(recorder: _Recorder) -> None:
    recorder.queue("GET", f"{V3}/accounts/credits", _FakeResponse(status_code=401))

    async with BriteVerifyClient("bad-key") as client:
        with pytest.raises(InvalidApiKey):
            await client.get_account_balance()


@pytest.mark.asyncio
async def test_account_balance_helpers(recorder: _Recorder) -> None:
    balance = {"credits": 2165, "credits_in_reserve": 500, "recorded_on": "2021-07-27T21:10:10.000+0000"}
    recorder.queue(
        "GET",
        f"{V3}/accounts/credits",
        _FakeResponse(status_code=200, payload=balance),
        _FakeResponse(status_code=200, payload=balance),
    )

    async with BriteVerifyClient("key") as client:
        assert await client.current_credits() == 2165
        assert await client.current_credits_in_reserve() == 500


@pytest.mark.asyncio
async def test_retry_on_429_respects_retry_after_header(
    recorder: _Recorder, sleeps: list[float], caplog: pytest.LogCaptureFixture
) -> None:
    recorder.queue(
        "GET",
        f"{V3}/lists",
        _FakeResponse(status_code=429, headers={"retry-after": "2"}),
        _FakeResponse(status_code=429),
        _FakeResponse(status_code=200, payload={"lists": []}),
    )

    with caplog.at_level(logging.WARNING, logger="briteverify.client"):
        async with BriteVerifyClient("key") as client:
            response = await client.get_lists()

    assert response.lists == []
    assert len(recorder.calls) == 3
    assert sleeps == [3, 61]
    assert "rate limited" in caplog.text


@pytest.mark.asyncio
async def test_429_without_retry_is_unusable(recorder: _Recorder, sleeps: list[float]) -> None:
    recorder.queue("GET", f"{V3}/lists", _FakeResponse(status_code=429))

    async with BriteVerifyClient("key", retry_enabled=False) as client:
        with pytest.raises(UnusableResponse) as exc_info:
            await client.get_lists()

    assert "429" in str(exc_info.value)
    assert sleeps == []


@pytest.mark.asyncio
async def test_filtered_lists_build_query_and_account_path(recorder: _Recorder) -> None:
    recorder.queue(
        "GET",
        f"{V3}/accounts/12345/lists",
        _FakeResponse(status_code=200, payload={"message": "Page 1 of 3", "lists": [LIST_STATE]}),
    )

    async with BriteVerifyClient("key") as client:
        response = await client.get_filtered_lists(
            page=1, date=date(2022, 7, 18), state="complete", ext_id=12345
        )

    assert response.total_pages() == 3
    assert response.ids() == [LIST_ID]
    assert recorder.calls[0]["params"] == {"page": "1", "date": "2022-07-18", "state": "complete"}


@pytest.mark.asyncio
async def test_unknown_state_filter_is_declined_locally(
    recorder: _Recorder, caplog: pytest.LogCaptureFixture
) -> None:
    with caplog.at_level(logging.WARNING, logger="briteverify.client"):
        async with BriteVerifyClient("key") as client:
            response = await client.get_lists_by_state("not-a-real-state")

    assert recorder.calls == []
    assert response.lists == []
    assert response.message.startswith("Declined")


@pytest.mark.asyncio
async def test_create_list_posts_contacts_and_directive(recorder: _Recorder) -> None:
    recorder.queue(
        "POST",
        f"{V3}/lists",
        _FakeResponse(
            status_code=201,
            payload={"status": "success", "message": "created new list", "list": {**LIST_STATE, "state": "open"}},
        ),
    )

    async with BriteVerifyClient("key") as client:
        response = await client.create_list(["john.doe@email.com", "5555555555"], auto_start=True)

    assert response.list.state is BatchState.OPEN
    assert recorder.calls[0]["json"] == {
        "contacts": [{"email": "john.doe@email.com"}, {"phone": "5555555555"}],
        "directive": "start",
    }


@pytest.mark.asyncio
async def test_create_list_without_contacts_never_starts(recorder: _Recorder) -> None:
    recorder.queue(
        "POST",
        f"{V3}/lists",
        _FakeResponse(status_code=200, payload={"status": "success", "list": LIST_STATE}),
    )

    async with BriteVerifyClient("key") as client:
        await client.create_list(None, auto_start=True)

    assert recorder.calls[0]["json"] == {}


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("method_name", "directive"),
    [("queue_list_for_processing", "start"), ("terminate_list_by_id", "terminate")],
)
async def test_list_directives(recorder: _Recorder, method_name: str, directive: str) -> None:
    recorder.queue(
        "POST",
        f"{V3}/lists/{LIST_ID}",
        _FakeResponse(status_code=200, payload={"status": "success", "list": LIST_STATE}),
    )

    async with BriteVerifyClient("key") as client:
        await getattr(client, method_name)(LIST_ID)

    assert recorder.calls[0]["json"] == {"directive": directive}


@pytest.mark.asyncio
async def test_update_missing_list_raises_not_found(recorder: _Recorder) -> None:
    recorder.queue(
        "POST",
        f"{V3}/lists/{LIST_ID}",
        _FakeResponse(status_code=400, payload={"code": "invalid_state", "message": "nope"}),
    )

    async with BriteVerifyClient("key") as client:
        with pytest.raises(BulkListNotFound) as exc_info:
            await client.update_list(LIST_ID, ["a@b.com"])

    assert exc_info.value.error.list_id == LIST_ID
    assert exc_info.value.error.status is BatchState.INVALID_STATE


@pytest.mark.asyncio
async def test_get_list_by_external_id(recorder: _Recorder) -> None:
    recorder.queue(
        "GET",
        f"{V3}/accounts/12345/lists/{LIST_ID}",
        _FakeResponse(status_code=200, payload=LIST_STATE),
    )

    async with BriteVerifyClient("key") as client:
        state = await client.get_list_by_external_id(LIST_ID, 12345)

    assert state.id == LIST_ID
    assert state.page_count == 2


@pytest.mark.asyncio
async def test_missing_list_lookup_and_delete(recorder: _Recorder) -> None:
    not_found = {"status": "not_found", "message": "list not found"}
    recorder.queue("GET", f"{V3}/lists/{LIST_ID}", _FakeResponse(status_code=404, payload=not_found))
    recorder.queue("DELETE", f"{V3}/lists/{LIST_ID}", _FakeResponse(status_code=404, payload=not_found))

    async with BriteVerifyClient("key") as client:
        with pytest.raises(BulkListNotFound) as lookup_error:
            await client.get_list_by_id(LIST_ID)
        with pytest.raises(BulkListNotFound):
            await client.delete_list_by_id(LIST_ID)

    assert lookup_error.value.error.status is BatchState.NOT_FOUND
    assert LIST_ID in str(lookup_error.value)


@pytest.mark.asyncio
async def test_delete_list(recorder: _Recorder) -> None:
    recorder.queue(
        "DELETE",
        f"{V3}/lists/{LIST_ID}",
        _FakeResponse(status_code=202, payload={"status": "success", "list": {**LIST_STATE, "state": "deleted"}}),
    )

    async with BriteVerifyClient("key") as client:
        response = await client.delete_list_by_id(LIST_ID)

    assert response.list.state is BatchState.DELETED


@pytest.mark.asyncio
async def test_results_gather_pages_and_skip_failures(
    recorder: _Recorder, caplog: pytest.LogCaptureFixture
) -> None:
    recorder.queue("GET", f"{V3}/lists/{LIST_ID}", _FakeResponse(status_code=200, payload=LIST_STATE))
    recorder.queue(
        "GET",
        f"{V3}/lists/{LIST_ID}/export/1",
        _FakeResponse(
            status_code=200,
            payload={
                "num_pages": 2,
                "status": "success",
                "results": [
                    {"email": "valid@test.com", "secondary_status": None, "status": "valid"},
                    {"email": "unknown@test.com", "secondary_status": None, "status": "unknown"},
                ],
            },
        ),
    )
    recorder.queue("GET", f"{V3}/lists/{LIST_ID}/export/2", _FakeResponse(status_code=500))

    with caplog.at_level(logging.ERROR, logger="briteverify.client"):
        async with BriteVerifyClient("key") as client:
            results = await client.get_results_by_list_id(LIST_ID)

    assert [result.email for result in results] == ["valid@test.com", "unknown@test.com"]
    assert all(isinstance(result, BulkEmailVerificationArray) for result in results)
    assert "Failed to fetch bulk result page" in caplog.text


@pytest.mark.asyncio
async def test_results_require_page_count(recorder: _Recorder) -> None:
    recorder.queue(
        "GET",
        f"{V3}/lists/{LIST_ID}",
        _FakeResponse(status_code=200, payload={**LIST_STATE, "page_count": None}),
    )

    async with BriteVerifyClient("key") as client:
        with pytest.raises(MissingPageCount):
            await client.get_results_by_list_id(LIST_ID)


@pytest.mark.asyncio
async def test_results_propagate_page_cancellation(recorder: _Recorder) -> None:
    recorder.queue("GET", f"{V3}/lists/{LIST_ID}", _FakeResponse(status_code=200, payload=LIST_STATE))
    recorder.queue(
        "GET",
        f"{V3}/lists/{LIST_ID}/export/1",
        _FakeResponse(status_code=200, payload={"num_pages": 2, "status": "success", "results": []}),
    )
    recorder.queue("GET", f"{V3}/lists/{LIST_ID}/export/2", asyncio.CancelledError())

    async with BriteVerifyClient("key") as client:
        with pytest.raises(asyncio.CancelledError):
            await client.get_results_by_list_id(LIST_ID)
