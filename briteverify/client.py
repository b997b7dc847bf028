"""Async client for the BriteVerify real-time (v1) and bulk (v3) APIs."""

from __future__ import annotations

import asyncio
import datetime
import logging
from typing import Any, Iterable

import httpx
from pydantic import ValidationError

from briteverify.config import V1_API_BASE_URL, V3_API_BASE_URL, Settings, get_settings
from briteverify.errors import (
    BriteVerifyTypeError,
    BulkListNotFound,
    InvalidApiKey,
    MismatchedVerificationResponse,
    MissingApiKey,
    MissingPageCount,
    UnusableRequest,
    UnusableResponse,
)
from briteverify.types import (
    AccountCreditBalance,
    AddressVerificationArray,
    BatchState,
    BulkListCRUDError,
    BulkListCRUDResponse,
    BulkListDirective,
    BulkVerificationRequest,
    BulkVerificationResponse,
    BulkVerificationResult,
    EmailVerificationArray,
    GetListStatesResponse,
    PhoneNumberVerificationArray,
    VerificationListState,
    VerificationRequest,
    VerificationResponse,
)

logger = logging.getLogger(__name__)

_MAX_RATE_LIMIT_RETRIES = 5


class BriteVerifyClient:
    """Thin async wrapper around ``httpx.AsyncClient``.

    Every method sends a single logical request (429 retries aside) and parses
    the reply into the matching ``briteverify.types`` model. Use as an async
    context manager, or call ``aclose()`` when done.
    """

    def __init__(
        self,
        api_key: str | None = None,
        *,
        v1_base_url: str = V1_API_BASE_URL,
        v3_base_url: str = V3_API_BASE_URL,
        timeout_seconds: float = 30.0,
        connect_timeout_seconds: float = 10.0,
        retry_enabled: bool = True,
        default_retry_after_seconds: int = 60,
        user_agent: str | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        api_key = (api_key or "").strip()
        if not api_key:
            raise MissingApiKey()

        self.v1_base_url = v1_base_url.rstrip("/")
        self.v3_base_url = v3_base_url.rstrip("/")
        self.retry_enabled = retry_enabled
        self.default_retry_after_seconds = default_retry_after_seconds

        headers = {"Authorization": f"ApiKey: {api_key}"}
        if user_agent:
            headers["User-Agent"] = user_agent
        if client is None:
            client = httpx.AsyncClient(
                headers=headers,
                timeout=httpx.Timeout(timeout_seconds, connect=connect_timeout_seconds),
            )
        else:
            client.headers.update(headers)
        self._client = client

    @classmethod
    def from_settings(
        cls, settings: Settings | None = None, *, api_key: str | None = None
    ) -> BriteVerifyClient:
        settings = settings or get_settings()
        return cls(
            api_key or settings.api_key,
            v1_base_url=settings.v1_base_url,
            v3_base_url=settings.v3_base_url,
            timeout_seconds=settings.timeout_seconds,
            connect_timeout_seconds=settings.connect_timeout_seconds,
            retry_enabled=settings.retry_enabled,
            default_retry_after_seconds=settings.default_retry_after_seconds,
            user_agent=settings.user_agent,
        )

    async def __aenter__(self) -> BriteVerifyClient:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    # Internals

    def _retry_delay(self, response: httpx.Response) -> int:
        retry_after = str(response.headers.get("retry-after") or "").strip()
        seconds = int(retry_after) if retry_after.isdigit() else self.default_retry_after_seconds
        return 1 + seconds

    async def _send(
        self,
        method: str,
        url: str,
        *,
        params: dict[str, Any] | None = None,
        json: dict[str, Any] | None = None,
    ) -> httpx.Response:
        """Send a request, handling auth failures and (optionally) rate limits."""
        attempt = 0
        while True:
            response = await self._client.request(method, url, params=params, json=json)
            if response.status_code == 401:
                raise InvalidApiKey()
            if (
                response.status_code != 429
                or not self.retry_enabled
                or attempt >= _MAX_RATE_LIMIT_RETRIES
            ):
                return response
            attempt += 1
            delay = self._retry_delay(response)
            logger.warning(
                "BriteVerify rate limited (429), retrying",
                extra={"attempt": attempt, "delay_seconds": delay, "url": url},
            )
            await asyncio.sleep(delay)

    @staticmethod
    def _list_error(response: httpx.Response, list_id: str | None) -> BulkListNotFound:
        try:
            body = response.json()
        except ValueError:
            body = {}
        if not isinstance(body, dict):
            body = {}
        if list_id is not None:
            body = {**body, "list_id": list_id}
        error = BulkListCRUDError.model_validate(body)
        return BulkListNotFound(error)

    def _v3(self, *parts: Any, external_id: Any | None = None) -> str:
        base = self.v3_base_url
        if external_id is not None:
            base = f"{base}/accounts/{external_id}"
        return "/".join([base, *(str(part) for part in parts)])

    async def _full_verify(self, **values: Any) -> VerificationResponse:
        try:
            request = VerificationRequest.from_values(**values)
        except BriteVerifyTypeError as exc:
            raise UnusableRequest(exc) from exc

        response = await self._send("POST", f"{self.v1_base_url}/fullverify", json=request.payload())
        if response.status_code != 200:
            raise UnusableResponse(response)
        return VerificationResponse.parse(response.json())

    async def _get_list_state(self, list_id: Any, external_id: Any | None = None) -> VerificationListState:
        list_id = str(list_id)
        response = await self._send("GET", self._v3("lists", list_id, external_id=external_id))
        if response.status_code == 200:
            return VerificationListState.model_validate(response.json())
        if response.status_code == 404:
            raise self._list_error(response, list_id)
        raise UnusableResponse(response)

    async def _get_result_page(self, list_id: str, page_number: int) -> BulkVerificationResponse:
        response = await self._send("GET", self._v3("lists", list_id, "export", page_number))
        if response.status_code != 200:
            raise UnusableResponse(response)
        return BulkVerificationResponse.model_validate(response.json())

    async def _create_or_update_list(
        self,
        list_id: Any | None,
        contacts: Iterable[Any] | None,
        directive: Any,
    ) -> BulkListCRUDResponse:
        try:
            request = BulkVerificationRequest.new(contacts, directive)
        except (BriteVerifyTypeError, ValidationError) as exc:
            raise UnusableRequest(exc) from exc

        list_id = str(list_id) if list_id is not None else None
        url = self._v3("lists", list_id) if list_id else self._v3("lists")
        response = await self._send("POST", url, json=request.payload())
        if response.status_code in (200, 201):
            return BulkListCRUDResponse.model_validate(response.json())
        if response.status_code in (400, 404):
            raise self._list_error(response, list_id)
        raise UnusableResponse(response)

    # Account

    async def get_account_balance(self) -> AccountCreditBalance:
        response = await self._send("GET", self._v3("accounts", "credits"))
        if response.status_code != 200:
            raise UnusableResponse(response)
        return AccountCreditBalance.model_validate(response.json())

    async def current_credits(self) -> int:
        return (await self.get_account_balance()).credits

    async def current_credits_in_reserve(self) -> int:
        return (await self.get_account_balance()).credits_in_reserve

    # Real-time (single transaction)

    async def verify_contact(
        self,
        email: Any,
        phone: Any,
        address1: Any,
        address2: Any | None,
        city: Any,
        state: Any,
        zip: Any,  # noqa: A002
    ) -> VerificationResponse:
        return await self._full_verify(
            email=email,
            phone=phone,
            address1=address1,
            address2=address2,
            city=city,
            state=state,
            zip=zip,
        )

    async def verify_email(self, email: Any) -> EmailVerificationArray:
        response = await self._full_verify(email=email)
        if not isinstance(getattr(response, "email", None), EmailVerificationArray):
            raise MismatchedVerificationResponse(response)
        return response.email

    async def verify_phone_number(self, phone: Any) -> PhoneNumberVerificationArray:
        response = await self._full_verify(phone=phone)
        if not isinstance(getattr(response, "phone", None), PhoneNumberVerificationArray):
            raise MismatchedVerificationResponse(response)
        return response.phone

    async def verify_street_address(
        self,
        address1: Any,
        address2: Any | None,
        city: Any,
        state: Any,
        zip: Any,  # noqa: A002
    ) -> AddressVerificationArray:
        response = await self._full_verify(
            address1=address1, address2=address2, city=city, state=state, zip=zip
        )
        if not isinstance(getattr(response, "address", None), AddressVerificationArray):
            raise MismatchedVerificationResponse(response)
        return response.address

    # Bulk (v3)

    async def get_lists(self) -> GetListStatesResponse:
        return await self.get_filtered_lists()

    async def get_filtered_lists(
        self,
        page: int | None = None,
        date: datetime.date | None = None,
        state: Any | None = None,
        ext_id: Any | None = None,
    ) -> GetListStatesResponse:
        params: dict[str, Any] = {}
        if page is not None:
            params["page"] = str(int(page))
        if date is not None:
            params["date"] = date.strftime("%Y-%m-%d")
        if state is not None:
            list_state = BatchState(state)
            if list_state.is_unknown():
                logger.warning(
                    "Declining to include unknown list state as request filter",
                    extra={"state": str(state)},
                )
            else:
                params["state"] = list_state.value

        response = await self._send(
            "GET", self._v3("lists", external_id=ext_id), params=params or None
        )
        if response.status_code != 200:
            raise UnusableResponse(response)
        return GetListStatesResponse.model_validate(response.json())

    async def get_lists_by_date(self, date: datetime.date) -> GetListStatesResponse:
        return await self.get_filtered_lists(date=date)

    async def get_lists_by_page(self, page: int) -> GetListStatesResponse:
        return await self.get_filtered_lists(page=page)

    async def get_lists_by_state(self, state: Any) -> GetListStatesResponse:
        if BatchState(state).is_unknown():
            logger.warning("Declining unknown list state filter", extra={"state": str(state)})
            return GetListStatesResponse(
                message="Declined to request lists using 'unknown' as list state filter"
            )
        return await self.get_filtered_lists(state=state)

    async def create_list(
        self, contacts: Iterable[Any] | None = None, auto_start: bool = False
    ) -> BulkListCRUDResponse:
        if contacts is None:
            # nothing to verify yet, so never auto-start
            return await self._create_or_update_list(None, None, False)
        return await self._create_or_update_list(None, contacts, auto_start)

    async def update_list(
        self, list_id: Any, contacts: Iterable[Any], auto_start: bool = False
    ) -> BulkListCRUDResponse:
        return await self._create_or_update_list(list_id, contacts, auto_start)

    async def get_list_by_id(self, list_id: Any) -> VerificationListState:
        return await self._get_list_state(list_id)

    async def get_list_by_external_id(self, list_id: Any, external_id: Any) -> VerificationListState:
        return await self._get_list_state(list_id, external_id)

    async def delete_list_by_id(self, list_id: Any) -> BulkListCRUDResponse:
        list_id = str(list_id)
        response = await self._send("DELETE", self._v3("lists", list_id))
        if response.status_code in (200, 202, 204):
            return BulkListCRUDResponse.model_validate(response.json())
        if response.status_code == 404:
            raise self._list_error(response, list_id)
        raise UnusableResponse(response)

    async def terminate_list_by_id(self, list_id: Any) -> BulkListCRUDResponse:
        return await self._create_or_update_list(list_id, None, BulkListDirective.TERMINATE)

    async def queue_list_for_processing(self, list_id: Any) -> BulkListCRUDResponse:
        return await self._create_or_update_list(list_id, None, BulkListDirective.START)

    async def get_results_by_list_id(self, list_id: Any) -> list[BulkVerificationResult]:
        """Fetch every exported result page of a list and flatten the results.

        Pages are requested concurrently. A page that fails is logged and
        skipped rather than failing the whole call. Cancellation of any page
        propagates.
        """
        list_id = str(list_id)
        list_state = await self.get_list_by_id(list_id)
        if list_state.page_count is None:
            raise MissingPageCount(list_id)

        page_count = max(1, list_state.page_count)
        pages = await asyncio.gather(
            *(self._get_result_page(list_id, number) for number in range(1, page_count + 1)),
            return_exceptions=True,
        )

        results: list[BulkVerificationResult] = []
        for number, page in enumerate(pages, start=1):
            if isinstance(page, asyncio.CancelledError):
                raise page
            if isinstance(page, BaseException):
                logger.error(
                    "Failed to fetch bulk result page",
                    extra={"list_id": list_id, "page": number, "error": str(page)},
                )
                continue
            results.extend(page.results)
        return results
