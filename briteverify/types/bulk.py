"""Bulk (v3) list request, bookkeeping and result types."""

from __future__ import annotations

from typing import Annotated, Any, Iterable, Sequence

from pydantic import (
    AliasChoices,
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
    SerializeAsAny,
    model_serializer,
)

from briteverify.types.enums import (
    BatchCreationStatus,
    BatchState,
    BulkListDirective,
    VerificationStatus,
)
from briteverify.types.fields import ExternalId, OptionalText, OptionalTimestamp, Timestamp
from briteverify.types.single import AddressVerificationArray, VerificationRequest
from briteverify.types.variants import Variant, resolve_variant

Contact = Annotated[
    VerificationRequest,
    SerializeAsAny(),
    BeforeValidator(VerificationRequest.parse),
]


class BulkVerificationRequest(BaseModel):
    """Contacts to append to a bulk list, plus an optional list directive.

    Empty ``contacts`` and an ``UNKNOWN`` directive are left out of the
    payload, so ``BulkVerificationRequest(directive="start")`` serializes to
    ``{"directive": "start"}``.
    """

    model_config = ConfigDict(frozen=True)

    contacts: list[Contact] = Field(default_factory=list)
    directive: BulkListDirective = BulkListDirective.UNKNOWN

    @model_serializer(mode="wrap")
    def _omit_empty(self, handler: Any) -> dict[str, Any]:
        data = handler(self)
        if not data.get("contacts"):
            data.pop("contacts", None)
        if self.directive.is_unknown():
            data.pop("directive", None)
        return data

    @classmethod
    def new(
        cls, contacts: Iterable[Any] | None = None, directive: Any = None
    ) -> BulkVerificationRequest:
        return cls(
            contacts=[
                VerificationRequest.try_from(contact) if isinstance(contact, str) else contact
                for contact in contacts or []
            ],
            directive=BulkListDirective.coerce(directive),
        )

    def payload(self) -> dict[str, Any]:
        return self.model_dump(mode="json")


# List bookkeeping


class BulkListCRUDError(BaseModel):
    """Error body returned when a list operation is refused."""

    model_config = ConfigDict(frozen=True)

    list_id: OptionalText = None
    status: BatchState = Field(
        default=BatchState.UNKNOWN,
        validation_alias=AliasChoices("status", "code"),
    )
    message: OptionalText = None


class VerificationListState(BaseModel):
    """Details of one bulk verification list."""

    model_config = ConfigDict(frozen=True)

    id: str
    external_id: ExternalId = Field(
        default=None,
        validation_alias=AliasChoices("external_id", "account_external_id"),
    )
    state: BatchState = BatchState.UNKNOWN
    progress: int = 0
    total_verified: int = 0
    page_count: int | None = None
    total_verified_emails: int = 0
    total_verified_phones: int = 0
    created_at: Timestamp
    results_path: OptionalText = None
    expiration_date: OptionalTimestamp = None
    errors: list[BulkListCRUDError] = Field(default_factory=list)


class GetListStatesResponse(BaseModel):
    """A (paginated) collection of list states.

    The service reports pagination only in ``message``, e.g. ``"Page 2 of 3"``.
    """

    model_config = ConfigDict(frozen=True)

    message: OptionalText = None
    lists: list[VerificationListState] = Field(default_factory=list)

    def __iter__(self):
        return iter(self.lists)

    def __len__(self) -> int:
        return len(self.lists)

    def ids(self) -> list[str]:
        return [state.id for state in self.lists]

    def _pages(self) -> tuple[int, int]:
        if not self.message:
            return 1, 1
        numbers = [int(token) for token in self.message.split() if token.isdigit()]
        current = numbers[0] if numbers else 1
        total = numbers[1] if len(numbers) > 1 else 1
        return current, total

    def current_page(self) -> int:
        return self._pages()[0]

    def total_pages(self) -> int:
        return self._pages()[1]

    def get_list_by_id(self, list_id: Any) -> VerificationListState | None:
        list_id = str(list_id)
        return next((state for state in self.lists if state.id == list_id), None)


class BulkListCRUDResponse(BaseModel):
    """Reply to creating, updating or deleting a bulk list."""

    model_config = ConfigDict(frozen=True)

    status: BatchCreationStatus = Field(
        default=BatchCreationStatus.UNKNOWN,
        validation_alias=AliasChoices("status", "code"),
    )
    message: str = ""
    list: VerificationListState


CreateListResponse = BulkListCRUDResponse
UpdateListResponse = BulkListCRUDResponse
DeleteListResponse = BulkListCRUDResponse


# Results


class BulkEmailVerificationArray(BaseModel):
    model_config = ConfigDict(frozen=True)

    email: str
    status: VerificationStatus
    secondary_status: OptionalText = None


class BulkPhoneNumberVerificationArray(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True, serialize_by_alias=True)

    phone: str
    status: VerificationStatus
    phone_location: OptionalText = None
    secondary_status: OptionalText = None
    service_type: OptionalText = Field(default=None, alias="phone_service_type")


BulkAddressVerificationArray = AddressVerificationArray


class BulkContactVerificationResult(Variant):
    """Verification outcome of one contact in a bulk list."""


class BulkFullVerificationResult(BulkContactVerificationResult):
    email: BulkEmailVerificationArray
    phone: BulkPhoneNumberVerificationArray
    address: BulkAddressVerificationArray


class BulkEmailAndPhoneVerificationResult(BulkContactVerificationResult):
    email: BulkEmailVerificationArray
    phone: BulkPhoneNumberVerificationArray


class BulkEmailAndAddressVerificationResult(BulkContactVerificationResult):
    email: BulkEmailVerificationArray
    address: BulkAddressVerificationArray


class BulkPhoneAndAddressVerificationResult(BulkContactVerificationResult):
    phone: BulkPhoneNumberVerificationArray
    address: BulkAddressVerificationArray


class BulkEmailVerificationResult(BulkContactVerificationResult):
    email: BulkEmailVerificationArray


class BulkPhoneNumberVerificationResult(BulkContactVerificationResult):
    phone: BulkPhoneNumberVerificationArray


class BulkAddressVerificationResult(BulkContactVerificationResult):
    address: BulkAddressVerificationArray


BulkContactVerificationResult.variants = (
    BulkFullVerificationResult,
    BulkEmailAndPhoneVerificationResult,
    BulkEmailAndAddressVerificationResult,
    BulkPhoneAndAddressVerificationResult,
    BulkEmailVerificationResult,
    BulkPhoneNumberVerificationResult,
    BulkAddressVerificationResult,
)

# Lists uploaded as bare emails export bare email results, everything else
# exports contact results. Contact shapes are tried first.
BULK_RESULT_SHAPES: Sequence[type[BaseModel]] = (
    *BulkContactVerificationResult.variants,
    BulkEmailVerificationArray,
)

BulkVerificationResult = BulkContactVerificationResult | BulkEmailVerificationArray


def parse_bulk_result(data: Any) -> BulkVerificationResult:
    return resolve_variant("BulkVerificationResult", BULK_RESULT_SHAPES, data)


class BulkVerificationResponse(BaseModel):
    """One exported page of bulk list results."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    status: BatchState = BatchState.UNKNOWN
    page_count: int = Field(default=0, alias="num_pages")
    results: list[
        Annotated[
            BulkVerificationResult,
            SerializeAsAny(),
            BeforeValidator(parse_bulk_result),
        ]
    ] = Field(default_factory=list)
