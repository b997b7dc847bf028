"""Real-time (single transaction) request and response types.

A verification request is one of seven shapes depending on which of the
email / phone / address facets it carries. Replies mirror the same seven
shapes, each with a ``duration`` and per-facet verification details. Combined
shapes can be narrowed (lossily) to any single facet they contain.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from briteverify.errors import AmbiguousTryFromValue, UnbuildableRequest
from briteverify.types.enums import VerificationError, VerificationStatus
from briteverify.types.fields import AddressBuilder, Duration, OptionalText, StreetAddress
from briteverify.types.variants import Variant

# Characters that rule out a bare phone number in `VerificationRequest.try_from`.
# "555.123.4567" is therefore rejected as ambiguous and a bare word passes as a
# phone; both are known gaps of the heuristic.
_NOT_A_PHONE = (".", " ", "\n")


# Requests


class VerificationRequest(Variant):
    """Any of the seven request shapes.

    Use ``parse`` for wire data, ``from_values`` / ``builder`` for field values
    and ``try_from`` for a single bare string.
    """

    @classmethod
    def builder(cls) -> VerificationRequestBuilder:
        return VerificationRequestBuilder()

    @classmethod
    def from_values(
        cls,
        email: Any | None = None,
        phone: Any | None = None,
        address1: Any | None = None,
        address2: Any | None = None,
        city: Any | None = None,
        state: Any | None = None,
        zip: Any | None = None,  # noqa: A002
    ) -> VerificationRequest:
        return VerificationRequestBuilder.from_values(
            email=email,
            phone=phone,
            address1=address1,
            address2=address2,
            city=city,
            state=state,
            zip=zip,
        ).build()

    @classmethod
    def try_from(cls, value: str) -> VerificationRequest:
        """Guess the request shape of one opaque string."""
        text = str(value)
        if text.lstrip().startswith("{"):
            try:
                return VerificationRequest.parse(text)
            except ValueError:
                # not a request document; fall through to the heuristic
                pass
        if "@" in text:
            return EmailVerificationRequest(email=text)
        if not any(char in text for char in _NOT_A_PHONE):
            return PhoneNumberVerificationRequest(phone=text)
        raise AmbiguousTryFromValue(text)

    def payload(self) -> dict[str, Any]:
        return self.model_dump(mode="json")


class FullVerificationRequest(VerificationRequest):
    email: str
    phone: str
    address: StreetAddress

    def to_email(self) -> EmailVerificationRequest:
        return self._project(EmailVerificationRequest)

    def to_phone(self) -> PhoneNumberVerificationRequest:
        return self._project(PhoneNumberVerificationRequest)

    def to_address(self) -> AddressVerificationRequest:
        return self._project(AddressVerificationRequest)


class EmailAndPhoneVerificationRequest(VerificationRequest):
    email: str
    phone: str

    def to_email(self) -> EmailVerificationRequest:
        return self._project(EmailVerificationRequest)

    def to_phone(self) -> PhoneNumberVerificationRequest:
        return self._project(PhoneNumberVerificationRequest)


class EmailAndAddressVerificationRequest(VerificationRequest):
    email: str
    address: StreetAddress

    def to_email(self) -> EmailVerificationRequest:
        return self._project(EmailVerificationRequest)

    def to_address(self) -> AddressVerificationRequest:
        return self._project(AddressVerificationRequest)


class PhoneAndAddressVerificationRequest(VerificationRequest):
    phone: str
    address: StreetAddress

    def to_phone(self) -> PhoneNumberVerificationRequest:
        return self._project(PhoneNumberVerificationRequest)

    def to_address(self) -> AddressVerificationRequest:
        return self._project(AddressVerificationRequest)


class EmailVerificationRequest(VerificationRequest):
    email: str


class PhoneNumberVerificationRequest(VerificationRequest):
    phone: str


class AddressVerificationRequest(VerificationRequest):
    address: StreetAddress


VerificationRequest.variants = (
    FullVerificationRequest,
    EmailAndPhoneVerificationRequest,
    EmailAndAddressVerificationRequest,
    PhoneAndAddressVerificationRequest,
    EmailVerificationRequest,
    PhoneNumberVerificationRequest,
    AddressVerificationRequest,
)


# (email set, phone set, address buildable) -> request shape
_REQUEST_SHAPES: dict[tuple[bool, bool, bool], type[VerificationRequest]] = {
    (True, True, True): FullVerificationRequest,
    (True, False, False): EmailVerificationRequest,
    (False, True, False): PhoneNumberVerificationRequest,
    (False, False, True): AddressVerificationRequest,
    (True, True, False): EmailAndPhoneVerificationRequest,
    (True, False, True): EmailAndAddressVerificationRequest,
    (False, True, True): PhoneAndAddressVerificationRequest,
    # (False, False, False): nothing to verify
}


class VerificationRequestBuilder:
    """Accumulates request fields, then resolves them to the matching shape."""

    def __init__(self) -> None:
        self._email: str | None = None
        self._phone: str | None = None
        self._address = AddressBuilder()

    def __repr__(self) -> str:
        return (
            f"VerificationRequestBuilder(email={self._email!r}, phone={self._phone!r}, "
            f"address={self._address!r})"
        )

    @classmethod
    def from_values(
        cls,
        email: Any | None = None,
        phone: Any | None = None,
        address1: Any | None = None,
        address2: Any | None = None,
        city: Any | None = None,
        state: Any | None = None,
        zip: Any | None = None,  # noqa: A002
    ) -> VerificationRequestBuilder:
        instance = cls()
        instance._address = AddressBuilder.from_values(
            address1=address1, address2=address2, city=city, state=state, zip=zip
        )
        if email is not None:
            instance.email(email)
        if phone is not None:
            instance.phone(phone)
        return instance

    def email(self, value: Any) -> VerificationRequestBuilder:
        self._email = str(value)
        return self

    def phone(self, value: Any) -> VerificationRequestBuilder:
        self._phone = str(value)
        return self

    def address1(self, value: Any) -> VerificationRequestBuilder:
        self._address.address1(value)
        return self

    def address2(self, value: Any) -> VerificationRequestBuilder:
        self._address.address2(value)
        return self

    def city(self, value: Any) -> VerificationRequestBuilder:
        self._address.city(value)
        return self

    def state(self, value: Any) -> VerificationRequestBuilder:
        self._address.state(value)
        return self

    def zip(self, value: Any) -> VerificationRequestBuilder:
        self._address.zip(value)
        return self

    @property
    def address_builder(self) -> AddressBuilder:
        return self._address

    def flags(self) -> tuple[bool, bool, bool]:
        return (self._email is not None, self._phone is not None, self._address.buildable())

    def buildable(self) -> bool:
        return any(self.flags())

    def build(self) -> VerificationRequest:
        email_set, phone_set, address_buildable = self.flags()
        shape = _REQUEST_SHAPES.get((email_set, phone_set, address_buildable))
        if shape is None:
            raise UnbuildableRequest(self)

        values: dict[str, Any] = {"email": self._email, "phone": self._phone}
        if address_buildable:
            values["address"] = self._address.build()
        return shape(**{name: values[name] for name in shape.model_fields})


# Response elements


class EmailVerificationArray(BaseModel):
    """The ``email`` element of a verification response."""

    model_config = ConfigDict(frozen=True)

    address: str
    account: str
    domain: str
    status: VerificationStatus
    # documented only as "usually null"
    connected: Any | None = None
    disposable: bool
    role_address: bool
    error_code: VerificationError | None = None
    error: OptionalText = None


class PhoneNumberVerificationArray(BaseModel):
    """The ``phone`` element of a verification response.

    ``number`` comes back scrubbed to digits, prefixed with the country code.
    """

    model_config = ConfigDict(frozen=True)

    number: str
    status: VerificationStatus
    service_type: OptionalText = None
    phone_location: Any | None = None
    errors: list[Any] = Field(default_factory=list)


class AddressVerificationArray(BaseModel):
    """The ``address`` element of a verification response.

    The service standardizes ("corrects") addresses while verifying them and
    folds ``address2`` into ``address1``, so ``address2`` is usually blank.
    """

    model_config = ConfigDict(frozen=True)

    address1: str
    address2: OptionalText = None
    city: str
    state: str
    zip: str
    status: VerificationStatus
    corrected: bool
    errors: list[Any] = Field(default_factory=list)
    secondary_status: OptionalText = None


# Responses


class VerificationResponse(Variant):
    """Any of the seven reply shapes; created by ``parse`` on a service reply."""

    # how long the service spent on the request, sent as float seconds
    duration: Duration


class FullVerificationResponse(VerificationResponse):
    email: EmailVerificationArray
    phone: PhoneNumberVerificationArray
    address: AddressVerificationArray

    def to_email(self) -> EmailVerificationResponse:
        return self._project(EmailVerificationResponse)

    def to_phone(self) -> PhoneNumberVerificationResponse:
        return self._project(PhoneNumberVerificationResponse)

    def to_address(self) -> AddressVerificationResponse:
        return self._project(AddressVerificationResponse)


class EmailAndPhoneVerificationResponse(VerificationResponse):
    email: EmailVerificationArray
    phone: PhoneNumberVerificationArray

    def to_email(self) -> EmailVerificationResponse:
        return self._project(EmailVerificationResponse)

    def to_phone(self) -> PhoneNumberVerificationResponse:
        return self._project(PhoneNumberVerificationResponse)


class EmailAndAddressVerificationResponse(VerificationResponse):
    email: EmailVerificationArray
    address: AddressVerificationArray

    def to_email(self) -> EmailVerificationResponse:
        return self._project(EmailVerificationResponse)

    def to_address(self) -> AddressVerificationResponse:
        return self._project(AddressVerificationResponse)


class PhoneAndAddressVerificationResponse(VerificationResponse):
    phone: PhoneNumberVerificationArray
    address: AddressVerificationArray

    def to_phone(self) -> PhoneNumberVerificationResponse:
        return self._project(PhoneNumberVerificationResponse)

    def to_address(self) -> AddressVerificationResponse:
        return self._project(AddressVerificationResponse)


class EmailVerificationResponse(VerificationResponse):
    email: EmailVerificationArray


class PhoneNumberVerificationResponse(VerificationResponse):
    phone: PhoneNumberVerificationArray


class AddressVerificationResponse(VerificationResponse):
    address: AddressVerificationArray


VerificationResponse.variants = (
    FullVerificationResponse,
    EmailAndPhoneVerificationResponse,
    EmailAndAddressVerificationResponse,
    PhoneAndAddressVerificationResponse,
    EmailVerificationResponse,
    PhoneNumberVerificationResponse,
    AddressVerificationResponse,
)
