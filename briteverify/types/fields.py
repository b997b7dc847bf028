from __future__ import annotations

import logging
import math
from datetime import datetime, timedelta, timezone
from typing import Annotated, Any

from pydantic import BaseModel, BeforeValidator, ConfigDict, PlainSerializer, model_serializer

from briteverify.errors import InvalidDuration, UnbuildableAddressArray

logger = logging.getLogger(__name__)

# The service's list timestamps look like "08-10-2021 04:03 pm" and are UTC.
TIMESTAMP_FORMAT = "%m-%d-%Y %I:%M %p"


def empty_string_is_none(value: Any) -> Any:
    if isinstance(value, str) and not value.strip():
        return None
    return value


def float_to_duration(value: Any) -> timedelta:
    if isinstance(value, timedelta):
        seconds = value.total_seconds()
    elif isinstance(value, bool):
        raise InvalidDuration(value)
    else:
        try:
            seconds = float(value)
        except (TypeError, ValueError, OverflowError) as exc:
            raise InvalidDuration(value) from exc
    if not math.isfinite(seconds) or seconds < 0:
        raise InvalidDuration(value)
    try:
        return timedelta(seconds=seconds)
    except (OverflowError, ValueError) as exc:
        raise InvalidDuration(value) from exc


def duration_to_float(value: timedelta) -> float:
    return value.total_seconds()


def parse_timestamp(value: Any) -> Any:
    if isinstance(value, datetime):
        return value if value.tzinfo else value.replace(tzinfo=timezone.utc)
    if not isinstance(value, str):
        return value
    try:
        parsed = datetime.strptime(value.strip(), TIMESTAMP_FORMAT)
    except ValueError:
        logger.error("Unparsable timestamp value", extra={"value": value})
        raise
    return parsed.replace(tzinfo=timezone.utc)


def format_timestamp(value: datetime) -> str:
    return value.strftime("%m-%d-%Y %I:%M %p").lower()


def _external_id(value: Any) -> Any:
    if value is None or isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return str(value)
    if isinstance(value, str):
        cleaned = value.strip().strip("\"'").strip()
        return cleaned or None
    return value


OptionalText = Annotated[str | None, BeforeValidator(empty_string_is_none)]

Duration = Annotated[
    timedelta,
    BeforeValidator(float_to_duration),
    PlainSerializer(duration_to_float, return_type=float),
]

Timestamp = Annotated[
    datetime,
    BeforeValidator(parse_timestamp),
    PlainSerializer(format_timestamp, return_type=str),
]

OptionalTimestamp = Annotated[
    datetime | None,
    BeforeValidator(lambda value: parse_timestamp(empty_string_is_none(value))),
    PlainSerializer(lambda value: format_timestamp(value) if value else None, return_type=str | None),
]

ExternalId = Annotated[str | None, BeforeValidator(_external_id)]


class StreetAddress(BaseModel):
    """A street address as sent in a verification request."""

    model_config = ConfigDict(frozen=True)

    address1: str
    address2: OptionalText = None
    city: str
    state: str
    zip: str

    @model_serializer(mode="wrap")
    def _omit_missing_address2(self, handler: Any) -> dict[str, Any]:
        data = handler(self)
        if data.get("address2") is None:
            data.pop("address2", None)
        return data

    @classmethod
    def builder(cls) -> AddressBuilder:
        return AddressBuilder()

    @classmethod
    def from_values(
        cls,
        address1: Any,
        address2: Any | None,
        city: Any,
        state: Any,
        zip: Any,  # noqa: A002
    ) -> StreetAddress:
        return cls(
            address1=str(address1),
            address2=str(address2) if address2 is not None else None,
            city=str(city),
            state=str(state),
            zip=str(zip),
        )


def _is_filled(value: str | None) -> bool:
    return value is not None and bool(value.strip())


class AddressBuilder:
    """Incrementally accumulates address fields, then resolves a `StreetAddress`."""

    def __init__(self) -> None:
        self._address1: str | None = None
        self._address2: str | None = None
        self._city: str | None = None
        self._state: str | None = None
        self._zip: str | None = None

    def __repr__(self) -> str:
        return (
            f"AddressBuilder(address1={self._address1!r}, address2={self._address2!r}, "
            f"city={self._city!r}, state={self._state!r}, zip={self._zip!r})"
        )

    @classmethod
    def from_values(
        cls,
        address1: Any | None = None,
        address2: Any | None = None,
        city: Any | None = None,
        state: Any | None = None,
        zip: Any | None = None,  # noqa: A002
    ) -> AddressBuilder:
        instance = cls()
        if address1 is not None:
            instance.address1(address1)
        if address2 is not None:
            instance.address2(address2)
        if city is not None:
            instance.city(city)
        if state is not None:
            instance.state(state)
        if zip is not None:
            instance.zip(zip)
        return instance

    def address1(self, value: Any) -> AddressBuilder:
        self._address1 = str(value)
        return self

    def address2(self, value: Any) -> AddressBuilder:
        self._address2 = str(value)
        return self

    def city(self, value: Any) -> AddressBuilder:
        self._city = str(value)
        return self

    def state(self, value: Any) -> AddressBuilder:
        self._state = str(value)
        return self

    def zip(self, value: Any) -> AddressBuilder:
        self._zip = str(value)
        return self

    @property
    def values(self) -> dict[str, str | None]:
        return {
            "address1": self._address1,
            "address2": self._address2,
            "city": self._city,
            "state": self._state,
            "zip": self._zip,
        }

    def buildable(self) -> bool:
        # address2 is never required
        return all(
            _is_filled(value) for value in (self._address1, self._city, self._state, self._zip)
        )

    def build(self) -> StreetAddress:
        if not self.buildable():
            raise UnbuildableAddressArray(self)
        return StreetAddress(**self.values)
