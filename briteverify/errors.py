# briteverify/errors.py - Exception classes

from __future__ import annotations

from typing import Any


class BriteVerifyTypeError(Exception):
    """Data-shape error raised while building or resolving a request/response."""


class UnbuildableRequest(BriteVerifyTypeError):
    def __init__(self, builder: Any):
        self.builder = builder
        super().__init__(
            "Current builder state cannot be used to construct a valid `VerificationRequest`"
        )


class UnbuildableAddressArray(BriteVerifyTypeError):
    def __init__(self, builder: Any):
        self.builder = builder
        super().__init__(
            "Current builder state cannot be used to construct a valid `StreetAddress`"
        )


class AmbiguousTryFromValue(BriteVerifyTypeError):
    def __init__(self, value: str):
        self.value = value
        super().__init__(
            f"Value cannot be resolved to a known BriteVerify API request type unambiguously: '{value}'"
        )


class InvalidDuration(BriteVerifyTypeError, ValueError):
    def __init__(self, seconds: Any):
        self.seconds = seconds
        super().__init__(f"Duration must be a non-negative number of seconds, got: {seconds!r}")


class UnmatchedVariant(BriteVerifyTypeError, ValueError):
    def __init__(self, union: str, payload: Any):
        self.union = union
        self.payload = payload
        super().__init__(f"Payload does not match any known `{union}` shape: {payload!r}")


class BriteVerifyClientError(Exception):
    """Error raised by `BriteVerifyClient` while talking to the API."""


class MissingApiKey(BriteVerifyClientError):
    def __init__(self):
        super().__init__("No BriteVerify API key provided")


class InvalidApiKey(BriteVerifyClientError):
    def __init__(self):
        super().__init__("Invalid or unauthorized BriteVerify API key")


class UnusableRequest(BriteVerifyClientError):
    def __init__(self, cause: BriteVerifyTypeError):
        self.cause = cause
        super().__init__(f"Unusable request: {cause}")


class UnusableResponse(BriteVerifyClientError):
    def __init__(self, response: Any):
        self.response = response
        status_code = getattr(response, "status_code", None)
        super().__init__(f"Unusable (non-2xx) response: {status_code}")


class MismatchedVerificationResponse(BriteVerifyClientError):
    def __init__(self, response: Any):
        self.response = response
        super().__init__("Response type doesn't match expectation")


class BulkListNotFound(BriteVerifyClientError):
    def __init__(self, error: Any):
        self.error = error
        super().__init__(
            f"No bulk verification list found for list with id: {getattr(error, 'list_id', None)!r}"
        )


class MissingPageCount(BriteVerifyClientError):
    def __init__(self, list_id: str):
        self.list_id = list_id
        super().__init__(f"Missing page count for list: {list_id!r}")
