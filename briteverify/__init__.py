"""Python client and data types for the BriteVerify API Suite."""

from briteverify.client import BriteVerifyClient
from briteverify.config import Settings, get_settings
from briteverify.errors import (
    AmbiguousTryFromValue,
    BriteVerifyClientError,
    BriteVerifyTypeError,
    BulkListNotFound,
    InvalidApiKey,
    InvalidDuration,
    MismatchedVerificationResponse,
    MissingApiKey,
    MissingPageCount,
    UnbuildableAddressArray,
    UnbuildableRequest,
    UnmatchedVariant,
    UnusableRequest,
    UnusableResponse,
)
from briteverify.types import (
    BulkVerificationRequest,
    StreetAddress,
    VerificationRequest,
    VerificationResponse,
)

__version__ = "0.1.0"

__all__ = [
    # Client
    "BriteVerifyClient",
    "Settings",
    "get_settings",
    # Types
    "BulkVerificationRequest",
    "StreetAddress",
    "VerificationRequest",
    "VerificationResponse",
    # Exceptions
    "BriteVerifyTypeError",
    "UnbuildableRequest",
    "UnbuildableAddressArray",
    "AmbiguousTryFromValue",
    "InvalidDuration",
    "UnmatchedVariant",
    "BriteVerifyClientError",
    "MissingApiKey",
    "InvalidApiKey",
    "UnusableRequest",
    "UnusableResponse",
    "MismatchedVerificationResponse",
    "BulkListNotFound",
    "MissingPageCount",
]
