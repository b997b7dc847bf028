"""Well-known status, state and directive enumerations.

Every enumeration here is forward-compatible with the remote service: an
unrecognized wire value becomes the ``UNKNOWN`` member instead of failing
validation.
"""

from __future__ import annotations

from enum import Enum
from typing import Any


def _normalize(value: Any) -> str:
    return str(value).strip().strip("\"'").strip().lower()


class VerificationStatus(str, Enum):
    VALID = "valid"
    INVALID = "invalid"
    ACCEPT_ALL = "accept_all"
    UNKNOWN = "unknown"

    @classmethod
    def _missing_(cls, value: object) -> VerificationStatus:
        normalized = _normalize(value).replace("-", "_")
        for member in cls:
            if member.value == normalized:
                return member
        return cls.UNKNOWN


class VerificationError(str, Enum):
    DISPOSABLE = "disposable"
    PMB_REQUIRED = "pmb_required"
    ROLE_ADDRESS = "role_address"
    SUITE_INVALID = "suite_invalid"
    SUITE_MISSING = "suite_missing"
    INVALID_FORMAT = "invalid_format"
    INVALID_PREFIX = "invalid_prefix"
    MULTIPLE_MATCH = "multiple_match"
    UNKNOWN_STREET = "unknown_street"
    ZIP_CODE_INVALID = "zip_code_invalid"
    BLANK_PHONE_NUMBER = "blank_phone_number"
    BOX_NUMBER_INVALID = "box_number_invalid"
    BOX_NUMBER_MISSING = "box_number_missing"
    EMAIL_DOMAIN_INVALID = "email_domain_invalid"
    INVALID_PHONE_NUMBER = "invalid_phone_number"
    MAILBOX_FULL_INVALID = "mailbox_full_invalid"
    DIRECTIONALS_INVALID = "directionals_invalid"
    EMAIL_ACCOUNT_INVALID = "email_account_invalid"
    EMAIL_ADDRESS_INVALID = "email_address_invalid"
    STREET_NUMBER_INVALID = "street_number_invalid"
    STREET_NUMBER_MISSING = "street_number_missing"
    SUITE_INVALID_MISSING = "suite_invalid_missing"
    MISSING_MINIMUM_INPUTS = "missing_minimum_inputs"
    NON_DELIVERABLE_ADDRESS = "non_deliverable_address"
    UNKNOWN = "unknown"

    @classmethod
    def _missing_(cls, value: object) -> VerificationError:
        normalized = _normalize(value)
        for member in cls:
            if member.value == normalized:
                return member
        return cls.UNKNOWN


# Spellings the service (or its docs) has used for multi-word states.
_BATCH_STATE_ALIASES = {
    "notfound": "not_found",
    "not-found": "not_found",
    "importerror": "import_error",
    "import-error": "import_error",
    "exceedslimit": "exceeds_limit",
    "exceeds-limit": "exceeds_limit",
    "invalidstate": "invalid_state",
    "invalid-state": "invalid_state",
    "duplicatedata": "duplicate_data",
    "duplicate-data": "duplicate_data",
    "missing": "missing_data",
    "missingdata": "missing_data",
    "missing-data": "missing_data",
    "incomplete": "list_uploads_incomplete",
    "uploadincomplete": "list_uploads_incomplete",
    "uploadsincomplete": "list_uploads_incomplete",
    "upload_incomplete": "list_uploads_incomplete",
    "upload-incomplete": "list_uploads_incomplete",
    "uploads_incomplete": "list_uploads_incomplete",
    "uploads-incomplete": "list_uploads_incomplete",
    "listuploadincomplete": "list_uploads_incomplete",
    "listuploadsincomplete": "list_uploads_incomplete",
    "list-uploads-incomplete": "list_uploads_incomplete",
}


class BatchState(str, Enum):
    """The current state of a bulk verification list."""

    OPEN = "open"
    CLOSED = "closed"
    DELETED = "deleted"
    EXPIRED = "expired"
    PENDING = "pending"
    PREPPED = "prepped"
    SUCCESS = "success"
    COMPLETE = "complete"
    NOT_FOUND = "not_found"
    DELIVERED = "delivered"
    VERIFYING = "verifying"
    TERMINATED = "terminated"
    IMPORT_ERROR = "import_error"
    MISSING_DATA = "missing_data"
    EXCEEDS_LIMIT = "exceeds_limit"
    INVALID_STATE = "invalid_state"
    DUPLICATE_DATA = "duplicate_data"
    LIST_UPLOADS_INCOMPLETE = "list_uploads_incomplete"
    UNKNOWN = "unknown"

    @classmethod
    def _missing_(cls, value: object) -> BatchState:
        normalized = _normalize(value)
        normalized = _BATCH_STATE_ALIASES.get(normalized, normalized)
        for member in cls:
            if member.value == normalized:
                return member
        return cls.UNKNOWN

    def is_unknown(self) -> bool:
        return self is BatchState.UNKNOWN


class BatchCreationStatus(str, Enum):
    """Top-level status of a list create / update / delete reply."""

    SUCCESS = "success"
    NOT_FOUND = "not_found"
    MISSING_DATA = "missing_data"
    INVALID_STATE = "invalid_state"
    DUPLICATE_DATA = "duplicate_data"
    UNKNOWN = "unknown"

    @classmethod
    def _missing_(cls, value: object) -> BatchCreationStatus:
        normalized = _normalize(value)
        normalized = _BATCH_STATE_ALIASES.get(normalized, normalized)
        for member in cls:
            if member.value == normalized:
                return member
        return cls.UNKNOWN


class BulkListDirective(str, Enum):
    """Instruction attached to a bulk list request. ``UNKNOWN`` is never sent."""

    START = "start"
    TERMINATE = "terminate"
    UNKNOWN = "unknown"

    @classmethod
    def _missing_(cls, value: object) -> BulkListDirective:
        return cls.coerce(value)

    @classmethod
    def coerce(cls, value: Any) -> BulkListDirective:
        if isinstance(value, cls):
            return value
        if value is True:
            return cls.START
        if value is None or value is False:
            return cls.UNKNOWN
        normalized = _normalize(value)
        if normalized in ("start", "true"):
            return cls.START
        if normalized in ("terminate", "stop"):
            return cls.TERMINATE
        return cls.UNKNOWN

    def is_unknown(self) -> bool:
        return self is BulkListDirective.UNKNOWN
