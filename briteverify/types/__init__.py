from briteverify.types.account import AccountCreditBalance
from briteverify.types.bulk import (
    BulkAddressVerificationArray,
    BulkAddressVerificationResult,
    BulkContactVerificationResult,
    BulkEmailAndAddressVerificationResult,
    BulkEmailAndPhoneVerificationResult,
    BulkEmailVerificationArray,
    BulkEmailVerificationResult,
    BulkFullVerificationResult,
    BulkListCRUDError,
    BulkListCRUDResponse,
    BulkPhoneAndAddressVerificationResult,
    BulkPhoneNumberVerificationArray,
    BulkPhoneNumberVerificationResult,
    BulkVerificationRequest,
    BulkVerificationResponse,
    BulkVerificationResult,
    CreateListResponse,
    DeleteListResponse,
    GetListStatesResponse,
    UpdateListResponse,
    VerificationListState,
    parse_bulk_result,
)
from briteverify.types.enums import (
    BatchCreationStatus,
    BatchState,
    BulkListDirective,
    VerificationError,
    VerificationStatus,
)
from briteverify.types.fields import AddressBuilder, StreetAddress
from briteverify.types.single import (
    AddressVerificationArray,
    AddressVerificationRequest,
    AddressVerificationResponse,
    EmailAndAddressVerificationRequest,
    EmailAndAddressVerificationResponse,
    EmailAndPhoneVerificationRequest,
    EmailAndPhoneVerificationResponse,
    EmailVerificationArray,
    EmailVerificationRequest,
    EmailVerificationResponse,
    FullVerificationRequest,
    FullVerificationResponse,
    PhoneAndAddressVerificationRequest,
    PhoneAndAddressVerificationResponse,
    PhoneNumberVerificationArray,
    PhoneNumberVerificationRequest,
    PhoneNumberVerificationResponse,
    VerificationRequest,
    VerificationRequestBuilder,
    VerificationResponse,
)

__all__ = [
    # Account
    "AccountCreditBalance",
    # Enumerations
    "BatchCreationStatus",
    "BatchState",
    "BulkListDirective",
    "VerificationError",
    "VerificationStatus",
    # Addresses
    "AddressBuilder",
    "StreetAddress",
    # Real-time requests
    "VerificationRequest",
    "VerificationRequestBuilder",
    "FullVerificationRequest",
    "EmailAndPhoneVerificationRequest",
    "EmailAndAddressVerificationRequest",
    "PhoneAndAddressVerificationRequest",
    "EmailVerificationRequest",
    "PhoneNumberVerificationRequest",
    "AddressVerificationRequest",
    # Real-time responses
    "EmailVerificationArray",
    "PhoneNumberVerificationArray",
    "AddressVerificationArray",
    "VerificationResponse",
    "FullVerificationResponse",
    "EmailAndPhoneVerificationResponse",
    "EmailAndAddressVerificationResponse",
    "PhoneAndAddressVerificationResponse",
    "EmailVerificationResponse",
    "PhoneNumberVerificationResponse",
    "AddressVerificationResponse",
    # Bulk
    "BulkVerificationRequest",
    "BulkListCRUDError",
    "VerificationListState",
    "GetListStatesResponse",
    "BulkListCRUDResponse",
    "CreateListResponse",
    "UpdateListResponse",
    "DeleteListResponse",
    "BulkEmailVerificationArray",
    "BulkPhoneNumberVerificationArray",
    "BulkAddressVerificationArray",
    "BulkContactVerificationResult",
    "BulkFullVerificationResult",
    "BulkEmailAndPhoneVerificationResult",
    "BulkEmailAndAddressVerificationResult",
    "BulkPhoneAndAddressVerificationResult",
    "BulkEmailVerificationResult",
    "BulkPhoneNumberVerificationResult",
    "BulkAddressVerificationResult",
    "BulkVerificationResult",
    "BulkVerificationResponse",
    "parse_bulk_result",
]
