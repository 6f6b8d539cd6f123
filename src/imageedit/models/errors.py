"""Error definitions for imageedit."""

from enum import Enum


class ErrorCode(str, Enum):
    """Error category codes for image edit operations."""

    # Raised before any network call
    INVALID_INPUT = "INVALID_INPUT"
    CREDENTIAL_UNAVAILABLE = "CREDENTIAL_UNAVAILABLE"
    REQUEST_BUILD_FAILED = "REQUEST_BUILD_FAILED"

    # Transport
    PROVIDER_TIMEOUT = "PROVIDER_TIMEOUT"
    TRANSPORT_FAILED = "TRANSPORT_FAILED"

    # Response handling
    PROVIDER_REJECTED = "PROVIDER_REJECTED"
    INVALID_RESPONSE = "INVALID_RESPONSE"
    NO_IMAGE_DATA = "NO_IMAGE_DATA"
    DECODE_FAILED = "DECODE_FAILED"
    OUTPUT_WRITE_FAILED = "OUTPUT_WRITE_FAILED"


class ImageEditError(Exception):
    """Base exception for all terminal image edit failures."""

    def __init__(self, error_code: ErrorCode, message: str, original_exception: Exception | None = None):
        super().__init__(message)
        self.error_code = error_code
        self.message = message
        self.original_exception = original_exception


class RemoteAPIError(ImageEditError):
    """The endpoint answered with a structured ``error`` object."""

    def __init__(
        self,
        api_message: str | None,
        api_type: str | None,
        api_code: str | None,
        status_code: int | None = None,
    ):
        super().__init__(
            ErrorCode.PROVIDER_REJECTED,
            f"Image edit failed: {api_message} (type={api_type}, code={api_code})",
        )
        self.api_message = api_message
        self.api_type = api_type
        self.api_code = api_code
        self.status_code = status_code
