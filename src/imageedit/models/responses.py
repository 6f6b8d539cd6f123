"""Response models for the image edits endpoint."""

import base64
import binascii
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field, ValidationError, field_validator

from imageedit.models.errors import ErrorCode, ImageEditError, RemoteAPIError
from imageedit.models.metrics import EditMetrics
from imageedit.utils.path_utils import truncate


class ImageData(BaseModel):
    """A single result entry in the ``data`` list."""

    b64_json: Optional[str] = Field(None, description="Base64-encoded image payload")


class APIErrorBody(BaseModel):
    """Structured ``error`` object returned by the endpoint."""

    message: Optional[str] = None
    type: Optional[str] = None
    code: Optional[str] = None

    @field_validator("code", mode="before")
    @classmethod
    def stringify_code(cls, value):
        # Some deployments send numeric codes
        if value is None or isinstance(value, str):
            return value
        return str(value)


class ImageEditResponse(BaseModel):
    """JSON envelope returned by ``/images/edits``."""

    data: Optional[list[Optional[ImageData]]] = Field(None, description="Generated images")
    error: Optional[APIErrorBody] = Field(None, description="Error details if the call failed")

    @classmethod
    def from_bytes(cls, raw: bytes) -> "ImageEditResponse":
        """
        Parse a raw response body.

        Raises:
            ImageEditError: INVALID_RESPONSE if the body is not the expected JSON object
        """
        try:
            return cls.model_validate_json(raw)
        except ValidationError as e:
            preview = truncate(raw.decode("utf-8", errors="replace"), 500)
            raise ImageEditError(
                ErrorCode.INVALID_RESPONSE,
                f"Error parsing response JSON: {e.error_count()} validation error(s)\nRaw (first 500 bytes): {preview}",
                original_exception=e,
            )

    def decode_image(self, status_code: int | None = None) -> bytes:
        """
        Return the decoded bytes of the first image.

        The checks run in a fixed order: a remote ``error`` object wins even
        when ``data`` is also populated, then an empty result list, then the
        base64 payload itself.

        Raises:
            RemoteAPIError: The endpoint reported an error
            ImageEditError: NO_IMAGE_DATA or DECODE_FAILED
        """
        if self.error is not None:
            raise RemoteAPIError(
                self.error.message,
                self.error.type,
                self.error.code,
                status_code=status_code,
            )

        if not self.data or self.data[0] is None or not self.data[0].b64_json:
            raise ImageEditError(
                ErrorCode.NO_IMAGE_DATA,
                "Image edit failed: no image data in response",
            )

        # Line-wrapped base64 is still valid standard encoding
        payload = self.data[0].b64_json.replace("\r", "").replace("\n", "")
        try:
            return base64.b64decode(payload, validate=True)
        except (binascii.Error, ValueError) as e:
            raise ImageEditError(
                ErrorCode.DECODE_FAILED,
                f"Error decoding base64 image: {e}",
                original_exception=e,
            )


class ImageEditResult(BaseModel):
    """Outcome of a successful edit: where the image went and how long it took."""

    output_path: Path = Field(..., description="File the decoded image was written to")
    metrics: EditMetrics = Field(..., description="Performance tracking")
