"""Models package for imageedit."""

from imageedit.models.errors import ErrorCode, ImageEditError, RemoteAPIError
from imageedit.models.metrics import EditMetrics
from imageedit.models.requests import DEFAULT_SIZE, ImageEditRequest
from imageedit.models.responses import APIErrorBody, ImageData, ImageEditResponse, ImageEditResult

__all__ = [
    "APIErrorBody",
    "DEFAULT_SIZE",
    "EditMetrics",
    "ErrorCode",
    "ImageData",
    "ImageEditError",
    "ImageEditRequest",
    "ImageEditResponse",
    "ImageEditResult",
    "RemoteAPIError",
]
