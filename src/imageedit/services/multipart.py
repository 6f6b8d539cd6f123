"""Multipart/form-data body builder for the image edits endpoint."""

import logging
import mimetypes
from pathlib import Path
from typing import Sequence

import httpx

from imageedit.models.errors import ErrorCode, ImageEditError
from imageedit.models.requests import image_field_name

logger = logging.getLogger(__name__)

FALLBACK_CONTENT_TYPE = "application/octet-stream"


def guess_image_content_type(path: str | Path) -> str:
    """Registered MIME type for the file extension, or the octet-stream fallback.

    The endpoint rejects uploads typed as application/octet-stream, so callers
    should pass files with a known image extension.
    """
    content_type, _ = mimetypes.guess_type(Path(path).name)
    return content_type or FALLBACK_CONTENT_TYPE


def _image_field(field_name: str, path: Path) -> tuple[str, tuple[str, bytes, str]]:
    try:
        content = path.read_bytes()
    except OSError as e:
        raise ImageEditError(
            ErrorCode.REQUEST_BUILD_FAILED,
            f"opening image {path}: {e}",
            original_exception=e,
        )

    content_type = guess_image_content_type(path)
    if content_type == FALLBACK_CONTENT_TYPE:
        logger.warning(f"⚠️ [Multipart] No registered MIME type for {path.name}, sending {FALLBACK_CONTENT_TYPE}")
    return field_name, (path.name, content, content_type)


def _text_field(name: str, value: str) -> tuple[str, tuple[None, bytes]]:
    try:
        encoded = value.encode("utf-8")
    except (UnicodeEncodeError, AttributeError) as e:
        raise ImageEditError(
            ErrorCode.REQUEST_BUILD_FAILED,
            f"writing field {name}: {e}",
            original_exception=e,
        )
    return name, (None, encoded)


def build_multipart_body(
    image_paths: Sequence[str | Path],
    prompt: str,
    size: str,
    url: str = "/",
) -> tuple[bytes, str]:
    """
    Build the multipart/form-data payload expected by ``/images/edits``.

    Image parts come first, in the given order, followed by the ``prompt``,
    ``n`` and ``size`` text fields. A single image is sent as ``image``;
    several are sent as repeated ``image[]`` fields so the API receives an array.

    Args:
        image_paths: Local image files in send order (background before foreground)
        prompt: Full prompt text
        size: Output size as "<width>x<height>"
        url: Target URL; only used to build the request, never contacted here

    Returns:
        (body bytes, Content-Type header value including the boundary)

    Raises:
        ImageEditError: REQUEST_BUILD_FAILED for an unreadable image or an
            unserializable field, INVALID_INPUT for a malformed url
    """
    if not image_paths:
        raise ImageEditError(ErrorCode.INVALID_INPUT, "at least one image is required")

    field_name = image_field_name(len(image_paths))

    # Each file is read and closed before the next one is opened
    files: list[tuple] = [_image_field(field_name, Path(p)) for p in image_paths]
    files.append(_text_field("prompt", prompt))
    files.append(_text_field("n", "1"))
    files.append(_text_field("size", size))

    try:
        request = httpx.Request("POST", url, files=files)
        body = request.read()
    except httpx.InvalidURL as e:
        raise ImageEditError(
            ErrorCode.INVALID_INPUT,
            f"invalid endpoint URL {url!r}: {e}",
            original_exception=e,
        )
    except Exception as e:
        raise ImageEditError(
            ErrorCode.REQUEST_BUILD_FAILED,
            f"closing multipart writer: {e}",
            original_exception=e,
        )

    content_type = request.headers["Content-Type"]
    logger.debug(f"📦 [Multipart] Built {len(body)} byte body with {len(image_paths)} {field_name} part(s)")
    return body, content_type
