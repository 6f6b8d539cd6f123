"""Tests for the multipart/form-data body builder."""

import pytest

from conftest import JPEG_BYTES, PNG_BYTES, parse_multipart
from imageedit.models.errors import ErrorCode, ImageEditError
from imageedit.services.multipart import (
    FALLBACK_CONTENT_TYPE,
    build_multipart_body,
    guess_image_content_type,
)


def _names(parts):
    return [headers["content-disposition"].split('name="')[1].split('"')[0] for headers, _ in parts]


def test_single_image_uses_scalar_field_name(png_image):
    """A single image is sent as exactly one part named `image`."""
    body, content_type = build_multipart_body([png_image], "Make it a watercolor", "1024x1024")
    parts = parse_multipart(body, content_type)

    image_parts = [p for p in parts if "filename" in p[0]["content-disposition"]]
    assert len(image_parts) == 1
    headers, content = image_parts[0]
    assert headers["content-disposition"] == 'form-data; name="image"; filename="cat.png"'
    assert headers["content-type"] == "image/png"
    assert content == PNG_BYTES
    assert "image[]" not in _names(parts)


def test_two_images_use_array_field_name_in_order(png_image, jpeg_background):
    """Two images are sent as two `image[]` parts, background first."""
    body, content_type = build_multipart_body(
        [jpeg_background, png_image], "Put the cat in the room", "1536x1024"
    )
    parts = parse_multipart(body, content_type)

    image_parts = [p for p in parts if "filename" in p[0]["content-disposition"]]
    assert len(image_parts) == 2
    assert all('name="image[]"' in h["content-disposition"] for h, _ in image_parts)

    (bg_headers, bg_content), (fg_headers, fg_content) = image_parts
    assert 'filename="room.jpg"' in bg_headers["content-disposition"]
    assert bg_headers["content-type"] == "image/jpeg"
    assert bg_content == JPEG_BYTES
    assert 'filename="cat.png"' in fg_headers["content-disposition"]
    assert fg_content == PNG_BYTES
    assert "image" not in _names(parts)


def test_text_fields_follow_image_parts(png_image):
    """prompt, n and size are appended after the image parts as plain fields."""
    prompt = "A cat wearing a tiny hat,\nphotorealistic ✨"
    body, content_type = build_multipart_body([png_image], prompt, "1024x1536")
    parts = parse_multipart(body, content_type)

    names = _names(parts)
    assert names[0] == "image"
    assert sorted(names[1:]) == ["n", "prompt", "size"]

    fields = {name: content for name, (headers, content) in zip(names, parts) if name != "image"}
    assert fields["prompt"] == prompt.encode("utf-8")
    assert fields["n"] == b"1"
    assert fields["size"] == b"1024x1536"

    for name, (headers, _) in zip(names[1:], parts[1:]):
        assert headers["content-disposition"] == f'form-data; name="{name}"'
        assert "content-type" not in headers


def test_content_type_boundary_matches_body(png_image):
    """The boundary in the Content-Type is the one that delimits the body."""
    body, content_type = build_multipart_body([png_image], "prompt", "1024x1024")

    assert content_type.startswith("multipart/form-data; boundary=")
    boundary = content_type.split("boundary=")[1].encode()
    assert body.startswith(b"--" + boundary + b"\r\n")
    assert body.endswith(b"--" + boundary + b"--\r\n")
    # 1 image + 3 fields, plus the closing delimiter
    assert body.count(b"--" + boundary) == 5


def test_unreadable_image_aborts_and_names_path(tmp_path, png_image):
    """A missing image fails the whole build before anything is sent."""
    missing = tmp_path / "nope.png"

    with pytest.raises(ImageEditError) as exc_info:
        build_multipart_body([png_image, missing], "prompt", "1024x1024")

    assert exc_info.value.error_code == ErrorCode.REQUEST_BUILD_FAILED
    assert str(missing) in exc_info.value.message
    assert isinstance(exc_info.value.original_exception, OSError)


def test_unserializable_field_names_the_field(png_image):
    """A field that cannot be encoded surfaces its name."""
    with pytest.raises(ImageEditError) as exc_info:
        build_multipart_body([png_image], "bad surrogate \ud800", "1024x1024")

    assert exc_info.value.error_code == ErrorCode.REQUEST_BUILD_FAILED
    assert "prompt" in exc_info.value.message


def test_no_images_is_invalid_input():
    with pytest.raises(ImageEditError) as exc_info:
        build_multipart_body([], "prompt", "1024x1024")

    assert exc_info.value.error_code == ErrorCode.INVALID_INPUT


def test_unknown_extension_falls_back_to_octet_stream(tmp_path):
    """Unregistered extensions are sent as application/octet-stream."""
    path = tmp_path / "texture.zzimg"
    path.write_bytes(b"raw")

    assert guess_image_content_type(path) == FALLBACK_CONTENT_TYPE

    body, content_type = build_multipart_body([path], "prompt", "1024x1024")
    headers, content = parse_multipart(body, content_type)[0]
    assert headers["content-type"] == FALLBACK_CONTENT_TYPE
    assert content == b"raw"


@pytest.mark.parametrize(
    "filename,expected",
    [
        ("cat.png", "image/png"),
        ("cat.jpg", "image/jpeg"),
        ("CAT.JPEG", "image/jpeg"),
        ("dir.with.dots/cat.gif", "image/gif"),
    ],
)
def test_guess_image_content_type(filename, expected):
    assert guess_image_content_type(filename) == expected


def test_malformed_url_is_reported_as_invalid_input(png_image):
    with pytest.raises(ImageEditError) as exc_info:
        build_multipart_body([png_image], "prompt", "1024x1024", url="https://myres.openai.azure.com:abc/edits")

    assert exc_info.value.error_code == ErrorCode.INVALID_INPUT
    assert "invalid endpoint URL" in exc_info.value.message
    assert "closing multipart writer" not in exc_info.value.message
