"""Shared pytest fixtures for imageedit tests."""

import base64
import json

import httpx
import pytest

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00fake-png-pixels\xff" * 4
JPEG_BYTES = b"\xff\xd8\xff\xe0" + b"fake-jpeg-pixels" * 4


class MockTokenProvider:
    """Mock token provider for testing."""

    def __init__(self, token: str = "test-token", error: Exception | None = None):
        """
        Initialize mock provider.

        Args:
            token: Token returned by get_token
            error: If set, get_token raises it instead
        """
        self.token = token
        self.error = error
        self.calls: list[tuple[str, ...]] = []

    def get_token(self, *scopes: str) -> str:
        self.calls.append(scopes)
        if self.error is not None:
            raise self.error
        return self.token


class RecordingTransport:
    """Builds an httpx.MockTransport that answers with a fixed JSON body and records requests."""

    def __init__(self, payload: dict | bytes, status_code: int = 200, error: Exception | None = None):
        self.payload = payload
        self.status_code = status_code
        self.error = error
        self.requests: list[httpx.Request] = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        if isinstance(self.payload, bytes):
            return httpx.Response(self.status_code, content=self.payload)
        return httpx.Response(self.status_code, content=json.dumps(self.payload).encode())

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)


def success_payload(image_bytes: bytes) -> dict:
    return {"created": 1700000000, "data": [{"b64_json": base64.b64encode(image_bytes).decode()}]}


def parse_multipart(body: bytes, content_type: str) -> list[tuple[dict[str, str], bytes]]:
    """Split a multipart body into (headers, content) pairs using the boundary from content_type."""
    boundary = content_type.split("boundary=")[1].encode()
    chunks = body.split(b"--" + boundary)
    assert chunks[-1].startswith(b"--"), "body must end with the closing boundary"

    parts = []
    for chunk in chunks[1:-1]:
        chunk = chunk[2:-2]  # leading and trailing CRLF
        raw_headers, content = chunk.split(b"\r\n\r\n", 1)
        headers = {}
        for line in raw_headers.decode().split("\r\n"):
            key, value = line.split(": ", 1)
            headers[key.lower()] = value
        parts.append((headers, content))
    return parts


@pytest.fixture
def png_image(tmp_path):
    """A foreground image on disk."""
    path = tmp_path / "assets" / "cat.png"
    path.parent.mkdir()
    path.write_bytes(PNG_BYTES)
    return path


@pytest.fixture
def jpeg_background(tmp_path):
    """A background image on disk."""
    path = tmp_path / "assets" / "room.jpg"
    path.parent.mkdir(exist_ok=True)
    path.write_bytes(JPEG_BYTES)
    return path


@pytest.fixture
def token_provider():
    """Fixture for a working token provider."""
    return MockTokenProvider()


@pytest.fixture
def azure_env(monkeypatch):
    """Azure OpenAI configuration in the environment."""
    monkeypatch.setenv("AZURE_OPENAI_RESOURCE", "myres.openai.azure.com")
    monkeypatch.setenv("AZURE_OPENAI_DEPLOYMENT", "gpt-image-1")
    monkeypatch.setenv("AZURE_OPENAI_API_VERSION", "2025-04-01-preview")
