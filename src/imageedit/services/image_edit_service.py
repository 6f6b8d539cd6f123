"""Image edit service: one authenticated multipart POST to Azure OpenAI."""

import asyncio
import json
import logging
import os
import time
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timezone
from pathlib import Path

import httpx

from imageedit.models.errors import ErrorCode, ImageEditError
from imageedit.models.metrics import EditMetrics
from imageedit.models.requests import ImageEditRequest
from imageedit.models.responses import ImageEditResponse, ImageEditResult
from imageedit.providers.azure_credential import COGNITIVE_SERVICES_SCOPE, AzureCredentialTokenProvider
from imageedit.providers.base import TokenProvider
from imageedit.services.multipart import build_multipart_body

logger = logging.getLogger(__name__)

# Image generation is slow; a single call can take minutes
DEFAULT_TIMEOUT_SECONDS = 300.0


def save_image(output_path: str | Path, image_bytes: bytes) -> Path:
    """
    Write decoded image bytes, creating the parent directory if needed.

    Raises:
        ImageEditError: OUTPUT_WRITE_FAILED
    """
    path = Path(output_path)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(image_bytes)
    except OSError as e:
        raise ImageEditError(
            ErrorCode.OUTPUT_WRITE_FAILED,
            f"Error writing output file {path}: {e}",
            original_exception=e,
        )
    return path


class ImageEditService:
    """Client for the Azure OpenAI ``/images/edits`` endpoint.

    Every failure is terminal: nothing is retried, and the output file is only
    written after the response has been fully read and decoded.
    """

    def __init__(
        self,
        resource_host: str | None = None,
        deployment: str | None = None,
        api_version: str | None = None,
        token_provider: TokenProvider | None = None,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        scope: str = COGNITIVE_SERVICES_SCOPE,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """
        Initialize image edit service.

        Args:
            resource_host: Azure OpenAI host (defaults to AZURE_OPENAI_RESOURCE env var)
            deployment: Deployment name (defaults to AZURE_OPENAI_DEPLOYMENT env var)
            api_version: API version (defaults to AZURE_OPENAI_API_VERSION env var)
            token_provider: Bearer token source (defaults to DefaultAzureCredential)
            timeout_seconds: Upper bound for the whole HTTP call
            scope: Token audience scope
            transport: Optional httpx transport (used by tests)
        """
        self.resource_host = resource_host or os.getenv("AZURE_OPENAI_RESOURCE")
        self.deployment = deployment or os.getenv("AZURE_OPENAI_DEPLOYMENT")
        self.api_version = api_version or os.getenv("AZURE_OPENAI_API_VERSION")

        if not self.resource_host:
            raise ValueError("AZURE_OPENAI_RESOURCE environment variable or resource_host parameter is required")
        if not self.deployment:
            raise ValueError("AZURE_OPENAI_DEPLOYMENT environment variable or deployment parameter is required")
        if not self.api_version:
            raise ValueError("AZURE_OPENAI_API_VERSION environment variable or api_version parameter is required")

        host = self.resource_host.removeprefix("https://").rstrip("/")
        self.endpoint = (
            f"https://{host}/openai/deployments/{self.deployment}/images/edits?api-version={self.api_version}"
        )
        try:
            httpx.URL(self.endpoint)
        except httpx.InvalidURL as e:
            raise ValueError(f"Invalid Azure OpenAI endpoint {self.endpoint!r}: {e}") from e

        self.token_provider = token_provider or AzureCredentialTokenProvider()
        self.timeout_seconds = timeout_seconds
        self.scope = scope
        self._transport = transport

    async def acquire_token(self) -> str:
        """Fetch a fresh bearer token; credential SDKs are synchronous so this runs in a thread."""
        loop = asyncio.get_running_loop()
        with ThreadPoolExecutor(max_workers=1) as executor:
            return await loop.run_in_executor(executor, self.token_provider.get_token, self.scope)

    async def send(self, body: bytes, content_type: str, token: str) -> tuple[bytes, int]:
        """
        POST a prebuilt multipart body and return the raw response body and status.

        Raises:
            ImageEditError: PROVIDER_TIMEOUT or TRANSPORT_FAILED
        """
        headers = {
            "Authorization": f"Bearer {token}",
            "Content-Type": content_type,
        }

        # httpx applies its timeout per connect/read/write step; wait_for caps the whole call
        try:
            async with httpx.AsyncClient(timeout=self.timeout_seconds, transport=self._transport) as client:
                response = await asyncio.wait_for(
                    client.post(self.endpoint, content=body, headers=headers),
                    timeout=self.timeout_seconds,
                )
                raw = response.content
        except asyncio.TimeoutError as e:
            raise ImageEditError(
                ErrorCode.PROVIDER_TIMEOUT,
                f"Image edit request timed out after {self.timeout_seconds}s",
                original_exception=e,
            )
        except httpx.TimeoutException as e:
            raise ImageEditError(
                ErrorCode.PROVIDER_TIMEOUT,
                f"Image edit request timed out after {self.timeout_seconds}s: {str(e)}",
                original_exception=e,
            )
        except httpx.HTTPError as e:
            raise ImageEditError(
                ErrorCode.TRANSPORT_FAILED,
                f"Error sending request: {str(e)}",
                original_exception=e,
            )

        if response.status_code >= 400:
            logger.warning(f"⚠️ [ImageEditService] Endpoint returned HTTP {response.status_code}")
        return raw, response.status_code

    async def edit(self, request: ImageEditRequest, output_path: str | Path) -> ImageEditResult:
        """
        Run one image edit and write the result to ``output_path``.

        Args:
            request: Images, prompt and size to send
            output_path: Destination file for the decoded image

        Returns:
            ImageEditResult with the written path and call metrics

        Raises:
            RemoteAPIError: The endpoint returned a structured error
            ImageEditError: Any other failure (credential, build, transport, decode, write)
        """
        start_time = time.time()

        input_json = json.dumps({
            "images": [str(p) for p in request.image_paths],
            "prompt_length": len(request.prompt),
            "size": request.size,
            "n": request.n,
        })

        token = await self.acquire_token()

        body, content_type = build_multipart_body(
            request.image_paths,
            request.prompt,
            request.size,
            url=self.endpoint,
        )

        logger.info(
            f"📤 [ImageEditService] POST {len(body)} bytes ({len(request.image_paths)} x {request.field_name}) "
            f"to deployment {self.deployment} (api-version {self.api_version})"
        )
        raw, status_code = await self.send(body, content_type, token)

        response = ImageEditResponse.from_bytes(raw)
        image_bytes = response.decode_image(status_code=status_code)

        written = save_image(output_path, image_bytes)

        metrics = EditMetrics(
            duration_ms=int((time.time() - start_time) * 1000),
            image_bytes=len(image_bytes),
            deployment=self.deployment,
            timestamp=datetime.now(timezone.utc),
            input=input_json,
        )
        logger.info(f"✅ [ImageEditService] Wrote {written} ({metrics.size_mb:.2f} MB) in {metrics.duration_ms}ms")

        return ImageEditResult(output_path=written, metrics=metrics)
