"""imageedit - Azure OpenAI image edits from the command line."""

from imageedit.models.errors import ErrorCode, ImageEditError, RemoteAPIError
from imageedit.models.metrics import EditMetrics
from imageedit.models.requests import ImageEditRequest
from imageedit.models.responses import ImageEditResponse, ImageEditResult
from imageedit.providers.azure_credential import AzureCredentialTokenProvider
from imageedit.providers.base import TokenProvider
from imageedit.services.image_edit_service import ImageEditService, save_image
from imageedit.services.multipart import build_multipart_body
from imageedit.utils.path_utils import derive_output_path

__version__ = "0.1.0"

__all__ = [
    # Request/Response types
    "ImageEditRequest",
    "ImageEditResponse",
    "ImageEditResult",
    "EditMetrics",
    # Errors
    "ErrorCode",
    "ImageEditError",
    "RemoteAPIError",
    # Providers
    "TokenProvider",
    "AzureCredentialTokenProvider",
    # Services
    "ImageEditService",
    "build_multipart_body",
    "save_image",
    # Utilities
    "derive_output_path",
]
