"""Azure identity token provider."""

import logging

from azure.core.exceptions import ClientAuthenticationError
from azure.identity import DefaultAzureCredential

from imageedit.models.errors import ErrorCode, ImageEditError

logger = logging.getLogger(__name__)

COGNITIVE_SERVICES_SCOPE = "https://cognitiveservices.azure.com/.default"


class AzureCredentialTokenProvider:
    """Token provider backed by DefaultAzureCredential.

    The credential chain (environment variables, managed identity, Azure CLI
    token cache, ...) is resolved by azure-identity; no ``az`` binary is needed.
    A fresh credential is built for every call and nothing is cached.
    """

    def __init__(self, **credential_kwargs):
        """
        Initialize the provider.

        Args:
            **credential_kwargs: Passed through to DefaultAzureCredential
                (e.g., exclude_interactive_browser_credential=True)
        """
        self._credential_kwargs = credential_kwargs

    def get_token(self, *scopes: str) -> str:
        scopes = scopes or (COGNITIVE_SERVICES_SCOPE,)
        try:
            with DefaultAzureCredential(**self._credential_kwargs) as credential:
                access_token = credential.get_token(*scopes)
        except ClientAuthenticationError as e:
            raise ImageEditError(
                ErrorCode.CREDENTIAL_UNAVAILABLE,
                f"Error obtaining Azure access token: {e.message or str(e)}",
                original_exception=e,
            )
        except Exception as e:
            raise ImageEditError(
                ErrorCode.CREDENTIAL_UNAVAILABLE,
                f"Error obtaining Azure access token: {str(e)}",
                original_exception=e,
            )

        logger.debug(f"🔑 [Credential] Acquired token for {', '.join(scopes)} (expires_on={access_token.expires_on})")
        return access_token.token
