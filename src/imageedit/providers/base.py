"""Base provider interface for bearer token acquisition."""

from typing import Protocol

from typing_extensions import runtime_checkable


@runtime_checkable
class TokenProvider(Protocol):
    """Protocol for bearer token sources."""

    def get_token(self, *scopes: str) -> str:
        """
        Acquire a bearer token for the given scopes.

        Args:
            *scopes: Audience scopes (e.g., "https://cognitiveservices.azure.com/.default")

        Returns:
            The raw token string, without the "Bearer " prefix

        Raises:
            ImageEditError: CREDENTIAL_UNAVAILABLE when no credential source resolves
        """
        ...
