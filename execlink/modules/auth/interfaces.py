"""Token service interfaces following Black Box Design principles."""
from typing import Protocol

from ..api.models import AuthTokenResponse


class TokenService(Protocol):
    """Protocol for exec token acquisition - allows swappable implementations."""

    async def get_auth_token(self, resource_id: str) -> AuthTokenResponse:
        """
        Request a short-lived token for a container app.

        Args:
            resource_id: Full resource id of the container app

        Returns:
            Token response carrying the log stream endpoint

        Raises:
            TokenAcquisitionError: The request failed
        """
        ...
