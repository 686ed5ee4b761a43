"""
Container app token service.

Fetches the short-lived token and log stream endpoint used to open an
exec session:

    POST {arm_endpoint}{resource_id}/getAuthToken?api-version={api_version}
"""

import logging
from typing import Optional

import httpx
from pydantic import ValidationError

from ...config.provider import TokenServiceConfig
from ..api.models import AuthTokenResponse
from ..errors import TokenAcquisitionError

logger = logging.getLogger(__name__)


class ContainerAppTokenService:
    """Token service backed by the management REST API."""

    def __init__(
        self,
        config: TokenServiceConfig,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize token service.

        Args:
            config: Endpoint, credentials and TLS settings
            transport: Optional httpx transport (used by tests)
        """
        self.config = config
        self._transport = transport

    def _token_url(self, resource_id: str) -> str:
        if not resource_id.startswith("/"):
            raise TokenAcquisitionError(resource_id, "resource id must start with '/'")
        return f"{self.config.arm_endpoint}{resource_id}/getAuthToken"

    async def get_auth_token(self, resource_id: str) -> AuthTokenResponse:
        """
        Request an exec token for a container app.

        Args:
            resource_id: Full resource id of the container app

        Returns:
            Parsed token response

        Raises:
            TokenAcquisitionError: HTTP failure or unusable response body
        """
        url = self._token_url(resource_id)
        headers = {"Authorization": f"Bearer {self.config.access_token}"}
        params = {"api-version": self.config.api_version}

        logger.debug(f"Requesting auth token for {resource_id}")

        try:
            async with httpx.AsyncClient(
                timeout=self.config.timeout,
                verify=self.config.verify,
                transport=self._transport,
            ) as client:
                response = await client.post(url, headers=headers, params=params)
                response.raise_for_status()
                payload = response.json()
        except httpx.HTTPStatusError as e:
            raise TokenAcquisitionError(
                resource_id, f"token service returned {e.response.status_code}"
            ) from e
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise TokenAcquisitionError(resource_id, str(e)) from e
        except ValueError as e:
            raise TokenAcquisitionError(resource_id, f"invalid JSON body: {e}") from e

        try:
            token = AuthTokenResponse.model_validate(payload)
        except ValidationError as e:
            raise TokenAcquisitionError(resource_id, f"unexpected response: {e}") from e

        logger.info(f"Auth token acquired for {resource_id}")
        return token
