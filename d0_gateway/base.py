"""
Base API client with common functionality for external API providers
"""

import time
from abc import ABC, abstractmethod
from typing import Any

import httpx

from core.exceptions import DecodeError, ExternalAPIError
from core.logging import get_logger


class BaseAPIClient(ABC):
    """Abstract base class for all external API clients"""

    def __init__(
        self,
        provider: str,
        api_key: str,
        base_url: str | None = None,
        timeout: float = 30.0,
        client: httpx.AsyncClient | None = None,
    ):
        self.provider = provider
        self.api_key = api_key
        self.base_url = base_url or self._get_base_url()
        self.logger = get_logger(f"gateway.{provider}", domain="d0")

        # HTTP client with proper timeouts
        self.client = client or httpx.AsyncClient(timeout=httpx.Timeout(timeout), headers=self._get_headers())

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.aclose()

    async def aclose(self) -> None:
        await self.client.aclose()

    @abstractmethod
    def _get_base_url(self) -> str:
        """Get the base URL for this provider"""

    @abstractmethod
    def _get_headers(self) -> dict[str, str]:
        """Get headers sent with every request"""

    async def make_request(self, method: str, endpoint: str, **kwargs) -> dict[str, Any]:
        """
        Make an API request and decode its JSON body

        Args:
            method: HTTP method (GET, POST, etc.)
            endpoint: API endpoint path
            **kwargs: Additional arguments passed to httpx

        Returns:
            Dict containing the API response

        Raises:
            ExternalAPIError: On transport failure or an HTTP error status
            DecodeError: When the response body is not a JSON object
        """
        url = f"{self.base_url.rstrip('/')}/{endpoint.lstrip('/')}"
        start_time = time.monotonic()

        try:
            response = await self.client.request(method, url, **kwargs)
        except httpx.HTTPError as e:
            self.logger.warning(f"{method} {endpoint} failed: {e}")
            raise ExternalAPIError(provider=self.provider, message=str(e) or e.__class__.__name__) from e

        duration_ms = int((time.monotonic() - start_time) * 1000)
        self.logger.debug(
            f"{method} {endpoint} -> {response.status_code}",
            extra={"status_code": response.status_code, "duration_ms": duration_ms},
        )

        if response.status_code >= 400:
            raise ExternalAPIError(
                provider=self.provider,
                message=f"HTTP {response.status_code}",
                status_code=response.status_code,
                response_body=response.text,
            )

        try:
            payload = response.json()
        except ValueError as e:
            raise DecodeError(f"{self.provider} returned a non-JSON body for {endpoint}", provider=self.provider) from e

        if not isinstance(payload, dict):
            raise DecodeError(f"{self.provider} returned {type(payload).__name__}, expected an object", provider=self.provider)

        return payload
