"""Base async API client for metadata sources."""
from typing import Optional, Dict, Any
from abc import ABC, abstractmethod

import httpx

from paper_registry.models.records import WorkMetadata
from paper_registry.utils.errors import APIError, NotFoundError
from paper_registry.utils.logging import get_logger

logger = get_logger(__name__)


class BaseAPIClient(ABC):
    """Abstract base API client. Requests are issued once; nothing is retried."""

    def __init__(
        self,
        base_url: str,
        timeout: int = 30,
        headers: Optional[Dict[str, str]] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        """
        Initialize API client.

        Args:
            base_url: Base URL for API
            timeout: Request timeout in seconds
            headers: Headers sent with every request
            client: Pre-built httpx client (tests pass a mock)
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.client = client or httpx.AsyncClient(timeout=timeout, headers=headers)

    async def _make_request(
        self,
        method: str,
        endpoint: str,
        params: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> Dict[str, Any]:
        """
        Make HTTP request.

        Args:
            method: HTTP method (GET, POST, etc.)
            endpoint: API endpoint
            params: Query parameters
            headers: Request headers

        Returns:
            JSON response as dictionary

        Raises:
            NotFoundError: If the resource does not exist (404)
            APIError: If the request fails for any other reason
        """
        url = f"{self.base_url}/{endpoint}"

        try:
            response = await self.client.request(
                method=method, url=url, params=params, headers=headers
            )

            if response.status_code == 404:
                raise NotFoundError(f"Not found: {endpoint}")

            response.raise_for_status()
            return response.json()

        except httpx.HTTPStatusError as e:
            logger.error(f"HTTP error {e.response.status_code}: {e}")
            raise APIError(f"HTTP {e.response.status_code}: {str(e)}")
        except httpx.RequestError as e:
            logger.error(f"Request error: {e}")
            raise APIError(f"Request failed: {str(e)}")
        except ValueError as e:
            logger.error(f"Invalid JSON from {url}: {e}")
            raise APIError(f"Invalid JSON response: {str(e)}")

    async def close(self):
        """Close HTTP client."""
        await self.client.aclose()

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info):
        await self.close()

    @abstractmethod
    async def fetch(self, doi: str) -> WorkMetadata:
        """Get work metadata for a DOI. Must be implemented by subclass."""
        pass
