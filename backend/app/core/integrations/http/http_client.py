"""
Generic async HTTP client wrapper using aiohttp.
Each call is a single attempt; failures propagate to the caller.
"""

from typing import Optional, Dict, Any
import aiohttp
import logging

logger = logging.getLogger(__name__)


class HttpClient:
    """
    Async JSON HTTP client used for calls to internal platform services.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: int = 30,
        headers: Optional[Dict[str, str]] = None,
    ):
        """
        Initialize HTTP client.

        Args:
            base_url: Optional base URL for all requests
            timeout: Request timeout in seconds
            headers: Headers sent with every request
        """
        self.base_url = base_url
        self.timeout = aiohttp.ClientTimeout(total=timeout)
        self.headers = headers or {}
        self._session: Optional[aiohttp.ClientSession] = None

    async def _get_session(self) -> aiohttp.ClientSession:
        """Get or create aiohttp session."""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(timeout=self.timeout, headers=self.headers)
        return self._session

    async def close(self) -> None:
        """Close the HTTP session."""
        if self._session and not self._session.closed:
            await self._session.close()

    def _build_url(self, endpoint: str) -> str:
        """Build full URL from endpoint."""
        if self.base_url:
            return f"{self.base_url.rstrip('/')}/{endpoint.lstrip('/')}"
        return endpoint

    async def post(
        self,
        endpoint: str,
        json: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> Dict[str, Any]:
        """
        Make a single POST request.

        Args:
            endpoint: API endpoint
            json: JSON payload
            headers: Request headers

        Returns:
            JSON response as dictionary (empty for non-JSON bodies)

        Raises:
            aiohttp.ClientError: on transport errors and HTTP status >= 400
            asyncio.TimeoutError: when the request timed out
        """
        url = self._build_url(endpoint)
        session = await self._get_session()
        try:
            async with session.post(url, json=json, headers=headers) as response:
                response.raise_for_status()
                if response.content_type == "application/json":
                    return await response.json()
                return {}
        except aiohttp.ClientError as e:
            logger.error(f"POST {url} failed: {e}")
            raise
