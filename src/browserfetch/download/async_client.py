"""
Async HTTP Client for browserfetch

This module provides asynchronous retrieval of the upstream release feeds
using aiohttp, with session management and mapping of transport failures onto
the browserfetch error taxonomy.
"""

import asyncio
import json
from typing import Any, Dict, Optional

import aiohttp
from aiohttp import ClientSession, ClientTimeout, TCPConnector

from browserfetch.constants import (
    DEFAULT_CONNECTOR_LIMIT,
    DEFAULT_REQUEST_TIMEOUT,
    HTTP_STATUS_ERROR_THRESHOLD,
)
from browserfetch.exceptions import FetchError, ParseError
from browserfetch.log_utils import logger
from browserfetch.utils import get_user_agent


class AsyncFeedClient:
    """
    Asynchronous JSON feed client using aiohttp.

    Example:
        async with AsyncFeedClient() as client:
            releases = await client.get_json(
                "https://product-details.mozilla.org/1.0/firefox.json"
            )
    """

    def __init__(
        self,
        timeout: float = DEFAULT_REQUEST_TIMEOUT,
        connector_limit: int = DEFAULT_CONNECTOR_LIMIT,
    ) -> None:
        """
        Initialize the async feed client.

        Parameters:
            timeout (float): Total request timeout in seconds.
            connector_limit (int): Maximum total connections in the pool.
        """
        self.timeout = ClientTimeout(total=timeout)
        self.connector_limit = max(1, int(connector_limit))
        self._session: Optional[ClientSession] = None
        self._closed: bool = False

    async def __aenter__(self) -> "AsyncFeedClient":
        await self._ensure_session()
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()

    async def _ensure_session(self) -> ClientSession:
        """
        Ensure a session exists, creating one if needed.

        Returns:
            ClientSession: The active aiohttp session.
        """
        if self._session is None or self._session.closed:
            connector = TCPConnector(
                limit=self.connector_limit,
                enable_cleanup_closed=True,
            )
            self._session = ClientSession(
                connector=connector,
                timeout=self.timeout,
                headers=self._get_default_headers(),
            )
        return self._session

    def _get_default_headers(self) -> Dict[str, str]:
        return {
            "Accept": "application/json",
            "User-Agent": get_user_agent(),
        }

    async def close(self) -> None:
        """Close the client session and release resources."""
        if self._session and not self._session.closed:
            await self._session.close()
            self._session = None
        self._closed = True

    async def get_json(self, url: str) -> Any:
        """
        Fetch `url` and decode its body as JSON.

        Parameters:
            url (str): Feed URL.

        Returns:
            Any: The decoded JSON document.

        Raises:
            FetchError: On connection failures, timeouts, or a non-2xx status.
            ParseError: If the body is not valid JSON.
        """
        session = await self._ensure_session()
        logger.debug(f"Fetching {url}")

        try:
            async with session.get(url) as response:
                if response.status >= HTTP_STATUS_ERROR_THRESHOLD:
                    raise FetchError(
                        f"Request failed with HTTP {response.status}",
                        url=url,
                        status_code=response.status,
                    )
                try:
                    # Feeds are not always served as application/json
                    return await response.json(content_type=None)
                except (json.JSONDecodeError, ValueError) as e:
                    raise ParseError(
                        "Response body is not valid JSON", url=url, details=str(e)
                    ) from e
        except asyncio.TimeoutError as e:
            raise FetchError("Request timed out", url=url) from e
        except aiohttp.ClientError as e:
            raise FetchError("Request failed", url=url, details=str(e)) from e
