"""HTTP session for the SQL gateway.

Wraps one lazily created ``aiohttp.ClientSession``. Responses are handed to
the caller unread so newline-delimited row streams can be consumed line by
line instead of buffered whole.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

import aiohttp

DEFAULT_HEADERS = {
    "Accept": "application/x-ndjson, application/json",
    "User-Agent": "sharkspotter",
}


class HTTPClient:
    """Async HTTP client bound to one gateway base URL."""

    def __init__(self, base_url: str | None = None, timeout: float = 30.0) -> None:
        self.base_url = base_url
        # one chunk query may stream for a long time; only the total is bounded
        self.timeout = aiohttp.ClientTimeout(total=timeout)
        self._session: aiohttp.ClientSession | None = None

    @property
    def session(self) -> aiohttp.ClientSession:
        """Get or create session."""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(timeout=self.timeout, headers=DEFAULT_HEADERS)
        return self._session

    def _url(self, path: str) -> str:
        if self.base_url and not path.startswith(("http://", "https://")):
            return f"{self.base_url}{path}"
        return path

    @asynccontextmanager
    async def post_stream(
        self,
        url: str,
        json_body: dict[str, Any],
        headers: dict[str, str] | None = None,
    ) -> AsyncIterator[aiohttp.ClientResponse]:
        """POST a JSON body and yield the open response for streaming reads.

        The status is not checked here; callers inspect it so that error
        bodies can be decoded.
        """
        async with self.session.post(self._url(url), json=json_body, headers=headers) as response:
            yield response

    async def close(self) -> None:
        if self._session is not None and not self._session.closed:
            await self._session.close()
        self._session = None

    async def __aenter__(self) -> HTTPClient:
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()
