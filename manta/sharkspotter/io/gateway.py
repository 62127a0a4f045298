"""Query service over an HTTP SQL gateway.

The gateway accepts ``POST /sql`` with a JSON body::

    {"query": "<statement>", "limit": <n>, "no_count": true}

and answers with newline-delimited JSON, one row per line. Errors are JSON
objects of the form ``{"error": {"name": ..., "message": ...}}``, either as
the whole body of a non-2xx response or as a line in the middle of a stream
(the backend may give up after some rows were already sent).

Overload is recognized by error name (``OverloadedError``) or by HTTP status
429/503 and raised as ``TransientOverloadError``; everything else becomes
``QueryError``.
"""

from __future__ import annotations

import json
import logging
from collections.abc import AsyncIterator
from contextlib import aclosing
from typing import Any

import aiohttp

from ..core.config import DEFAULT_REQUEST_TIMEOUT
from ..core.enums import IdColumn
from ..core.exceptions import QueryError, TransientOverloadError
from .http import HTTPClient
from .query import Row
from .sql import max_statement, range_statement

logger = logging.getLogger(__name__)

OVERLOAD_ERROR_NAMES = frozenset({"OverloadedError"})
OVERLOAD_STATUS_CODES = frozenset({429, 503})


def error_from_payload(payload: Any, status_code: int | None = None) -> QueryError:
    """Map a gateway error document (or raw text) to a scanner exception."""
    name: str | None = None
    message = str(payload)
    if isinstance(payload, dict):
        err = payload.get("error", payload)
        if isinstance(err, dict):
            name = err.get("name")
            message = str(err.get("message") or name or err)
        else:
            message = str(err)

    if name in OVERLOAD_ERROR_NAMES or status_code in OVERLOAD_STATUS_CODES:
        return TransientOverloadError(message, name=name, status_code=status_code or 503)
    return QueryError(message, status_code=status_code, name=name)


class SQLGatewayQueryService:
    """``QueryService`` implementation backed by an HTTP SQL gateway."""

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = DEFAULT_REQUEST_TIMEOUT,
        http: HTTPClient | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self._http = http or HTTPClient(base_url=self.base_url, timeout=timeout)

    async def _rows(self, statement: str, *, limit: int) -> AsyncIterator[Row]:
        body = {"query": statement, "limit": limit, "no_count": True}
        logger.debug("gateway query: %s (limit %d)", statement, limit)
        try:
            async with self._http.post_stream("/sql", body) as response:
                if response.status >= 400:
                    text = await response.text()
                    try:
                        payload: Any = json.loads(text)
                    except ValueError:
                        payload = text or response.reason
                    raise error_from_payload(payload, status_code=response.status)

                async for raw in response.content:
                    line = raw.strip()
                    if not line:
                        continue
                    try:
                        row = json.loads(line)
                    except ValueError as e:
                        raise QueryError(f"undecodable row from gateway: {line[:80]!r}") from e
                    if isinstance(row, dict) and "error" in row:
                        raise error_from_payload(row)
                    yield row
        except (aiohttp.ClientError, TimeoutError) as e:
            raise QueryError(f"gateway request to {self.base_url} failed: {e}") from e
        except ValueError as e:
            # aiohttp raises ValueError for a line longer than its read buffer
            raise QueryError(f"unreadable row stream from {self.base_url}: {e}") from e

    async def max_value(self, column: IdColumn) -> Any:
        async with aclosing(self._rows(max_statement(column), limit=1)) as rows:
            async for row in rows:
                return row.get("max")
        return None

    def find_range(
        self,
        column: IdColumn,
        begin: int,
        end: int,
        *,
        limit: int,
    ) -> AsyncIterator[Row]:
        return self._rows(range_statement(column, begin, end), limit=limit)

    async def close(self) -> None:
        await self._http.close()

    async def __aenter__(self) -> SQLGatewayQueryService:
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()
