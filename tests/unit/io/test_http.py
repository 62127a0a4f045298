"""Unit tests for HTTPClient.

Tests focus on session management and request URL handling.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from unittest.mock import MagicMock

import aiohttp
import pytest

from manta.sharkspotter.io.http import HTTPClient


class TestHTTPClientSessionManagement:
    """Test the lazily created gateway session."""

    def test_init(self):
        """Test the timeout and base URL are kept; no session is opened yet."""
        client = HTTPClient(base_url="http://2.moray.example.com:2020", timeout=10.0)
        assert client.timeout.total == 10.0
        assert client.base_url == "http://2.moray.example.com:2020"
        assert client._session is None

    @pytest.mark.asyncio
    async def test_session_property_creates_session(self):
        """Test the first access opens a session and later ones reuse it."""
        client = HTTPClient()
        session = client.session

        assert isinstance(session, aiohttp.ClientSession)
        assert client.session is session
        await client.close()

    @pytest.mark.asyncio
    async def test_session_property_recreates_closed_session(self):
        """Test a closed session is replaced on next access."""
        client = HTTPClient()
        session1 = client.session
        await session1.close()

        session2 = client.session
        assert session1 is not session2
        assert not session2.closed
        await client.close()

    @pytest.mark.asyncio
    async def test_close_idempotent(self):
        """Test closing twice is harmless."""
        client = HTTPClient()
        _ = client.session
        await client.close()
        await client.close()

    @pytest.mark.asyncio
    async def test_context_manager(self):
        """Test leaving the context closes the session."""
        async with HTTPClient() as client:
            session = client.session

        assert session.closed


class TestHTTPClientRequests:
    """Test request construction."""

    def test_relative_url_joined_to_base(self):
        """Test relative paths are appended to base_url."""
        client = HTTPClient(base_url="http://2.moray.example.com:2020")
        assert client._url("/sql") == "http://2.moray.example.com:2020/sql"
        assert client._url("http://other:2020/sql") == "http://other:2020/sql"

    @pytest.mark.asyncio
    async def test_post_stream_yields_response(self):
        """Test post_stream posts the JSON body and yields the open response."""
        client = HTTPClient(base_url="http://2.moray.example.com:2020")
        response = MagicMock(status=200)
        calls = []

        @asynccontextmanager
        async def fake_post(url, json=None, headers=None):
            calls.append((url, json))
            yield response

        session = MagicMock()
        session.closed = False
        session.post = fake_post
        client._session = session

        async with client.post_stream("/sql", {"query": "SELECT 1;"}) as got:
            assert got is response

        assert calls == [("http://2.moray.example.com:2020/sql", {"query": "SELECT 1;"})]
