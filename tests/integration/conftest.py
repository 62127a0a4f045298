"""Shared fixtures for integration tests."""

import os

import pytest

# Skip all integration tests unless SHARKSPOTTER_GATEWAY_URL points at a live gateway
pytestmark = pytest.mark.skipif(
    not os.environ.get("SHARKSPOTTER_GATEWAY_URL"),
    reason="Requires a SQL gateway. Set SHARKSPOTTER_GATEWAY_URL to run",
)


@pytest.fixture
def gateway_url() -> str:
    return os.environ["SHARKSPOTTER_GATEWAY_URL"]
