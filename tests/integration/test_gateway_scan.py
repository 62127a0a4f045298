"""Integration tests against a live SQL gateway."""

import os

import pytest

from manta.sharkspotter.core.enums import IdColumn
from manta.sharkspotter.io import SQLGatewayQueryService
from manta.sharkspotter.runtime import RecordClassifier, ScanOrchestrator, ScanRangeResolver
from manta.sharkspotter.sinks import InMemorySink

pytestmark = pytest.mark.skipif(
    not os.environ.get("SHARKSPOTTER_GATEWAY_URL"),
    reason="Requires a SQL gateway to scan",
)


class TestGatewayScanIntegration:
    """Test boundary resolution and a short scan against a real shard."""

    @pytest.mark.asyncio
    async def test_resolve_bounds(self, gateway_url):
        """The primary maximum resolves on a live shard."""
        async with SQLGatewayQueryService(gateway_url) as service:
            bounds = await ScanRangeResolver(service).resolve()

        assert bounds.primary_max >= 0

    @pytest.mark.asyncio
    async def test_first_chunk_rows(self, gateway_url):
        """Rows of a small range carry their id and value document."""
        async with SQLGatewayQueryService(gateway_url) as service:
            rows = [r async for r in service.find_range(IdColumn.PRIMARY, 0, 99, limit=100)]

        assert len(rows) <= 100
        for row in rows:
            assert 0 <= int(row["_id"]) <= 99
            assert "_value" in row

    @pytest.mark.asyncio
    async def test_membership_scan_of_small_range(self, gateway_url):
        """Every object in a short range is kept in membership mode."""
        sink = InMemorySink()
        orchestrator = ScanOrchestrator(
            SQLGatewayQueryService(gateway_url),
            RecordClassifier.for_membership(),
            sink,
            begin=0,
            end=999,
            chunk_size=250,
        )
        async with orchestrator:
            summary = await orchestrator.run()

        assert summary.succeeded, summary.error
        assert summary.kept == len(sink.items)
