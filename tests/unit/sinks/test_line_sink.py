"""Unit tests for LineFileSink."""

from __future__ import annotations

import uuid

import pytest

from manta.sharkspotter.core.exceptions import SinkWriteError
from manta.sharkspotter.runtime.classifier import MatchLine
from manta.sharkspotter.sinks.lines import LineFileSink

OWNER = uuid.UUID("930896af-bf8c-48d4-885c-6573a94b1853")


def match_line(n: int, *locations: str) -> MatchLine:
    return MatchLine(owner_id=OWNER, object_id=uuid.UUID(int=n), location_ids=locations)


@pytest.mark.asyncio
async def test_line_sink_writes_one_line_per_match(tmp_path):
    """Test the line format: owner, object, then storage ids."""
    path = tmp_path / "2.moray.example.com.1.out"
    sink = LineFileSink(path)

    written = await sink.write([match_line(1, "1.stor", "3.stor"), match_line(2, "3.stor")])
    await sink.close()

    assert written == 2
    assert sink.lines_written == 2
    assert path.read_text().splitlines() == [
        f"{OWNER} {uuid.UUID(int=1)} 1.stor 3.stor",
        f"{OWNER} {uuid.UUID(int=2)} 3.stor",
    ]


@pytest.mark.asyncio
async def test_line_sink_flushes_each_batch(tmp_path):
    """Test that a batch is on disk before the sink is closed."""
    path = tmp_path / "out"
    sink = LineFileSink(path)

    await sink.write([match_line(1, "3.stor")])

    assert path.read_text() == f"{OWNER} {uuid.UUID(int=1)} 3.stor\n"
    await sink.close()


@pytest.mark.asyncio
async def test_line_sink_appends(tmp_path):
    """Test that an existing file is appended to, not truncated."""
    path = tmp_path / "out"
    path.write_text("previous\n")

    sink = LineFileSink(path)
    await sink.write([match_line(1, "3.stor")])
    await sink.close()

    assert path.read_text().splitlines()[0] == "previous"
    assert len(path.read_text().splitlines()) == 2


@pytest.mark.asyncio
async def test_line_sink_close_is_idempotent(tmp_path):
    """Test closing twice and writing after close."""
    sink = LineFileSink(tmp_path / "out")
    await sink.close()
    await sink.close()

    assert await sink.write([]) == 0
    with pytest.raises(SinkWriteError, match="closed"):
        await sink.write([match_line(1, "3.stor")])


def test_line_sink_open_failure(tmp_path):
    """Test that an unopenable path raises SinkWriteError."""
    with pytest.raises(SinkWriteError, match="cannot open"):
        LineFileSink(tmp_path / "missing-dir" / "out")
