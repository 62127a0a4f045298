"""Chunk handler: range query -> classifier -> sink."""

from __future__ import annotations

from contextlib import aclosing
from typing import Any

from ..core.enums import DecisionReason
from ..io.query import QueryService
from ..sinks.base import RecordSink
from .chunking.definitions import Chunk, ChunkOutcome
from .classifier import RecordClassifier


class RowChunkHandler:
    """Processes one chunk of the id space.

    Streams the chunk's rows from the query service, classifies each and
    buffers what is kept. The buffer is handed to the sink only after the
    stream has ended without error, so an attempt aborted by overload
    writes nothing and its retry starts from a clean buffer.
    """

    def __init__(
        self, service: QueryService, classifier: RecordClassifier, sink: RecordSink
    ) -> None:
        self._service = service
        self._classifier = classifier
        self._sink = sink

    async def __call__(self, chunk: Chunk) -> ChunkOutcome:
        kept: list[Any] = []
        rows_seen = 0
        discarded = 0
        part_records = 0

        rows = self._service.find_range(chunk.column, chunk.begin, chunk.end, limit=chunk.size)
        async with aclosing(rows):
            async for row in rows:
                rows_seen += 1
                decision = self._classifier.classify_row(row)
                if decision.keep:
                    kept.append(decision.extracted)
                elif decision.reason is DecisionReason.PART_RECORD:
                    part_records += 1
                else:
                    discarded += 1

        written = await self._sink.write(kept) if kept else 0
        return ChunkOutcome(
            rows_seen=rows_seen,
            kept=len(kept),
            discarded=discarded,
            part_records_discarded=part_records,
            written=written,
        )
