"""Scan orchestration.

``ScanOrchestrator`` runs one scan session end to end:

1. resolve the primary maximum (fatal on failure) and the overflow maximum
   (absent on failure),
2. settle the requested end: the configured one, or the larger maximum,
3. sweep the primary column over ``[begin, min(end, primary_max)]``,
4. sweep the overflow column over ``[max(primary_max + 1, begin), end]``,
   skipped when there is no overflow column or that begin lies past end,
5. report a ``ScanSummary``: success, or the first unrecoverable error.

Ranges run strictly one after the other and the primary sweep is exhausted
before the overflow sweep starts, so no id is queried twice. A failed range
ends the session; later ranges are not started.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from time import perf_counter
from typing import Any

from ..core.config import DEFAULT_CHUNK_SIZE, ScanConfig
from ..core.enums import IdColumn, ScanMode
from ..core.exceptions import BoundaryResolutionError
from ..filters.bitmap import BitAddressFilter
from ..io.gateway import SQLGatewayQueryService
from ..io.query import QueryService
from ..sinks.base import RecordSink
from ..sinks.filter import FilterSink
from ..sinks.lines import LineFileSink
from .chunking.backoff import OverloadBackoffPolicy, Sleep
from .chunking.definitions import ChunkPolicy, RangeResult, ScanRange
from .chunking.iterator import ChunkIterator
from .classifier import RecordClassifier
from .handler import RowChunkHandler
from .resolver import ScanBounds, ScanRangeResolver

logger = logging.getLogger(__name__)


@dataclass
class ScanSession:
    """Mutable state of the running session, owned by the orchestrator."""

    requested_begin: int
    requested_end: int | None = None
    primary_max: int | None = None
    overflow_max: int | None = None
    current_column: IdColumn | None = None
    remaining_in_current_range: int = 0


@dataclass
class ScanSummary:
    """Terminal report of a scan session."""

    requested_begin: int
    requested_end: int | None = None
    bounds: ScanBounds | None = None
    primary: RangeResult | None = None
    overflow: RangeResult | None = None
    error: BaseException | None = None
    duration_ms: float = 0.0

    @property
    def succeeded(self) -> bool:
        return self.error is None

    @property
    def ranges(self) -> list[RangeResult]:
        return [r for r in (self.primary, self.overflow) if r is not None]

    def _total(self, name: str) -> int:
        return sum(getattr(r, name) for r in self.ranges)

    @property
    def chunks_completed(self) -> int:
        return self._total("chunks_completed")

    @property
    def rows_seen(self) -> int:
        return self._total("rows_seen")

    @property
    def kept(self) -> int:
        return self._total("kept")

    @property
    def discarded(self) -> int:
        return self._total("discarded")

    @property
    def part_records_discarded(self) -> int:
        return self._total("part_records_discarded")

    @property
    def written(self) -> int:
        return self._total("written")

    @property
    def overload_retries(self) -> int:
        return self._total("overload_retries")

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "succeeded": self.succeeded,
            "requested_begin": self.requested_begin,
            "requested_end": self.requested_end,
            "primary_max": self.bounds.primary_max if self.bounds else None,
            "overflow_max": self.bounds.overflow_max if self.bounds else None,
            "ranges": [
                {
                    "column": r.scan_range.column.value,
                    "begin_id": r.scan_range.begin,
                    "end_id": r.scan_range.end,
                    "state": r.state.value,
                    "chunks_completed": r.chunks_completed,
                    "ids_to_go": r.remaining,
                }
                for r in self.ranges
            ],
            "chunks_completed": self.chunks_completed,
            "rows_seen": self.rows_seen,
            "kept": self.kept,
            "discarded": self.discarded,
            "part_records_discarded": self.part_records_discarded,
            "written": self.written,
            "overload_retries": self.overload_retries,
            "error": None if self.error is None else f"{type(self.error).__name__}: {self.error}",
            "duration_ms": self.duration_ms,
        }


class ScanOrchestrator:
    """Resolves boundaries and sweeps both id columns in order."""

    def __init__(
        self,
        service: QueryService,
        classifier: RecordClassifier,
        sink: RecordSink,
        *,
        begin: int = 0,
        end: int | None = None,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        backoff: OverloadBackoffPolicy | None = None,
    ) -> None:
        """Initialize the orchestrator.

        Args:
            service: Query service for boundary and range queries
            classifier: Decides which rows are kept
            sink: Receives kept rows, one batch per chunk
            begin: First id to scan
            end: Last id to scan (None = the larger of the two column maxima)
            chunk_size: Ids per range query
            backoff: Overload policy wrapping each chunk
        """
        if begin < 0:
            raise ValueError("begin must be non-negative")
        if end is not None and end < begin:
            raise ValueError("begin must not exceed end")
        self._service = service
        self._classifier = classifier
        self._sink = sink
        self._begin = begin
        self._end = end
        self._policy = ChunkPolicy(chunk_size=chunk_size)
        self._backoff = backoff or OverloadBackoffPolicy()
        self._session: ScanSession | None = None

    @classmethod
    def from_config(
        cls,
        config: ScanConfig,
        *,
        service: QueryService | None = None,
        sink: RecordSink | None = None,
        sleep: Sleep | None = None,
        pid: int | None = None,
    ) -> ScanOrchestrator:
        """Wire up an orchestrator from validated configuration.

        The result file (audit) or filter file (membership) is opened here.
        """
        if config.mode is ScanMode.AUDIT:
            classifier = RecordClassifier.for_audit(
                config.target_location_id, exclude_part_records=config.exclude_part_records
            )
            if sink is None:
                sink = LineFileSink(config.output_path(pid))
        else:
            classifier = RecordClassifier.for_membership(
                exclude_part_records=config.exclude_part_records
            )
            if sink is None:
                sink = FilterSink(BitAddressFilter(config.filter_path))

        if service is None:
            service = SQLGatewayQueryService(
                config.resolved_gateway_url, timeout=config.request_timeout
            )

        backoff = OverloadBackoffPolicy(
            delay=config.backoff_delay,
            max_retries=config.max_overload_retries,
            sleep=sleep,
        )
        return cls(
            service,
            classifier,
            sink,
            begin=config.begin,
            end=config.end,
            chunk_size=config.chunk_size,
            backoff=backoff,
        )

    @property
    def session(self) -> ScanSession | None:
        return self._session

    async def run(self, *, cancel: asyncio.Event | None = None) -> ScanSummary:
        """Run the session to completion or first unrecoverable error.

        Args:
            cancel: Event checked between chunks and during overload waits

        Returns:
            ScanSummary; ``summary.error`` holds the failure, if any
        """
        start = perf_counter()
        session = ScanSession(requested_begin=self._begin, requested_end=self._end)
        self._session = session
        summary = ScanSummary(requested_begin=self._begin, requested_end=self._end)
        logger.info(
            "scan_session_begin",
            extra={
                "begin_id": self._begin,
                "last_id": self._end,
                "chunk_size": self._policy.chunk_size,
                "mode": self._classifier.mode.value,
            },
        )

        try:
            bounds = await ScanRangeResolver(self._service).resolve()
        except BoundaryResolutionError as e:
            summary.error = e
            return self._finish(summary, start)

        summary.bounds = bounds
        session.primary_max = bounds.primary_max
        session.overflow_max = bounds.overflow_max
        requested_end = self._end if self._end is not None else bounds.largest
        session.requested_end = requested_end
        summary.requested_end = requested_end

        iterator = ChunkIterator(self._policy, self._backoff)
        handler = RowChunkHandler(self._service, self._classifier, self._sink)

        primary_range = ScanRange(
            column=IdColumn.PRIMARY,
            begin=self._begin,
            end=max(requested_end, self._begin - 1),
        )
        summary.primary = await self._run_range(
            iterator, handler, primary_range, ceiling=bounds.primary_max, cancel=cancel
        )
        if not summary.primary.succeeded:
            summary.error = summary.primary.error
            return self._finish(summary, start)

        overflow_range = self._overflow_range(bounds, requested_end)
        if overflow_range is not None:
            summary.overflow = await self._run_range(
                iterator, handler, overflow_range, ceiling=None, cancel=cancel
            )
            if not summary.overflow.succeeded:
                summary.error = summary.overflow.error

        return self._finish(summary, start)

    def _overflow_range(self, bounds: ScanBounds, requested_end: int) -> ScanRange | None:
        if bounds.overflow_max is None:
            logger.info("no overflow column; skipping _idx scan")
            return None
        begin = max(bounds.primary_max + 1, self._begin)
        if begin > requested_end:
            logger.info(
                "scan ends before the _idx range begins; skipping _idx scan",
                extra={"begin_id": begin, "last_id": requested_end},
            )
            return None
        return ScanRange(column=IdColumn.OVERFLOW, begin=begin, end=requested_end)

    async def _run_range(
        self,
        iterator: ChunkIterator,
        handler: RowChunkHandler,
        scan_range: ScanRange,
        *,
        ceiling: int | None,
        cancel: asyncio.Event | None,
    ) -> RangeResult:
        session = self._session
        session.current_column = scan_range.column
        session.remaining_in_current_range = scan_range.size
        result = await iterator.run(
            scan_range,
            handler,
            ceiling=ceiling,
            last_id=session.requested_end,
            cancel=cancel,
        )
        session.remaining_in_current_range = result.remaining
        return result

    def _finish(self, summary: ScanSummary, start: float) -> ScanSummary:
        summary.duration_ms = (perf_counter() - start) * 1000.0
        fields = {
            "chunks_completed": summary.chunks_completed,
            "kept": summary.kept,
            "discarded": summary.discarded,
            "part_records_discarded": summary.part_records_discarded,
            "overload_retries": summary.overload_retries,
            "duration_ms": summary.duration_ms,
        }
        if summary.succeeded:
            logger.info("scan_session_complete", extra=fields)
        else:
            logger.error(
                "scan_session_failed",
                extra={
                    **fields,
                    "error_type": type(summary.error).__name__,
                    "error_message": str(summary.error),
                },
            )
        return summary

    async def close(self) -> None:
        """Close the query service, then flush and close the sink."""
        try:
            await self._service.close()
        finally:
            await self._sink.close()

    async def __aenter__(self) -> ScanOrchestrator:
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()
