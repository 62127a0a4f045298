"""Structured logging for chunked scans.

Every event is logged with a short event name as the message and its fields
in ``extra`` so JSON formatters can pick them up unchanged.
"""

from __future__ import annotations

import logging

from .definitions import Chunk, RangeResult, ScanRange

logger = logging.getLogger(__name__)


def log_range_begin(*, scan_range: ScanRange, chunk_size: int, last_id: int | None) -> None:
    """Log the start of a sweep over one column.

    Args:
        scan_range: Range about to be swept (after clamping)
        chunk_size: Configured chunk size
        last_id: Overall end of the requested scan
    """
    logger.info(
        "scan_range_begin",
        extra={
            "column": scan_range.column.value,
            "begin_id": scan_range.begin,
            "end_id": scan_range.end,
            "ids_to_go": scan_range.size,
            "chunk_size": chunk_size,
            "last_id": last_id,
        },
    )


def log_chunk_begin(*, chunk: Chunk, ids_to_go: int) -> None:
    """Log a chunk query being issued."""
    logger.info(
        "chunk_begin",
        extra={
            "column": chunk.column.value,
            "chunk_index": chunk.chunk_index,
            "begin_id": chunk.begin,
            "end_id": chunk.end,
            "chunk_size": chunk.size,
            "ids_to_go": ids_to_go,
        },
    )


def log_chunk_completed(
    *,
    chunk: Chunk,
    ids_to_go: int,
    kept: int,
    discarded: int,
    latency_ms: float | None = None,
) -> None:
    """Log completion of a single chunk.

    Args:
        chunk: Chunk that completed
        ids_to_go: Ids left in the range after this chunk
        kept: Rows kept by the classifier
        discarded: Rows dropped (non-matching and part records)
        latency_ms: Latency in milliseconds, including overload waits
    """
    logger.info(
        "chunk_completed",
        extra={
            "column": chunk.column.value,
            "chunk_index": chunk.chunk_index,
            "begin_id": chunk.begin,
            "end_id": chunk.end,
            "ids_to_go": ids_to_go,
            "kept": kept,
            "discarded": discarded,
            "duration_ms": latency_ms,
        },
    )


def log_chunk_overload(*, chunk: Chunk, attempt: int, delay_s: float, error: BaseException) -> None:
    """Log a chunk attempt rejected by an overloaded backend."""
    logger.warning(
        "chunk_overload_retry",
        extra={
            "column": chunk.column.value,
            "chunk_index": chunk.chunk_index,
            "begin_id": chunk.begin,
            "end_id": chunk.end,
            "attempt": attempt,
            "delay_s": delay_s,
            "error_message": str(error),
        },
    )


def log_chunk_error(*, chunk: Chunk, error: BaseException) -> None:
    """Log an unrecoverable chunk error.

    Args:
        chunk: Chunk that failed
        error: The error that ended the sweep
    """
    logger.error(
        "chunk_error",
        extra={
            "column": chunk.column.value,
            "chunk_index": chunk.chunk_index,
            "begin_id": chunk.begin,
            "end_id": chunk.end,
            "error_type": type(error).__name__,
            "error_message": str(error),
        },
    )


def log_range_complete(*, result: RangeResult) -> None:
    """Log the end of a sweep over one column."""
    level = logging.INFO if result.succeeded else logging.ERROR
    logger.log(
        level,
        "scan_range_complete",
        extra={
            "column": result.scan_range.column.value,
            "state": result.state.value,
            "chunks_completed": result.chunks_completed,
            "ids_to_go": result.remaining,
            "kept": result.kept,
            "discarded": result.discarded + result.part_records_discarded,
            "overload_retries": result.overload_retries,
            "duration_ms": result.duration_ms,
        },
    )
