"""Chunk iteration over an id range.

``ChunkIterator`` walks a ``ScanRange`` in fixed-size chunks, strictly in
increasing id order and one chunk at a time. Each chunk is handed to a
caller-supplied handler through the overload backoff policy. The iterator is
an explicit state machine:

    IDLE -> RESOLVING -> ITERATING -> DONE
    any  -> FAILED

RESOLVING clamps the range to a known ceiling and computes how many ids are
left. An empty range goes straight to DONE without calling the handler. The
first unrecoverable handler error moves the iterator to FAILED; no further
chunks are issued and the error is returned in the ``RangeResult``.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterator
from time import perf_counter

from ...core.enums import IteratorState
from ...core.exceptions import ScanCancelledError
from .backoff import ChunkHandler, OverloadBackoffPolicy
from .definitions import Chunk, ChunkPolicy, RangeResult, ScanRange
from .telemetry import (
    log_chunk_begin,
    log_chunk_completed,
    log_chunk_error,
    log_range_begin,
    log_range_complete,
)

logger = logging.getLogger(__name__)

_TRANSITIONS: dict[IteratorState, frozenset[IteratorState]] = {
    IteratorState.IDLE: frozenset({IteratorState.RESOLVING, IteratorState.FAILED}),
    IteratorState.RESOLVING: frozenset(
        {IteratorState.ITERATING, IteratorState.DONE, IteratorState.FAILED}
    ),
    IteratorState.ITERATING: frozenset({IteratorState.DONE, IteratorState.FAILED}),
    IteratorState.DONE: frozenset(),
    IteratorState.FAILED: frozenset(),
}


class ChunkIterator:
    """Sweeps one id range chunk by chunk."""

    def __init__(self, policy: ChunkPolicy, backoff: OverloadBackoffPolicy | None = None) -> None:
        """Initialize the iterator.

        Args:
            policy: Chunk sizing policy
            backoff: Overload policy wrapping each handler call
        """
        self._policy = policy
        self._backoff = backoff or OverloadBackoffPolicy()
        self._state = IteratorState.IDLE

    @property
    def state(self) -> IteratorState:
        return self._state

    def _transition(self, state: IteratorState) -> None:
        if state not in _TRANSITIONS[self._state]:
            raise RuntimeError(f"invalid iterator transition {self._state.value} -> {state.value}")
        logger.debug("iterator %s -> %s", self._state.value, state.value)
        self._state = state

    def _make_chunk(self, scan_range: ScanRange, begin: int, remaining: int, index: int) -> Chunk:
        return Chunk(
            column=scan_range.column,
            begin=begin,
            size=min(self._policy.chunk_size, remaining),
            chunk_index=index,
        )

    def plan(self, scan_range: ScanRange) -> Iterator[Chunk]:
        """Yield the chunks a fully successful sweep of ``scan_range`` issues."""
        remaining = scan_range.size
        begin = scan_range.begin
        index = 0
        while remaining > 0:
            chunk = self._make_chunk(scan_range, begin, remaining, index)
            yield chunk
            remaining -= chunk.size
            begin = chunk.end + 1
            index += 1

    async def run(
        self,
        scan_range: ScanRange,
        handler: ChunkHandler,
        *,
        ceiling: int | None = None,
        last_id: int | None = None,
        cancel: asyncio.Event | None = None,
    ) -> RangeResult:
        """Sweep ``scan_range``, calling ``handler`` once per successful chunk.

        Args:
            scan_range: Range requested by the caller
            handler: Async function processing one chunk
            ceiling: Highest id known to exist; the range is clamped to it
            last_id: Overall end of the scan, for logging only
            cancel: Event checked between chunks and during overload waits;
                when set the sweep fails with ScanCancelledError

        Returns:
            RangeResult in state DONE or FAILED
        """
        self._state = IteratorState.IDLE
        start = perf_counter()
        result = RangeResult(scan_range=scan_range)

        self._transition(IteratorState.RESOLVING)
        if ceiling is not None:
            scan_range = scan_range.clamp(ceiling)
        result.scan_range = scan_range
        result.remaining = scan_range.size

        if result.remaining == 0:
            self._transition(IteratorState.DONE)
            return self._finish(result, start)

        self._transition(IteratorState.ITERATING)
        log_range_begin(scan_range=scan_range, chunk_size=self._policy.chunk_size, last_id=last_id)

        begin = scan_range.begin
        index = 0
        while result.remaining > 0:
            chunk = self._make_chunk(scan_range, begin, result.remaining, index)
            if cancel is not None and cancel.is_set():
                result.error = ScanCancelledError(
                    f"scan cancelled before {chunk.column.value} {chunk.begin}"
                )
                self._transition(IteratorState.FAILED)
                break

            log_chunk_begin(chunk=chunk, ids_to_go=result.remaining)
            try:
                executed = await self._backoff.execute(chunk, handler, cancel)
            except Exception as e:
                log_chunk_error(chunk=chunk, error=e)
                result.error = e
                self._transition(IteratorState.FAILED)
                break

            result.add(chunk, executed.outcome, executed.retries)
            log_chunk_completed(
                chunk=chunk,
                ids_to_go=result.remaining,
                kept=executed.outcome.kept,
                discarded=executed.outcome.discarded + executed.outcome.part_records_discarded,
                latency_ms=executed.latency_ms,
            )
            begin = chunk.end + 1
            index += 1

        if self._state is IteratorState.ITERATING:
            self._transition(IteratorState.DONE)
        return self._finish(result, start)

    def _finish(self, result: RangeResult, start: float) -> RangeResult:
        result.state = self._state
        result.duration_ms = (perf_counter() - start) * 1000.0
        log_range_complete(result=result)
        return result
