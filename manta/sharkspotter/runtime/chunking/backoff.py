"""Overload backoff around chunk execution.

The backend sheds load by rejecting queries with a transient overload error.
``OverloadBackoffPolicy`` absorbs that error class: it waits a fixed delay and
re-runs the handler for the very same chunk. The cursor only moves once the
handler succeeds, so retried attempts never touch range bookkeeping. Every
other error propagates on the first occurrence. A cancel event is honored
around each wait, so a scan stuck behind sustained overload can still stop.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from time import perf_counter

from ...core.config import DEFAULT_BACKOFF_DELAY
from ...core.exceptions import (
    OverloadRetriesExhaustedError,
    ScanCancelledError,
    TransientOverloadError,
)
from .definitions import Chunk, ChunkOutcome
from .telemetry import log_chunk_overload

ChunkHandler = Callable[[Chunk], Awaitable[ChunkOutcome]]
Sleep = Callable[[float], Awaitable[None]]


@dataclass(frozen=True)
class ExecutedChunk:
    """A chunk that eventually succeeded.

    Attributes:
        outcome: What the successful attempt reported
        retries: Attempts rejected by overload before the successful one
        latency_ms: Wall time across all attempts, waits included
    """

    outcome: ChunkOutcome
    retries: int
    latency_ms: float


class OverloadBackoffPolicy:
    """Retry a chunk in place while the backend reports overload."""

    def __init__(
        self,
        *,
        delay: float = DEFAULT_BACKOFF_DELAY,
        max_retries: int | None = None,
        sleep: Sleep | None = None,
    ) -> None:
        """Initialize the policy.

        Args:
            delay: Seconds to wait before re-running an overloaded chunk
            max_retries: Give up after this many retries (None = never give up)
            sleep: Awaitable delay function, ``asyncio.sleep`` by default
        """
        if delay < 0:
            raise ValueError("delay must be non-negative")
        if max_retries is not None and max_retries < 0:
            raise ValueError("max_retries must be non-negative")
        self._delay = delay
        self._max_retries = max_retries
        self._sleep = sleep or asyncio.sleep

    @property
    def delay(self) -> float:
        return self._delay

    @property
    def max_retries(self) -> int | None:
        return self._max_retries

    async def execute(
        self,
        chunk: Chunk,
        handler: ChunkHandler,
        cancel: asyncio.Event | None = None,
    ) -> ExecutedChunk:
        """Run ``handler(chunk)`` until it succeeds or fails unrecoverably.

        Raises:
            ScanCancelledError: If ``cancel`` is set while waiting out an overload
            OverloadRetriesExhaustedError: If a retry cap is set and reached
            Exception: Any non-overload error raised by the handler
        """
        start = perf_counter()
        retries = 0
        while True:
            try:
                outcome = await handler(chunk)
            except TransientOverloadError as e:
                if self._max_retries is not None and retries >= self._max_retries:
                    raise OverloadRetriesExhaustedError(
                        f"{chunk.column.value} [{chunk.begin}, {chunk.end}] still overloaded "
                        f"after {retries + 1} attempts",
                        attempts=retries + 1,
                    ) from e
                retries += 1
                log_chunk_overload(chunk=chunk, attempt=retries, delay_s=self._delay, error=e)
                self._check_cancel(chunk, cancel)
                await self._sleep(self._delay)
                self._check_cancel(chunk, cancel)
                continue
            return ExecutedChunk(
                outcome=outcome,
                retries=retries,
                latency_ms=(perf_counter() - start) * 1000.0,
            )

    @staticmethod
    def _check_cancel(chunk: Chunk, cancel: asyncio.Event | None) -> None:
        if cancel is not None and cancel.is_set():
            raise ScanCancelledError(
                f"scan cancelled while {chunk.column.value} {chunk.begin} was overloaded"
            )
