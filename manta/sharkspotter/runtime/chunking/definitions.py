"""Chunking data structures.

This module defines the values passed between the chunk iterator, the
backoff policy and chunk handlers: the range being swept, one chunk of it,
what a handler reports back for a chunk, and what a finished sweep reports.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from ...core.enums import IdColumn, IteratorState


@dataclass(frozen=True)
class ChunkPolicy:
    """How a range is cut into chunks.

    Attributes:
        chunk_size: Maximum number of ids covered by one chunk (one query)
    """

    chunk_size: int

    def __post_init__(self) -> None:
        if self.chunk_size < 1:
            raise ValueError("chunk_size must be greater than 0")


@dataclass(frozen=True)
class ScanRange:
    """Inclusive id interval ``[begin, end]`` over one column.

    ``end == begin - 1`` denotes the empty range.
    """

    column: IdColumn
    begin: int
    end: int

    def __post_init__(self) -> None:
        if self.begin > self.end + 1:
            raise ValueError(
                f"invalid range for {self.column.value}: begin {self.begin} > end {self.end} + 1"
            )

    @property
    def size(self) -> int:
        return self.end - self.begin + 1

    @property
    def is_empty(self) -> bool:
        return self.size == 0

    def clamp(self, ceiling: int) -> ScanRange:
        """Return the range with ``end`` capped at ``ceiling``."""
        if self.end <= ceiling:
            return self
        return ScanRange(column=self.column, begin=self.begin, end=max(ceiling, self.begin - 1))


@dataclass(frozen=True)
class Chunk:
    """One contiguous slice of a scan range; the unit of one backend query.

    Attributes:
        column: Id column the chunk is taken from
        begin: First id (inclusive)
        size: Number of ids covered
        chunk_index: Zero-based index within its range
    """

    column: IdColumn
    begin: int
    size: int
    chunk_index: int = 0

    @property
    def end(self) -> int:
        return self.begin + self.size - 1


@dataclass(frozen=True)
class ChunkOutcome:
    """What a handler reports for one successfully processed chunk.

    Attributes:
        rows_seen: Rows streamed back for the chunk
        kept: Rows the classifier kept
        discarded: Rows that did not match the target predicate
        part_records_discarded: Rows dropped as multipart upload parts
        written: Rows newly recorded by the sink
    """

    rows_seen: int = 0
    kept: int = 0
    discarded: int = 0
    part_records_discarded: int = 0
    written: int = 0


@dataclass
class RangeResult:
    """Result of sweeping one scan range.

    Attributes:
        scan_range: The range actually swept (after clamping)
        state: Terminal iterator state (DONE or FAILED)
        chunks_completed: Chunks whose handler succeeded
        remaining: Ids not yet covered when the sweep stopped
        overload_retries: Attempts repeated because of backend overload
        rows_seen, kept, discarded, part_records_discarded, written: Sums over chunks
        error: First unrecoverable error, when state is FAILED
        duration_ms: Wall time of the sweep
    """

    scan_range: ScanRange
    state: IteratorState = IteratorState.IDLE
    chunks_completed: int = 0
    remaining: int = 0
    overload_retries: int = 0
    rows_seen: int = 0
    kept: int = 0
    discarded: int = 0
    part_records_discarded: int = 0
    written: int = 0
    error: BaseException | None = None
    duration_ms: float = 0.0
    chunk_log: list[Chunk] = field(default_factory=list, repr=False)

    @property
    def succeeded(self) -> bool:
        return self.state is IteratorState.DONE

    def add(self, chunk: Chunk, outcome: ChunkOutcome, retries: int) -> None:
        """Account for one completed chunk."""
        self.chunks_completed += 1
        self.remaining -= chunk.size
        self.overload_retries += retries
        self.rows_seen += outcome.rows_seen
        self.kept += outcome.kept
        self.discarded += outcome.discarded
        self.part_records_discarded += outcome.part_records_discarded
        self.written += outcome.written
        self.chunk_log.append(chunk)
