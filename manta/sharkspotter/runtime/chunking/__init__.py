"""Chunked range sweeping.

Architecture:
    The chunking layer consists of:
    - definitions.py: Range, chunk and result structures
    - iterator.py: ChunkIterator state machine (cuts a range into chunks)
    - backoff.py: OverloadBackoffPolicy (retries a chunk in place on overload)
    - telemetry.py: Structured logging

Usage:
    iterator = ChunkIterator(ChunkPolicy(chunk_size=10000), OverloadBackoffPolicy())
    result = await iterator.run(ScanRange(IdColumn.PRIMARY, 0, max_id), handler)
"""

from __future__ import annotations

from .backoff import ChunkHandler, ExecutedChunk, OverloadBackoffPolicy
from .definitions import Chunk, ChunkOutcome, ChunkPolicy, RangeResult, ScanRange
from .iterator import ChunkIterator

__all__ = [
    "Chunk",
    "ChunkHandler",
    "ChunkIterator",
    "ChunkOutcome",
    "ChunkPolicy",
    "ExecutedChunk",
    "OverloadBackoffPolicy",
    "RangeResult",
    "ScanRange",
]
