"""Runtime orchestration components."""

from .chunking import (
    Chunk,
    ChunkIterator,
    ChunkOutcome,
    ChunkPolicy,
    OverloadBackoffPolicy,
    RangeResult,
    ScanRange,
)
from .classifier import (
    AcceptAllPredicate,
    Decision,
    LocationPredicate,
    MatchLine,
    RecordClassifier,
    TargetPredicate,
)
from .handler import RowChunkHandler
from .orchestrator import ScanOrchestrator, ScanSession, ScanSummary
from .resolver import ScanBounds, ScanRangeResolver, parse_boundary

__all__ = [
    "Chunk",
    "ChunkIterator",
    "ChunkOutcome",
    "ChunkPolicy",
    "OverloadBackoffPolicy",
    "RangeResult",
    "ScanRange",
    "AcceptAllPredicate",
    "Decision",
    "LocationPredicate",
    "MatchLine",
    "RecordClassifier",
    "TargetPredicate",
    "RowChunkHandler",
    "ScanOrchestrator",
    "ScanSession",
    "ScanSummary",
    "ScanBounds",
    "ScanRangeResolver",
    "parse_boundary",
]
