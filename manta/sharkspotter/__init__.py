"""sharkspotter - incremental range scanner for Manta metadata shards."""

from .core import (
    BoundaryResolutionError,
    ConfigError,
    IdColumn,
    InvalidIdentifierError,
    IteratorState,
    OverloadRetriesExhaustedError,
    QueryError,
    RecordParseError,
    ScanCancelledError,
    ScanConfig,
    ScanMode,
    SinkWriteError,
    SpotterError,
    TransientOverloadError,
    ValidationError,
)
from .filters import BitAddressFilter, identifier_addresses
from .io import InMemoryQueryService, QueryService, SQLGatewayQueryService
from .models import ObjectRecord, StorageLocation
from .runtime import (
    Chunk,
    ChunkIterator,
    ChunkPolicy,
    Decision,
    MatchLine,
    OverloadBackoffPolicy,
    RangeResult,
    RecordClassifier,
    ScanBounds,
    ScanOrchestrator,
    ScanRange,
    ScanRangeResolver,
    ScanSummary,
)
from .sinks import FilterSink, InMemorySink, LineFileSink, RecordSink

__version__ = "0.1.0"

__all__ = [
    # Config and enums
    "ScanConfig",
    "ScanMode",
    "IdColumn",
    "IteratorState",
    # Filter
    "BitAddressFilter",
    "identifier_addresses",
    # Models
    "ObjectRecord",
    "StorageLocation",
    # Query services
    "QueryService",
    "SQLGatewayQueryService",
    "InMemoryQueryService",
    # Runtime
    "Chunk",
    "ChunkIterator",
    "ChunkPolicy",
    "Decision",
    "MatchLine",
    "OverloadBackoffPolicy",
    "RangeResult",
    "RecordClassifier",
    "ScanBounds",
    "ScanOrchestrator",
    "ScanRange",
    "ScanRangeResolver",
    "ScanSummary",
    # Sinks
    "RecordSink",
    "FilterSink",
    "InMemorySink",
    "LineFileSink",
    # Exceptions
    "SpotterError",
    "ConfigError",
    "BoundaryResolutionError",
    "QueryError",
    "TransientOverloadError",
    "OverloadRetriesExhaustedError",
    "SinkWriteError",
    "ValidationError",
    "RecordParseError",
    "InvalidIdentifierError",
    "ScanCancelledError",
]
