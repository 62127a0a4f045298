"""Core components."""

from .config import (
    DEFAULT_BACKOFF_DELAY,
    DEFAULT_CHUNK_SIZE,
    DEFAULT_GATEWAY_PORT,
    ScanConfig,
)
from .enums import DecisionReason, IdColumn, IteratorState, ScanMode
from .exceptions import (
    BoundaryResolutionError,
    ConfigError,
    InvalidIdentifierError,
    OverloadRetriesExhaustedError,
    QueryError,
    RecordParseError,
    ScanCancelledError,
    SinkWriteError,
    SpotterError,
    TransientOverloadError,
    ValidationError,
)

__all__ = [
    "ScanConfig",
    "DEFAULT_BACKOFF_DELAY",
    "DEFAULT_CHUNK_SIZE",
    "DEFAULT_GATEWAY_PORT",
    "IdColumn",
    "ScanMode",
    "IteratorState",
    "DecisionReason",
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
