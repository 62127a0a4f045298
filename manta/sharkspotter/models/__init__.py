"""Data models for table rows.

Architecture:
    Pydantic v2 models, immutable (frozen=True). The raw row's value payload
    is treated as an untyped document until it passes through
    ``ObjectRecord.from_row``, which either yields a validated record or
    raises ``RecordParseError``.
"""

from .record import ObjectRecord, StorageLocation

__all__ = [
    "ObjectRecord",
    "StorageLocation",
]
