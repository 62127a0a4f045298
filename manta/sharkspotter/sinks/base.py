"""Sink protocol for classifier output."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any, Protocol


class RecordSink(Protocol):
    """Destination for the records a chunk kept.

    The chunk handler buffers one attempt's output and hands it over in a
    single ``write`` call once the chunk's stream has ended successfully.
    Audit sinks receive ``MatchLine`` items, membership sinks receive object
    identifiers.
    """

    async def write(self, items: Sequence[Any]) -> int:
        """Record a batch of items.

        Returns:
            Number of items newly recorded

        Raises:
            SinkWriteError: If the underlying storage fails
        """
        ...

    async def close(self) -> None:
        """Flush and release resources."""
        ...
