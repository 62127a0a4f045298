"""In-memory sink."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any


class InMemorySink:
    """Collects written items in a list.

    Each ``write`` call is also kept as a separate batch so callers can see
    how output was grouped per chunk.
    """

    def __init__(self) -> None:
        self.items: list[Any] = []
        self.batches: list[list[Any]] = []
        self.closed = False

    async def write(self, items: Sequence[Any]) -> int:
        if self.closed:
            raise RuntimeError("sink is closed")
        batch = list(items)
        if batch:
            self.batches.append(batch)
            self.items.extend(batch)
        return len(batch)

    async def close(self) -> None:
        self.closed = True

    def __len__(self) -> int:
        return len(self.items)
