"""Membership sink backed by a bit-address filter."""

from __future__ import annotations

from collections.abc import Sequence

from ..filters.bitmap import BitAddressFilter, Identifier


class FilterSink:
    """Records object identifiers in a ``BitAddressFilter``.

    Identifiers the filter already reports as present are counted as
    duplicates and not re-inserted.
    """

    def __init__(self, bit_filter: BitAddressFilter, *, owns_filter: bool = True) -> None:
        self._filter = bit_filter
        self._owns_filter = owns_filter
        self.inserted = 0
        self.duplicates = 0

    @property
    def filter(self) -> BitAddressFilter:
        return self._filter

    async def write(self, items: Sequence[Identifier]) -> int:
        inserted = 0
        for identifier in items:
            if self._filter.query(identifier):
                self.duplicates += 1
                continue
            self._filter.insert(identifier)
            inserted += 1
        self.inserted += inserted
        return inserted

    async def close(self) -> None:
        if self._owns_filter:
            self._filter.close()
