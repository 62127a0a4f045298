"""Scan boundary resolution.

Before sweeping, the scanner needs the largest id of each column. The
primary column must resolve; without it there is no upper bound and the
session cannot start. The overflow column only exists on some deployments,
so failing to resolve it (or finding it empty) just means there is no
overflow range.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from ..core.enums import IdColumn
from ..core.exceptions import BoundaryResolutionError, QueryError
from ..io.query import QueryService

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScanBounds:
    """Resolved maxima of the two id columns."""

    primary_max: int
    overflow_max: int | None = None

    @property
    def largest(self) -> int:
        if self.overflow_max is None:
            return self.primary_max
        return max(self.primary_max, self.overflow_max)


def parse_boundary(value: Any, column: IdColumn) -> int | None:
    """Convert a raw maximum (int or decimal string) to an int.

    Raises:
        BoundaryResolutionError: If the value is neither
    """
    if value is None:
        return None
    if isinstance(value, bool):
        raise BoundaryResolutionError(f"invalid max({column.value}) value: {value!r}", column.value)
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        text = value.strip()
        if text.lstrip("-").isdigit():
            try:
                return int(text)
            except ValueError as e:
                raise BoundaryResolutionError(
                    f"invalid max({column.value}) value: {value!r}", column.value
                ) from e
    raise BoundaryResolutionError(f"invalid max({column.value}) value: {value!r}", column.value)


class ScanRangeResolver:
    """Resolves column maxima through the query service."""

    def __init__(self, service: QueryService) -> None:
        self._service = service

    async def resolve_max(self, column: IdColumn) -> int | None:
        """Return the maximum of ``column``, or None if the column is empty.

        Raises:
            BoundaryResolutionError: If the query fails or returns garbage
        """
        try:
            raw = await self._service.max_value(column)
        except QueryError as e:
            raise BoundaryResolutionError(
                f"could not get max {column.value} value: {e}", column.value
            ) from e
        return parse_boundary(raw, column)

    async def resolve(self) -> ScanBounds:
        """Resolve both columns.

        Raises:
            BoundaryResolutionError: If the primary maximum is unavailable
        """
        try:
            primary_max = await self.resolve_max(IdColumn.PRIMARY)
            if primary_max is None:
                raise BoundaryResolutionError(
                    f"max {IdColumn.PRIMARY.value} value is NULL", IdColumn.PRIMARY.value
                )
        except BoundaryResolutionError as e:
            logger.error("could not get max _id value", extra={"error_message": str(e)})
            raise

        try:
            overflow_max = await self.resolve_max(IdColumn.OVERFLOW)
        except BoundaryResolutionError as e:
            logger.warning("could not get max _idx value", extra={"error_message": str(e)})
            overflow_max = None

        bounds = ScanBounds(primary_max=primary_max, overflow_max=overflow_max)
        logger.info(
            "scan_bounds_resolved",
            extra={"primary_max": bounds.primary_max, "overflow_max": bounds.overflow_max},
        )
        return bounds
