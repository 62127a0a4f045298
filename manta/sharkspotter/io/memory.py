"""In-memory query service.

Holds the table as a list of row dicts. Useful for tests and for replaying a
dumped shard without a live backend. Failures can be scripted per chunk so
overload and error handling can be exercised deterministically.
"""

from __future__ import annotations

from collections import deque
from collections.abc import AsyncIterator, Iterable
from dataclasses import dataclass
from typing import Any

from ..core.enums import IdColumn
from ..core.exceptions import QueryError
from .query import OBJECT_TYPE, Row


@dataclass(frozen=True)
class RecordedQuery:
    """A range query the service has served (or started to serve)."""

    column: IdColumn
    begin: int
    end: int
    limit: int


@dataclass(frozen=True)
class _ScriptedFailure:
    error: BaseException
    after_rows: int


class InMemoryQueryService:
    """``QueryService`` over rows held in memory."""

    def __init__(
        self,
        rows: Iterable[Row] = (),
        *,
        columns: Iterable[IdColumn] = (IdColumn.PRIMARY, IdColumn.OVERFLOW),
    ) -> None:
        """Initialize the service.

        Args:
            rows: Table rows; each carries ``_id`` and/or ``_idx``, ``type`` and ``_value``
            columns: Columns that exist in the table; querying any other one fails
        """
        self._rows: list[Row] = list(rows)
        self._columns = frozenset(IdColumn(c) for c in columns)
        self._failures: dict[tuple[IdColumn, int], deque[_ScriptedFailure]] = {}
        self._max_failures: dict[IdColumn, BaseException] = {}
        self.queries: list[RecordedQuery] = []
        self.closed = False

    def add_rows(self, rows: Iterable[Row]) -> None:
        self._rows.extend(rows)

    def fail_chunk(
        self,
        column: IdColumn,
        begin: int,
        error: BaseException,
        *,
        times: int = 1,
        after_rows: int = 0,
    ) -> None:
        """Make the next ``times`` range queries starting at ``begin`` fail.

        Args:
            column: Column of the chunk
            begin: First id of the chunk
            error: Exception to raise
            times: Number of consecutive attempts that fail
            after_rows: Rows delivered before the error is raised
        """
        queue = self._failures.setdefault((IdColumn(column), begin), deque())
        for _ in range(times):
            queue.append(_ScriptedFailure(error=error, after_rows=after_rows))

    def fail_max(self, column: IdColumn, error: BaseException) -> None:
        """Make boundary queries for ``column`` fail with ``error``."""
        self._max_failures[IdColumn(column)] = error

    def _check_column(self, column: IdColumn) -> IdColumn:
        column = IdColumn(column)
        if column not in self._columns:
            raise QueryError(
                f'column "{column.value}" does not exist', name="ColumnDoesNotExistError"
            )
        return column

    async def max_value(self, column: IdColumn) -> Any:
        column = IdColumn(column)
        if column in self._max_failures:
            raise self._max_failures[column]
        self._check_column(column)
        values = [row[column.value] for row in self._rows if row.get(column.value) is not None]
        return max(values) if values else None

    async def find_range(
        self,
        column: IdColumn,
        begin: int,
        end: int,
        *,
        limit: int,
    ) -> AsyncIterator[Row]:
        column = self._check_column(column)
        self.queries.append(RecordedQuery(column=column, begin=begin, end=end, limit=limit))

        failure: _ScriptedFailure | None = None
        queue = self._failures.get((column, begin))
        if queue:
            failure = queue.popleft()

        matching = sorted(
            (
                row
                for row in self._rows
                if row.get("type", OBJECT_TYPE) == OBJECT_TYPE
                and row.get(column.value) is not None
                and begin <= int(row[column.value]) <= end
            ),
            key=lambda row: int(row[column.value]),
        )[:limit]

        for delivered, row in enumerate(matching):
            if failure is not None and delivered >= failure.after_rows:
                raise failure.error
            yield row
        if failure is not None:
            raise failure.error

    async def close(self) -> None:
        self.closed = True
