"""Query service interface.

The scanner never talks to the metadata database itself. It depends on a
``QueryService``: something that can report the maximum of an id column and
stream the object rows whose id falls in an inclusive range. Implementations
signal a busy backend with ``TransientOverloadError`` and anything else with
``QueryError`` (or a subclass).
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from typing import Any, Protocol

from ..core.enums import IdColumn

Row = dict[str, Any]

OBJECT_TYPE = "object"


class QueryService(Protocol):
    """Protocol for backends that serve boundary and range queries."""

    async def max_value(self, column: IdColumn) -> Any:
        """Return the maximum of ``column``.

        Returns:
            The raw maximum (int or decimal string), or None if the table
            holds no value for the column

        Raises:
            QueryError: If the query fails, including when the column does not exist
        """
        ...

    def find_range(
        self,
        column: IdColumn,
        begin: int,
        end: int,
        *,
        limit: int,
    ) -> AsyncIterator[Row]:
        """Stream object rows with ``begin <= column <= end``, at most ``limit``.

        Raises:
            TransientOverloadError: If the backend has no capacity right now
            QueryError: For any other failure
        """
        ...

    async def close(self) -> None:
        """Release connections."""
        ...
