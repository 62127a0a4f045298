"""I/O layer: query service interface and implementations."""

from .gateway import SQLGatewayQueryService, error_from_payload
from .http import HTTPClient
from .memory import InMemoryQueryService, RecordedQuery
from .query import QueryService, Row
from .sql import max_statement, range_statement

__all__ = [
    "QueryService",
    "Row",
    "HTTPClient",
    "SQLGatewayQueryService",
    "InMemoryQueryService",
    "RecordedQuery",
    "error_from_payload",
    "max_statement",
    "range_statement",
]
