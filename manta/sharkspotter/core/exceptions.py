"""Custom exception hierarchy."""

from __future__ import annotations


class SpotterError(Exception):
    """Base exception for all scanner errors."""

    pass


class ConfigError(SpotterError):
    """Invalid or missing configuration, detected before any scan starts."""

    pass


class BoundaryResolutionError(SpotterError):
    """The maximum value of an id column could not be established."""

    def __init__(self, message: str, column: str | None = None) -> None:
        super().__init__(message)
        self.column = column


class QueryError(SpotterError):
    """Error reported by the query service while serving a query."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        name: str | None = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.name = name


class TransientOverloadError(QueryError):
    """Backend temporarily has no capacity to serve the query."""

    def __init__(
        self,
        message: str,
        name: str | None = None,
        status_code: int = 503,
    ) -> None:
        super().__init__(message, status_code=status_code, name=name)


class OverloadRetriesExhaustedError(QueryError):
    """A chunk stayed overloaded past the configured retry cap."""

    def __init__(self, message: str, attempts: int) -> None:
        super().__init__(message, status_code=503)
        self.attempts = attempts


class SinkWriteError(SpotterError):
    """Result file or filter file I/O failure."""

    pass


class ValidationError(SpotterError):
    """Data validation failure."""

    pass


class RecordParseError(ValidationError):
    """A row's value document lacks required fields or has malformed ones."""

    def __init__(self, message: str, row_id: int | None = None) -> None:
        super().__init__(message)
        self.row_id = row_id


class InvalidIdentifierError(ValidationError):
    """Identifier does not decode to exactly 16 bytes."""

    pass


class ScanCancelledError(SpotterError):
    """Cancellation was requested between chunks or during an overload wait."""

    pass
