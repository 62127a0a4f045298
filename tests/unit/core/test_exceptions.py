"""Unit tests for the exception hierarchy."""

import pytest

from manta.sharkspotter.core.exceptions import (
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


class TestExceptions:
    """Test exception classes."""

    @pytest.mark.parametrize(
        "exc_type",
        [
            ConfigError,
            BoundaryResolutionError,
            QueryError,
            TransientOverloadError,
            OverloadRetriesExhaustedError,
            SinkWriteError,
            ValidationError,
            RecordParseError,
            InvalidIdentifierError,
            ScanCancelledError,
        ],
    )
    def test_all_derive_from_spotter_error(self, exc_type):
        """Every scanner error can be caught as SpotterError."""
        assert issubclass(exc_type, SpotterError)

    def test_query_error(self):
        """QueryError carries the backend status and error name."""
        err = QueryError("no such table", status_code=500, name="NoDatabaseError")

        assert str(err) == "no such table"
        assert err.status_code == 500
        assert err.name == "NoDatabaseError"

    def test_transient_overload_error(self):
        """Overload is a QueryError with status 503."""
        err = TransientOverloadError("too busy", name="OverloadedError")

        assert isinstance(err, QueryError)
        assert err.status_code == 503
        assert err.name == "OverloadedError"

    def test_transient_overload_error_keeps_status(self):
        """A 429 answer is not reported as 503."""
        assert TransientOverloadError("slow down", status_code=429).status_code == 429

    def test_overload_retries_exhausted_is_not_transient(self):
        """Exhaustion must not be retried again."""
        err = OverloadRetriesExhaustedError("gave up", attempts=4)

        assert err.attempts == 4
        assert not isinstance(err, TransientOverloadError)

    def test_boundary_resolution_error(self):
        """BoundaryResolutionError names the column."""
        err = BoundaryResolutionError("max is NULL", column="_id")
        assert err.column == "_id"

    def test_record_parse_error(self):
        """RecordParseError is a validation error with the row id."""
        err = RecordParseError("bad owner", row_id=17)

        assert isinstance(err, ValidationError)
        assert err.row_id == 17
