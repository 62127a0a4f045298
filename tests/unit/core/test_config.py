"""Unit tests for ScanConfig."""

from pathlib import Path

import pytest
from pydantic import ValidationError as PydanticValidationError

from manta.sharkspotter.core import ConfigError, ScanConfig, ScanMode
from manta.sharkspotter.core.config import DEFAULT_BACKOFF_DELAY, DEFAULT_CHUNK_SIZE


def audit_config(**overrides) -> ScanConfig:
    options = {"shard": "2.moray", "domain": "us-east.example.com", "target_location": "3.stor"}
    options.update(overrides)
    return ScanConfig.from_options(**options)


class TestScanConfig:
    """Test option validation and derived values."""

    def test_defaults(self):
        """Unset options take their documented defaults."""
        config = audit_config()

        assert config.begin == 0
        assert config.end is None
        assert config.chunk_size == DEFAULT_CHUNK_SIZE
        assert config.backoff_delay == DEFAULT_BACKOFF_DELAY
        assert config.max_overload_retries is None
        assert config.exclude_part_records
        assert config.mode is ScanMode.AUDIT

    def test_derived_names(self):
        """Shard and storage ids are qualified with the domain."""
        config = audit_config()

        assert config.shard_fqdn == "2.moray.us-east.example.com"
        assert config.target_location_id == "3.stor.us-east.example.com"
        assert config.resolved_gateway_url == "http://2.moray.us-east.example.com:2020"

    def test_gateway_override(self):
        """An explicit gateway URL wins, without a trailing slash."""
        config = audit_config(gateway_url="http://localhost:8080/")
        assert config.resolved_gateway_url == "http://localhost:8080"

    def test_output_path(self, tmp_path):
        """The result file is named after the shard and process id."""
        config = audit_config(output_dir=tmp_path)
        assert config.output_path(pid=4242) == tmp_path / "2.moray.us-east.example.com.4242.out"

    def test_membership_mode(self):
        """A filter path instead of a target selects membership mode."""
        config = ScanConfig.from_options(
            shard="2.moray", domain="us-east.example.com", filter_path="/var/tmp/objects.bits"
        )

        assert config.mode is ScanMode.MEMBERSHIP
        assert config.filter_path == Path("/var/tmp/objects.bits")
        assert config.target_location_id is None

    def test_target_and_filter_are_exclusive(self):
        """Setting both a target and a filter is rejected."""
        with pytest.raises(ConfigError, match="exactly one"):
            audit_config(filter_path="/var/tmp/objects.bits")

    def test_target_or_filter_required(self):
        """Setting neither is rejected; blank text counts as unset."""
        with pytest.raises(ConfigError, match="exactly one"):
            audit_config(target_location="  ")

    def test_begin_after_end(self):
        """begin must not exceed end."""
        with pytest.raises(ConfigError, match="starting ID is greater than ending ID"):
            audit_config(begin=100, end=50)

    def test_begin_equal_end(self):
        """A single-id range is allowed."""
        config = audit_config(begin=50, end=50)
        assert config.begin == config.end == 50

    @pytest.mark.parametrize(
        ("field", "value"),
        [("chunk_size", 0), ("begin", -1), ("end", 0), ("backoff_delay", -1.0), ("shard", "")],
    )
    def test_out_of_range_values(self, field, value):
        """Out-of-range values are reported with their field name."""
        with pytest.raises(ConfigError, match=field):
            audit_config(**{field: value})

    def test_direct_construction_raises_pydantic_error(self):
        """Constructing the model directly surfaces pydantic's error."""
        with pytest.raises(PydanticValidationError):
            ScanConfig(shard="2.moray", domain="us-east.example.com")

    def test_frozen(self):
        """Configs cannot be mutated."""
        config = audit_config()
        with pytest.raises(PydanticValidationError):
            config.begin = 5  # type: ignore[misc]
