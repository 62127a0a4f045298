"""Scan configuration model.

All options the operator can set live on ``ScanConfig``. The model is frozen
once built; derived names (fully-qualified shard and storage ids, output file,
gateway URL) are computed properties so they always agree with the inputs.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic import ValidationError as PydanticValidationError

from .enums import ScanMode
from .exceptions import ConfigError

DEFAULT_CHUNK_SIZE = 10000
DEFAULT_BACKOFF_DELAY = 5.0
DEFAULT_GATEWAY_PORT = 2020
DEFAULT_REQUEST_TIMEOUT = 300.0


class ScanConfig(BaseModel):
    """Validated scan options."""

    shard: str = Field(..., min_length=1)
    domain: str = Field(..., min_length=1)
    target_location: str | None = None
    filter_path: Path | None = None
    begin: int = Field(default=0, ge=0)
    end: int | None = Field(default=None, ge=1)
    chunk_size: int = Field(default=DEFAULT_CHUNK_SIZE, ge=1)
    keep_part_records: bool = False
    backoff_delay: float = Field(default=DEFAULT_BACKOFF_DELAY, ge=0)
    max_overload_retries: int | None = Field(default=None, ge=0)
    gateway_url: str | None = None
    output_dir: Path = Path(".")
    request_timeout: float = Field(default=DEFAULT_REQUEST_TIMEOUT, gt=0)

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    @field_validator("target_location", "gateway_url")
    @classmethod
    def validate_optional_text(cls, v: str | None) -> str | None:
        """Treat blank strings as unset."""
        if v is not None and not v:
            return None
        return v

    @model_validator(mode="after")
    def validate_combination(self) -> ScanConfig:
        """Validate cross-field rules."""
        if (self.target_location is None) == (self.filter_path is None):
            raise ValueError("exactly one of target_location and filter_path must be provided")
        if self.end is not None and self.begin > self.end:
            raise ValueError("starting ID is greater than ending ID")
        return self

    @classmethod
    def from_options(cls, **options: Any) -> ScanConfig:
        """Build a config, reporting any validation failure as ConfigError."""
        try:
            return cls(**options)
        except PydanticValidationError as e:
            reasons = "; ".join(_format_error(err) for err in e.errors())
            raise ConfigError(reasons) from e

    @property
    def mode(self) -> ScanMode:
        return ScanMode.AUDIT if self.target_location is not None else ScanMode.MEMBERSHIP

    @property
    def shard_fqdn(self) -> str:
        return f"{self.shard}.{self.domain}"

    @property
    def target_location_id(self) -> str | None:
        if self.target_location is None:
            return None
        return f"{self.target_location}.{self.domain}"

    @property
    def exclude_part_records(self) -> bool:
        return not self.keep_part_records

    @property
    def resolved_gateway_url(self) -> str:
        if self.gateway_url:
            return self.gateway_url.rstrip("/")
        return f"http://{self.shard_fqdn}:{DEFAULT_GATEWAY_PORT}"

    def output_path(self, pid: int | None = None) -> Path:
        """Result file for audit mode: ``<shard fqdn>.<pid>.out``."""
        if pid is None:
            pid = os.getpid()
        return self.output_dir / f"{self.shard_fqdn}.{pid}.out"


def _format_error(err: Any) -> str:
    loc = ".".join(str(part) for part in err.get("loc", ()))
    msg = str(err.get("msg", "invalid value"))
    # model-level errors carry an empty location
    if msg.startswith("Value error, "):
        msg = msg[len("Value error, ") :]
    return f"{loc}: {msg}" if loc else msg
