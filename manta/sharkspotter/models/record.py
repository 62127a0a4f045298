"""Object metadata record model."""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from ..core.exceptions import RecordParseError

# /<owner uuid>/uploads/... is where multipart upload parts live
_PART_KEY_PATTERN = re.compile(
    r"^/[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}/uploads/"
)


class StorageLocation(BaseModel):
    """One storage node holding a copy of the object."""

    manta_storage_id: str = Field(..., min_length=1)
    datacenter: str | None = None

    model_config = ConfigDict(frozen=True, extra="ignore")


class ObjectRecord(BaseModel):
    """Object metadata decoded from a row's value document.

    Only the fields the scanner needs are modeled; everything else in the
    document is ignored.
    """

    owner_id: UUID = Field(..., alias="owner")
    object_id: UUID = Field(..., alias="objectId")
    key: str = ""
    sharks: tuple[StorageLocation, ...]

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    @property
    def locations(self) -> tuple[str, ...]:
        """Storage ids in the order the document lists them."""
        return tuple(shark.manta_storage_id for shark in self.sharks)

    @property
    def is_part_record(self) -> bool:
        """Whether the record is an intermediate multipart upload part."""
        return _PART_KEY_PATTERN.match(self.key) is not None

    @classmethod
    def from_value(
        cls, value: str | bytes | Mapping[str, Any], row_id: int | None = None
    ) -> ObjectRecord:
        """Parse a value document (JSON text or already-decoded mapping).

        Raises:
            RecordParseError: If owner, objectId or sharks are missing or malformed
        """
        try:
            if isinstance(value, (str, bytes)):
                return cls.model_validate_json(value)
            return cls.model_validate(value)
        except PydanticValidationError as e:
            fields = sorted(
                {".".join(str(p) for p in err["loc"]) or "<document>" for err in e.errors()}
            )
            raise RecordParseError(
                f"malformed object record (row {row_id}): invalid {', '.join(fields)}",
                row_id=row_id,
            ) from e

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> ObjectRecord:
        """Parse the ``_value`` column of a raw table row."""
        row_id = _row_id(row)
        if "_value" not in row or row["_value"] is None:
            raise RecordParseError(f"row {row_id} has no _value column", row_id=row_id)
        return cls.from_value(row["_value"], row_id=row_id)


def _row_id(row: Mapping[str, Any]) -> int | None:
    for column in ("_id", "_idx"):
        value = row.get(column)
        if value is None:
            continue
        try:
            return int(value)
        except (TypeError, ValueError):
            return None
    return None
