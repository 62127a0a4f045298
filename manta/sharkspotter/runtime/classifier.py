"""Record classification.

``RecordClassifier`` decides, for each row of a chunk, whether the object is
kept. Two rules apply, in order:

1. Multipart upload parts (keys of the form ``/<uuid>/uploads/...``) are
   dropped when part exclusion is enabled, which is the default.
2. The target predicate is evaluated against the record's storage ids.

In audit mode the predicate is "one of the storage ids equals the target
storage id" and a kept record yields a ``MatchLine``. In membership mode every
non-excluded record is kept and yields its object id for the filter sink.

Before parsing, a row whose raw value text does not even contain the target
storage id is dropped as ``PREFILTERED``. That check can only skip rows the
full classification would drop too, so it never changes which records are
kept. Part records skipped this way are counted as prefiltered, not as parts.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Protocol
from uuid import UUID

from ..core.enums import DecisionReason, ScanMode
from ..models import ObjectRecord


class TargetPredicate(Protocol):
    """Condition a record must satisfy to be kept."""

    def matches(self, record: ObjectRecord) -> bool: ...

    def may_match(self, raw_value: str) -> bool:
        """Cheap test on the raw value text; False means ``matches`` is False too."""
        ...


@dataclass(frozen=True)
class LocationPredicate:
    """Keep records stored on a given storage node."""

    location_id: str

    def matches(self, record: ObjectRecord) -> bool:
        return self.location_id in record.locations

    def may_match(self, raw_value: str) -> bool:
        return self.location_id in raw_value


@dataclass(frozen=True)
class AcceptAllPredicate:
    """Keep every record."""

    def matches(self, record: ObjectRecord) -> bool:
        return True

    def may_match(self, raw_value: str) -> bool:
        return True


@dataclass(frozen=True)
class MatchLine:
    """Output row of an audit scan."""

    owner_id: UUID
    object_id: UUID
    location_ids: tuple[str, ...]

    @classmethod
    def from_record(cls, record: ObjectRecord) -> MatchLine:
        return cls(
            owner_id=record.owner_id,
            object_id=record.object_id,
            location_ids=record.locations,
        )

    def format(self) -> str:
        return " ".join([str(self.owner_id), str(self.object_id), *self.location_ids])


@dataclass(frozen=True)
class Decision:
    """Classifier verdict for one record.

    Attributes:
        keep: Whether the record goes to the sink
        reason: Why it was kept or dropped
        extracted: MatchLine (audit) or object id (membership) when kept
    """

    keep: bool
    reason: DecisionReason
    extracted: MatchLine | UUID | None = None


_PREFILTERED = Decision(keep=False, reason=DecisionReason.PREFILTERED)
_PART_RECORD = Decision(keep=False, reason=DecisionReason.PART_RECORD)
_NO_MATCH = Decision(keep=False, reason=DecisionReason.NO_MATCH)


class RecordClassifier:
    """Applies part exclusion and the target predicate to records."""

    def __init__(
        self,
        predicate: TargetPredicate,
        *,
        mode: ScanMode = ScanMode.AUDIT,
        exclude_part_records: bool = True,
        prefilter: bool = True,
    ) -> None:
        """Initialize the classifier.

        Args:
            predicate: Condition for keeping a record
            mode: Decides what a kept record yields
            exclude_part_records: Drop multipart upload parts
            prefilter: Skip parsing rows whose raw text cannot match
        """
        self._predicate = predicate
        self._mode = mode
        self._exclude_part_records = exclude_part_records
        self._prefilter = prefilter

    @classmethod
    def for_audit(cls, location_id: str, *, exclude_part_records: bool = True) -> RecordClassifier:
        return cls(
            LocationPredicate(location_id),
            mode=ScanMode.AUDIT,
            exclude_part_records=exclude_part_records,
        )

    @classmethod
    def for_membership(cls, *, exclude_part_records: bool = True) -> RecordClassifier:
        return cls(
            AcceptAllPredicate(),
            mode=ScanMode.MEMBERSHIP,
            exclude_part_records=exclude_part_records,
            prefilter=False,
        )

    @property
    def mode(self) -> ScanMode:
        return self._mode

    def classify(self, record: ObjectRecord) -> Decision:
        """Classify a parsed record."""
        if self._exclude_part_records and record.is_part_record:
            return _PART_RECORD
        if not self._predicate.matches(record):
            return _NO_MATCH
        if self._mode is ScanMode.AUDIT:
            extracted: MatchLine | UUID = MatchLine.from_record(record)
        else:
            extracted = record.object_id
        return Decision(keep=True, reason=DecisionReason.MATCHED, extracted=extracted)

    def classify_row(self, row: Mapping[str, Any]) -> Decision:
        """Classify a raw table row, parsing it only if it can match.

        Raises:
            RecordParseError: If the row's value document is malformed
        """
        raw = row.get("_value")
        if self._prefilter and isinstance(raw, str) and not self._predicate.may_match(raw):
            return _PREFILTERED
        return self.classify(ObjectRecord.from_row(row))
