"""Core enumerations shared across the scanner.

Architecture:
    This module defines the small set of standardized enums used throughout
    the scanner. String enums are used wherever the value crosses a boundary
    (SQL text, log fields, CLI output) so they serialize without mapping.

Key Types:
    - IdColumn: The two ordered id columns of the metadata table
    - ScanMode: Audit (write matching rows) vs membership (build a filter)
    - IteratorState: Lifecycle of a single ranged sweep
    - DecisionReason: Why the classifier kept or dropped a record
"""

from enum import Enum


class IdColumn(str, Enum):
    """Ordered integer columns that together form the logical key space.

    The primary sequence is always present. The overflow sequence only exists
    on deployments whose primary sequence was migrated after exhaustion, and
    continues numbering where the primary one stops.
    """

    PRIMARY = "_id"
    OVERFLOW = "_idx"

    @property
    def is_primary(self) -> bool:
        return self is IdColumn.PRIMARY


class ScanMode(str, Enum):
    """Scan modes selected by configuration."""

    AUDIT = "audit"
    MEMBERSHIP = "membership"


class IteratorState(str, Enum):
    """States of the chunk iterator.

    Transitions:
        IDLE -> RESOLVING -> ITERATING -> DONE
        IDLE -> RESOLVING -> DONE          (empty range)
        any  -> FAILED                     (unrecoverable error)
    """

    IDLE = "idle"
    RESOLVING = "resolving"
    ITERATING = "iterating"
    DONE = "done"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (IteratorState.DONE, IteratorState.FAILED)


class DecisionReason(str, Enum):
    """Outcome labels attached to every classifier decision."""

    MATCHED = "matched"
    NO_MATCH = "no_match"
    PREFILTERED = "prefiltered"
    PART_RECORD = "part_record"
