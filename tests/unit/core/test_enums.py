"""Unit tests for core enums."""

from manta.sharkspotter.core import IdColumn, IteratorState, ScanMode


def test_id_column_values():
    """Test IdColumn values are the table column names."""
    assert IdColumn.PRIMARY.value == "_id"
    assert IdColumn.OVERFLOW.value == "_idx"
    assert IdColumn("_idx") is IdColumn.OVERFLOW


def test_id_column_is_primary():
    """Test is_primary property."""
    assert IdColumn.PRIMARY.is_primary
    assert not IdColumn.OVERFLOW.is_primary


def test_scan_mode_values():
    """Test ScanMode enum values."""
    assert ScanMode.AUDIT.value == "audit"
    assert ScanMode.MEMBERSHIP.value == "membership"


def test_iterator_state_is_terminal():
    """Test only DONE and FAILED are terminal."""
    terminal = {state for state in IteratorState if state.is_terminal}
    assert terminal == {IteratorState.DONE, IteratorState.FAILED}
