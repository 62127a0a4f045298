"""SQL statements for the metadata table."""

from __future__ import annotations

from ..core.enums import IdColumn
from .query import OBJECT_TYPE

TABLE = "manta"


def _column(column: IdColumn | str) -> str:
    # only the known id columns may be interpolated
    return IdColumn(column).value


def max_statement(column: IdColumn | str) -> str:
    """Boundary query for the largest value of an id column."""
    return f"SELECT MAX({_column(column)}) FROM {TABLE};"


def range_statement(column: IdColumn | str, begin: int, end: int) -> str:
    """Object rows whose id lies in ``[begin, end]``."""
    name = _column(column)
    return (
        f"SELECT * FROM {TABLE} WHERE {name} >= {int(begin)} AND {name} <= {int(end)}"
        f" AND type = '{OBJECT_TYPE}';"
    )
