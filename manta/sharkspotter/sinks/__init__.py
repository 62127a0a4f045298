"""Sinks for classifier output."""

from .base import RecordSink
from .filter import FilterSink
from .in_memory import InMemorySink
from .lines import LineFileSink

__all__ = [
    "RecordSink",
    "FilterSink",
    "InMemorySink",
    "LineFileSink",
]
