"""Line-oriented result file.

One line per matched record::

    <owner uuid> <object uuid> <storage id 1> ... <storage id n>
"""

from __future__ import annotations

import logging
import os
from collections.abc import Sequence
from pathlib import Path
from typing import TYPE_CHECKING

from ..core.exceptions import SinkWriteError

if TYPE_CHECKING:
    from ..runtime.classifier import MatchLine

logger = logging.getLogger(__name__)


class LineFileSink:
    """Appends matched records to a text file, one batch per chunk."""

    def __init__(self, path: str | os.PathLike[str]) -> None:
        self.path = Path(path)
        try:
            self._fh = open(self.path, "a", encoding="utf-8", newline="\n")
        except OSError as e:
            raise SinkWriteError(f"cannot open output file {self.path}: {e}") from e
        self.lines_written = 0
        logger.info("opened output file", extra={"path": str(self.path)})

    async def write(self, items: Sequence[MatchLine]) -> int:
        if not items:
            return 0
        if self._fh.closed:
            raise SinkWriteError(f"output file {self.path} is closed")
        try:
            self._fh.write("".join(f"{item.format()}\n" for item in items))
            self._fh.flush()
        except OSError as e:
            raise SinkWriteError(f"error writing output file {self.path}: {e}") from e
        self.lines_written += len(items)
        return len(items)

    async def close(self) -> None:
        if self._fh.closed:
            return
        try:
            self._fh.close()
        except OSError as e:
            raise SinkWriteError(f"error closing output file {self.path}: {e}") from e
        logger.info(
            "output file finished",
            extra={"path": str(self.path), "lines_written": self.lines_written},
        )
