"""File-backed bit-address filter for 128-bit identifiers.

The filter is a fixed 2^32-bit bitmap stored in a 512 MiB file. An identifier
is split into four big-endian 32-bit groups and each group is used directly as
a bit address; no hash is applied. ``insert`` sets the four bits, ``query``
reports whether all four are set.

Properties:
    - Storage is fixed regardless of how many identifiers are inserted.
    - No false negatives: a bit is never cleared once set.
    - False positives are possible. Because addresses are the raw identifier
      groups, identifiers that share groups (e.g. the fixed version and
      variant bits of one UUID generation scheme) collide more often than
      they would under a uniform hash.
    - The file is reused across runs, which is what makes dedup resumable.
    - Single writer. Nothing here locks the file; callers serialize access.

File format:
    Byte ``addr // 8``, bit ``addr % 8`` (LSB first) records whether address
    ``addr`` has been observed. A missing file is created zero-filled (sparse
    where the filesystem supports it).
"""

from __future__ import annotations

import asyncio
import logging
import os
import struct
from pathlib import Path
from uuid import UUID

from ..core.exceptions import InvalidIdentifierError, SinkWriteError

logger = logging.getLogger(__name__)

BITS_IN_ADDRESS = 32
BITS_IN_MAP = 2**BITS_IN_ADDRESS
BYTES_IN_MAP = BITS_IN_MAP // 8
IDENTIFIER_BYTES = 16

_ADDRESS_STRUCT = struct.Struct(">IIII")
_HEX_DIGITS = frozenset("0123456789abcdefABCDEF")

Identifier = str | bytes | UUID


def identifier_bytes(identifier: Identifier) -> bytes:
    """Normalize an identifier to its 16 raw bytes.

    Text is stripped of every non-hex character before decoding, so any
    hyphenation or brace style is accepted.

    Raises:
        InvalidIdentifierError: If the identifier is not exactly 16 bytes
    """
    if isinstance(identifier, UUID):
        return identifier.bytes
    if isinstance(identifier, (bytes, bytearray, memoryview)):
        raw = bytes(identifier)
    elif isinstance(identifier, str):
        hex_text = "".join(ch for ch in identifier if ch in _HEX_DIGITS)
        if len(hex_text) % 2:
            raise InvalidIdentifierError(
                f"identifier must be 16 bytes (128 bits), but input has an odd number "
                f"of hex digits ({identifier!r})"
            )
        raw = bytes.fromhex(hex_text)
    else:
        raise InvalidIdentifierError(f"unsupported identifier type: {type(identifier).__name__}")

    if len(raw) != IDENTIFIER_BYTES:
        raise InvalidIdentifierError(
            f"identifier must be 16 bytes (128 bits), but input is {len(raw)} bytes long "
            f"({identifier!r})"
        )
    return raw


def identifier_addresses(identifier: Identifier) -> tuple[int, int, int, int]:
    """Split an identifier into its four big-endian 32-bit groups."""
    return _ADDRESS_STRUCT.unpack(identifier_bytes(identifier))


class BitAddressFilter:
    """Persistent fixed-capacity membership filter.

    Example:
        with BitAddressFilter("/var/tmp/objects.bits") as seen:
            if not seen.query(object_id):
                seen.insert(object_id)
    """

    def __init__(self, path: str | os.PathLike[str]) -> None:
        self.path = Path(path)
        self._fd: int | None = self._open(self.path)

    @staticmethod
    def _open(path: Path) -> int:
        try:
            fd = os.open(path, os.O_RDWR | os.O_CREAT | os.O_EXCL, 0o644)
            created = True
        except FileExistsError:
            fd = os.open(path, os.O_RDWR)
            created = False
        except OSError as e:
            raise SinkWriteError(f"cannot open filter file {path}: {e}") from e

        try:
            size = os.fstat(fd).st_size
            # files from older runs may carry a trailing sentinel byte; keep them as-is
            if size < BYTES_IN_MAP:
                os.ftruncate(fd, BYTES_IN_MAP)
        except OSError as e:
            os.close(fd)
            raise SinkWriteError(f"cannot size filter file {path}: {e}") from e

        logger.info(
            "filter_opened",
            extra={"path": str(path), "new_file": created, "size_bytes": max(size, BYTES_IN_MAP)},
        )
        return fd

    @property
    def closed(self) -> bool:
        return self._fd is None

    def _require_fd(self) -> int:
        if self._fd is None:
            raise ValueError(f"filter {self.path} is closed")
        return self._fd

    def insert(self, identifier: Identifier) -> None:
        """Set the four bits addressed by ``identifier``. Idempotent."""
        fd = self._require_fd()
        try:
            for addr in identifier_addresses(identifier):
                offset, bit = divmod(addr, 8)
                current = os.pread(fd, 1, offset)
                value = current[0] if current else 0
                updated = value | (1 << bit)
                if updated != value:
                    os.pwrite(fd, bytes((updated,)), offset)
        except OSError as e:
            raise SinkWriteError(f"cannot update filter file {self.path}: {e}") from e

    def query(self, identifier: Identifier) -> bool:
        """Return True iff all four bits addressed by ``identifier`` are set."""
        fd = self._require_fd()
        try:
            for addr in identifier_addresses(identifier):
                offset, bit = divmod(addr, 8)
                current = os.pread(fd, 1, offset)
                if not current or not current[0] & (1 << bit):
                    return False
        except OSError as e:
            raise SinkWriteError(f"cannot read filter file {self.path}: {e}") from e
        return True

    async def query_async(self, identifier: Identifier) -> bool:
        """Run ``query`` off the event loop."""
        return await asyncio.to_thread(self.query, identifier)

    def __contains__(self, identifier: Identifier) -> bool:
        return self.query(identifier)

    def close(self) -> None:
        """Release the file handle. Safe to call more than once."""
        if self._fd is None:
            return
        fd, self._fd = self._fd, None
        os.close(fd)
        logger.info("filter_closed", extra={"path": str(self.path)})

    def __enter__(self) -> BitAddressFilter:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
