"""Approximate-membership filters."""

from .bitmap import (
    BITS_IN_MAP,
    BYTES_IN_MAP,
    BitAddressFilter,
    identifier_addresses,
    identifier_bytes,
)

__all__ = [
    "BitAddressFilter",
    "identifier_addresses",
    "identifier_bytes",
    "BITS_IN_MAP",
    "BYTES_IN_MAP",
]
