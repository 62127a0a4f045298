"""Shared fixtures."""

from __future__ import annotations

import json
import uuid
from collections.abc import Callable
from typing import Any

import pytest

OWNER = "930896af-bf8c-48d4-885c-6573a94b1853"
DOMAIN = "us-east.example.com"
TARGET = f"3.stor.{DOMAIN}"
OTHER = f"1.stor.{DOMAIN}"


def build_row(
    row_id: int,
    *,
    column: str = "_id",
    sharks: tuple[str, ...] = (TARGET, OTHER),
    owner: str = OWNER,
    object_id: str | None = None,
    key: str | None = None,
    row_type: str = "object",
) -> dict[str, Any]:
    object_id = object_id or str(uuid.UUID(int=row_id + 1))
    value = {
        "owner": owner,
        "objectId": object_id,
        "key": key if key is not None else f"/{owner}/stor/obj-{row_id}",
        "type": row_type,
        "sharks": [{"datacenter": "us-east-1", "manta_storage_id": s} for s in sharks],
    }
    return {column: row_id, "type": row_type, "_key": value["key"], "_value": json.dumps(value)}


@pytest.fixture
def make_row() -> Callable[..., dict[str, Any]]:
    """Factory for raw table rows."""
    return build_row


@pytest.fixture
def no_sleep() -> Callable[[float], Any]:
    """Awaitable sleep that records delays instead of waiting."""
    delays: list[float] = []

    async def _sleep(delay: float) -> None:
        delays.append(delay)

    _sleep.delays = delays  # type: ignore[attr-defined]
    return _sleep
