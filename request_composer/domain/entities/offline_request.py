from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class OfflineQueueEntry:
    url: str
    method: str
    payload: dict[str, Any] | None
    timestamp: str  # ISO-8601, UTC
    id: int | None = None  # assigned by the queue on append
